from sqlalchemy import Column, Integer, String
from room_reservation.db import Base


class Room(Base):
    __tablename__ = "room"

    id = Column(Integer, primary_key=True, index=True)
    nama_ruangan = Column(String(255), nullable=False)
    deskripsi = Column(String(1024), nullable=False)
    lokasi = Column(String(255), nullable=False)
    gambar_ruangan = Column(String(512), nullable=False)

from sqlalchemy import Column, DateTime, Integer, String
from room_reservation.db import Base


class Reservation(Base):
    __tablename__ = "reservasi_room"

    id = Column(Integer, primary_key=True, index=True)
    nama = Column(String(255), nullable=False)
    nim = Column(String(64), index=True, nullable=False)
    organisasi = Column(String(255), nullable=False)
    # free text, not a foreign key to room
    unit_ruangan = Column(String(255), nullable=False)
    # naive UTC instants
    tanggal_peminjaman = Column(DateTime, index=True, nullable=False)
    tanggal_kembali = Column(DateTime, nullable=False)
    surat_permohonan = Column(String(512), nullable=False)

from sqlalchemy import Column, Integer, String
from room_reservation.db import Base


class Register(Base):
    __tablename__ = "register"

    id = Column(Integer, primary_key=True, index=True)
    username = Column(String(255), nullable=False)
    nim = Column(String(64), index=True, nullable=False)
    password = Column(String(255), nullable=False)

from pydantic import BaseModel, ConfigDict


class RoomBase(BaseModel):
    nama_ruangan: str
    deskripsi: str
    lokasi: str
    gambar_ruangan: str


class RoomResponse(RoomBase):
    id: int

    model_config = ConfigDict(from_attributes=True)

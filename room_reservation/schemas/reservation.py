from pydantic import BaseModel
from room_reservation.models.reservation import Reservation
from room_reservation.utils.timezone import to_civil


class ReservationResponse(BaseModel):
    id: int
    nama: str
    nim: str
    organisasi: str
    unit_ruangan: str
    # civil time, "YYYY-MM-DD HH:MM:SS"
    tanggal_peminjaman: str
    tanggal_kembali: str
    surat_permohonan: str

    @classmethod
    def from_reservation(cls, reservation: Reservation, zone: str) -> "ReservationResponse":
        return cls(
            id=reservation.id,
            nama=reservation.nama,
            nim=reservation.nim,
            organisasi=reservation.organisasi,
            unit_ruangan=reservation.unit_ruangan,
            tanggal_peminjaman=to_civil(reservation.tanggal_peminjaman, zone),
            tanggal_kembali=to_civil(reservation.tanggal_kembali, zone),
            surat_permohonan=reservation.surat_permohonan,
        )

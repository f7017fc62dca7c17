import logging
from typing import List, Optional
from fastapi import APIRouter, Depends, File, Form, UploadFile
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from room_reservation.config import Settings
from room_reservation.db import get_db
from room_reservation.dependencies import get_app_settings, get_document_store
from room_reservation.errors import DatabaseError, ValidationError
from room_reservation.models.reservation import Reservation
from room_reservation.schemas.envelope import Envelope
from room_reservation.schemas.reservation import ReservationResponse
from room_reservation.utils.storage import FileStore
from room_reservation.utils.timezone import civil_day_bounds, civil_today_start, parse_civil
from room_reservation.utils.validation_helpers import require_fields

logger = logging.getLogger(__name__)

router = APIRouter(tags=["reservations"])


def _fetch(query, what: str) -> List[Reservation]:
    try:
        return query.all()
    except SQLAlchemyError as e:
        logger.error(f"Database error listing {what}: {e}")
        raise DatabaseError("Failed to retrieve reservations", detail=str(e)) from e


def _render(reservations: List[Reservation], settings: Settings) -> dict:
    return {
        "data": [
            ReservationResponse.from_reservation(reservation, settings.timezone)
            for reservation in reservations
        ]
    }


@router.post(
    "/reservasi_room",
    response_model=Envelope[ReservationResponse],
    response_model_exclude_none=True,
    summary="Create a reservation",
)
def create_reservation(
    nama: Optional[str] = Form(None),
    nim: Optional[str] = Form(None),
    organisasi: Optional[str] = Form(None),
    unit_ruangan: Optional[str] = Form(None),
    tanggal_peminjaman: Optional[str] = Form(None),
    tanggal_kembali: Optional[str] = Form(None),
    surat_permohonan: Optional[UploadFile] = File(None),
    db: Session = Depends(get_db),
    document_store: FileStore = Depends(get_document_store),
    settings: Settings = Depends(get_app_settings),
):
    """
    Create a room reservation with its request letter.

    - **tanggal_peminjaman** / **tanggal_kembali**: ISO dates or datetimes.
      Values without an offset are civil time in the configured zone.
    - **surat_permohonan**: request letter file (multipart).

    A missing field yields 400 with `missing_fields`, one flag per field.
    """
    require_fields(
        {
            "nama": nama,
            "nim": nim,
            "organisasi": organisasi,
            "unit_ruangan": unit_ruangan,
            "tanggal_peminjaman": tanggal_peminjaman,
            "tanggal_kembali": tanggal_kembali,
            "surat_permohonan": surat_permohonan.filename if surat_permohonan is not None else None,
        },
        "Please provide complete reservation details",
        report_fields=True,
    )

    dates = {}
    invalid = {}
    for name, value in (
        ("tanggal_peminjaman", tanggal_peminjaman),
        ("tanggal_kembali", tanggal_kembali),
    ):
        try:
            dates[name] = parse_civil(value, settings.timezone)
            invalid[name] = False
        except ValueError:
            invalid[name] = True
    if any(invalid.values()):
        logger.error(f"Invalid reservation dates: {tanggal_peminjaman}, {tanggal_kembali}")
        raise ValidationError("Invalid date format", missing_fields=invalid)

    document_path = document_store.store(surat_permohonan.file, surat_permohonan.filename)
    logger.debug(f"Creating reservation for nim: {nim}, unit_ruangan: {unit_ruangan}")

    db_reservation = Reservation(
        nama=nama,
        nim=nim,
        organisasi=organisasi,
        unit_ruangan=unit_ruangan,
        tanggal_peminjaman=dates["tanggal_peminjaman"],
        tanggal_kembali=dates["tanggal_kembali"],
        surat_permohonan=document_path,
    )
    try:
        db.add(db_reservation)
        db.commit()
        db.refresh(db_reservation)
    except SQLAlchemyError as e:
        db.rollback()
        document_store.remove(document_path)
        logger.error(f"Database error creating reservation: {e}")
        raise DatabaseError("Failed to create reservation", detail=str(e)) from e

    logger.debug(f"Created reservation: {db_reservation.id}")
    return {
        "message": "Reservation created successfully",
        "data": ReservationResponse.from_reservation(db_reservation, settings.timezone),
    }


@router.get(
    "/reservasi_rooms",
    response_model=Envelope[List[ReservationResponse]],
    response_model_exclude_none=True,
    summary="List all reservations",
)
def get_reservations(
    db: Session = Depends(get_db), settings: Settings = Depends(get_app_settings)
):
    query = db.query(Reservation).order_by(Reservation.id)
    return _render(_fetch(query, "reservations"), settings)


@router.get(
    "/reservasi-room",
    response_model=Envelope[List[ReservationResponse]],
    response_model_exclude_none=True,
    summary="List reservations from today on",
)
def get_upcoming_reservations(
    db: Session = Depends(get_db), settings: Settings = Depends(get_app_settings)
):
    """
    Reservations whose borrow start is at or after the start of the current
    civil day, earliest first.
    """
    today_start = civil_today_start(settings.timezone)
    query = (
        db.query(Reservation)
        .filter(Reservation.tanggal_peminjaman >= today_start)
        .order_by(Reservation.tanggal_peminjaman.asc())
    )
    reservations = _fetch(query, "upcoming reservations")
    logger.debug(f"Retrieved {len(reservations)} reservations from {today_start} UTC on")
    return _render(reservations, settings)


@router.get(
    "/reservasi-room/today",
    response_model=Envelope[List[ReservationResponse]],
    response_model_exclude_none=True,
    summary="List today's reservations",
)
def get_today_reservations(
    db: Session = Depends(get_db), settings: Settings = Depends(get_app_settings)
):
    """
    Reservations whose borrow start falls on the current civil day.
    """
    start, end = civil_day_bounds(settings.timezone)
    query = (
        db.query(Reservation)
        .filter(
            Reservation.tanggal_peminjaman >= start,
            Reservation.tanggal_peminjaman < end,
        )
        .order_by(Reservation.tanggal_peminjaman.asc())
    )
    return _render(_fetch(query, "today's reservations"), settings)


@router.get(
    "/api/history/{nim}",
    response_model=Envelope[List[ReservationResponse]],
    response_model_exclude_none=True,
    summary="Reservation history of one requester",
)
def get_history(
    nim: str,
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
):
    query = (
        db.query(Reservation)
        .filter(Reservation.nim == nim)
        .order_by(Reservation.tanggal_peminjaman.desc())
    )
    return _render(_fetch(query, f"history for nim {nim}"), settings)

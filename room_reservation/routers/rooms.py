import logging
from typing import List, Optional
from fastapi import APIRouter, Depends, File, Form, UploadFile
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from room_reservation.db import get_db
from room_reservation.dependencies import get_image_store
from room_reservation.errors import DatabaseError, NotFoundError
from room_reservation.models.room import Room
from room_reservation.schemas.envelope import Envelope
from room_reservation.schemas.room import RoomResponse
from room_reservation.utils.storage import FileStore
from room_reservation.utils.validation_helpers import require_fields

logger = logging.getLogger(__name__)

router = APIRouter(tags=["rooms"])


@router.post(
    "/room",
    response_model=Envelope[RoomResponse],
    response_model_exclude_none=True,
    summary="Create a room",
)
def create_room(
    nama_ruangan: Optional[str] = Form(None),
    deskripsi: Optional[str] = Form(None),
    lokasi: Optional[str] = Form(None),
    gambar_ruangan: Optional[UploadFile] = File(None),
    db: Session = Depends(get_db),
    image_store: FileStore = Depends(get_image_store),
):
    """
    Create a new room with its image.

    - **nama_ruangan**: room name.
    - **deskripsi**: description.
    - **lokasi**: location.
    - **gambar_ruangan**: image file (multipart).

    Returns the inserted row with its generated ID.
    """
    require_fields(
        {
            "nama_ruangan": nama_ruangan,
            "deskripsi": deskripsi,
            "lokasi": lokasi,
            "gambar_ruangan": gambar_ruangan.filename if gambar_ruangan is not None else None,
        },
        "Please provide complete room details",
    )

    image_path = image_store.store(gambar_ruangan.file, gambar_ruangan.filename)
    logger.debug(
        f"Received room data: nama_ruangan={nama_ruangan}, deskripsi={deskripsi}, "
        f"lokasi={lokasi}, gambar_ruangan={image_path}"
    )

    db_room = Room(
        nama_ruangan=nama_ruangan,
        deskripsi=deskripsi,
        lokasi=lokasi,
        gambar_ruangan=image_path,
    )
    try:
        db.add(db_room)
        db.commit()
        db.refresh(db_room)
    except SQLAlchemyError as e:
        db.rollback()
        image_store.remove(image_path)
        logger.error(f"Database error creating room: {e}")
        raise DatabaseError("Failed to create room", detail=str(e)) from e

    logger.debug(f"Created room: {db_room.id}")
    return {"message": "Room created successfully", "data": db_room}


@router.get(
    "/rooms",
    response_model=Envelope[List[RoomResponse]],
    response_model_exclude_none=True,
    summary="List all rooms",
)
def get_rooms(db: Session = Depends(get_db)):
    try:
        rooms = db.query(Room).order_by(Room.id).all()
    except SQLAlchemyError as e:
        logger.error(f"Database error listing rooms: {e}")
        raise DatabaseError("Failed to retrieve rooms", detail=str(e)) from e
    logger.debug(f"Retrieved {len(rooms)} rooms")
    return {"data": rooms}


@router.get(
    "/room/{room_id}",
    response_model=Envelope[RoomResponse],
    response_model_exclude_none=True,
    summary="Get a room by ID",
)
def get_room(room_id: int, db: Session = Depends(get_db)):
    """
    Retrieve a specific room by ID.
    """
    try:
        room = db.query(Room).filter(Room.id == room_id).first()
    except SQLAlchemyError as e:
        logger.error(f"Database error fetching room {room_id}: {e}")
        raise DatabaseError("Failed to retrieve room", detail=str(e)) from e
    if not room:
        logger.error(f"Room not found: {room_id}")
        raise NotFoundError("Room not found")
    return {"data": room}

import logging
from typing import Any, Dict
from fastapi import APIRouter, Depends
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from room_reservation.db import get_db
from room_reservation.dependencies import read_body
from room_reservation.errors import AuthError, CredentialError, DatabaseError
from room_reservation.models.register import Register
from room_reservation.schemas.envelope import Envelope
from room_reservation.schemas.register import RegisterResponse
from room_reservation.utils.auth import get_password_hash, verify_password
from room_reservation.utils.validation_helpers import require_fields

logger = logging.getLogger(__name__)

router = APIRouter(tags=["auth"])


def _text(body: Dict[str, Any], name: str):
    value = body.get(name)
    return str(value) if value is not None else None


@router.post(
    "/register",
    response_model=Envelope[RegisterResponse],
    response_model_exclude_none=True,
    summary="Register a user",
)
def register(body: Dict[str, Any] = Depends(read_body), db: Session = Depends(get_db)):
    """
    Register a user by username, nim and password.
    Accepts JSON or form-encoded bodies. Only the bcrypt hash is stored.
    """
    username, nim, password = _text(body, "username"), _text(body, "nim"), _text(body, "password")
    require_fields(
        {"username": username, "nim": nim, "password": password},
        "Please provide complete registration details",
    )

    try:
        hashed_password = get_password_hash(password)
    except (ValueError, TypeError) as e:
        logger.error(f"Failed to hash password for nim {nim}: {e}")
        raise CredentialError("Failed to register user", detail=str(e)) from e

    db_user = Register(username=username, nim=nim, password=hashed_password)
    try:
        db.add(db_user)
        db.commit()
        db.refresh(db_user)
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Database error registering nim {nim}: {e}")
        raise DatabaseError("Failed to register user", detail=str(e)) from e

    logger.debug(f"Registered user: {db_user.id}, nim: {nim}")
    return {"message": "User registered successfully", "data": db_user}


@router.post(
    "/login",
    response_model=Envelope[RegisterResponse],
    response_model_exclude_none=True,
    summary="Check a user's credentials",
)
def login(body: Dict[str, Any] = Depends(read_body), db: Session = Depends(get_db)):
    """
    Check a nim and password pair. No session or token is issued.

    An unknown nim and a wrong password are both 401, with different messages.
    """
    nim, password = _text(body, "nim"), _text(body, "password")
    require_fields({"nim": nim, "password": password}, "Please provide nim and password")

    try:
        user = db.query(Register).filter(Register.nim == nim).order_by(Register.id).first()
    except SQLAlchemyError as e:
        logger.error(f"Database error looking up nim {nim}: {e}")
        raise DatabaseError("Server error", detail=str(e)) from e
    if not user:
        logger.error(f"Login failed, nim not found: {nim}")
        raise AuthError("NIM tidak ditemukan.")

    try:
        matches = verify_password(password, user.password)
    except (ValueError, TypeError) as e:
        logger.error(f"Failed to verify password for nim {nim}: {e}")
        raise CredentialError("Server error", detail=str(e)) from e
    if not matches:
        logger.error(f"Login failed, wrong password for nim: {nim}")
        raise AuthError("Password salah.")

    logger.debug(f"Login succeeded for nim: {nim}")
    return {"message": "Login successful", "data": user}

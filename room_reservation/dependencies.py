from typing import Any, Dict
from fastapi import Request
from room_reservation.config import Settings
from room_reservation.errors import ValidationError
from room_reservation.utils.storage import FileStore


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_image_store(request: Request) -> FileStore:
    return request.app.state.image_store


def get_document_store(request: Request) -> FileStore:
    return request.app.state.document_store


async def read_body(request: Request) -> Dict[str, Any]:
    """Read a JSON or form-encoded body into a plain dict."""
    content_type = request.headers.get("content-type", "")
    if content_type.startswith("application/json"):
        try:
            payload = await request.json()
        except ValueError as e:
            raise ValidationError("Invalid JSON body", detail=str(e)) from e
        return payload if isinstance(payload, dict) else {}
    form = await request.form()
    return {key: value for key, value in form.items() if isinstance(value, str)}

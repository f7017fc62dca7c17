import logging
import os
import shutil
import uuid
from typing import BinaryIO, Union
from room_reservation.errors import StorageError

logger = logging.getLogger(__name__)

IMAGE_DIR = "img"
DOCUMENT_DIR = "file_permohonan"


def ensure_dir(path: str) -> None:
    os.makedirs(path, exist_ok=True)


def ensure_upload_dirs(upload_dir: str) -> None:
    """Create the image and document directories if they do not exist yet."""
    for kind in (IMAGE_DIR, DOCUMENT_DIR):
        ensure_dir(os.path.join(upload_dir, kind))


class FileStore:
    """Filesystem store for one kind of uploaded artifact."""

    def __init__(self, directory: str):
        self.directory = directory

    def store(self, data: Union[bytes, BinaryIO], original_name: str) -> str:
        """Write `data` under a fresh name and return the path written."""
        extension = os.path.splitext(original_name or "")[1].lower()
        path = os.path.join(self.directory, f"{uuid.uuid4().hex}{extension}")
        try:
            ensure_dir(self.directory)
            with open(path, "wb") as out:
                if isinstance(data, bytes):
                    out.write(data)
                else:
                    shutil.copyfileobj(data, out)
        except OSError as e:
            logger.error(f"Failed to write upload {original_name!r} to {path}: {e}")
            raise StorageError("Failed to store uploaded file", detail=str(e)) from e
        logger.debug(f"Stored upload {original_name!r} at {path}")
        return path.replace(os.sep, "/")

    def remove(self, path: str) -> None:
        """Delete an artifact whose row was never written."""
        try:
            os.remove(path)
        except FileNotFoundError:
            pass
        except OSError as e:
            logger.error(f"Failed to remove orphaned upload {path}: {e}")

import logging
import os
from contextlib import asynccontextmanager
from typing import Optional
from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
from sqlalchemy.exc import SQLAlchemyError
from room_reservation.config import Settings, get_settings
from room_reservation.db import create_db_engine, create_session_factory, init_database
from room_reservation.errors import (
    AppError,
    handle_app_errors,
    handle_broad_exceptions,
    handle_database_errors,
    handle_request_validation_errors,
)
from room_reservation.routers import auth, reservations, rooms
from room_reservation.utils.storage import DOCUMENT_DIR, IMAGE_DIR, FileStore, ensure_upload_dirs

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    "lifespan for initing database and releasing the pool"
    init_database(app.state.engine)
    yield
    app.state.engine.dispose()


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """Create the application; it owns its engine, pool and file stores."""
    settings = settings or get_settings()
    logging.basicConfig(level=settings.log_level.upper())

    app = FastAPI(
        lifespan=lifespan,
        title="Room reservation",
        description="Room registration and reservation backend based on FastAPI.",
        version="0.1.0",
        license_info={
            "name": "MIT",
            "url": "https://opensource.org/licenses/MIT",
        },
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    engine = create_db_engine(settings)
    app.state.settings = settings
    app.state.engine = engine
    app.state.session_factory = create_session_factory(engine)

    ensure_upload_dirs(settings.upload_dir)
    app.state.image_store = FileStore(os.path.join(settings.upload_dir, IMAGE_DIR))
    app.state.document_store = FileStore(os.path.join(settings.upload_dir, DOCUMENT_DIR))
    app.mount("/uploads", StaticFiles(directory=settings.upload_dir), name="uploads")

    app.include_router(auth.router)
    app.include_router(rooms.router)
    app.include_router(reservations.router)

    app.add_exception_handler(AppError, handle_app_errors)
    app.add_exception_handler(RequestValidationError, handle_request_validation_errors)
    app.add_exception_handler(SQLAlchemyError, handle_database_errors)
    app.middleware("http")(handle_broad_exceptions)

    logger.info(f"Application created, database: {engine.url!r}, uploads: {settings.upload_dir}")
    return app


def run():
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "room_reservation.main:create_app",
        factory=True,
        host=settings.host,
        port=settings.port,
    )


if __name__ == "__main__":
    run()

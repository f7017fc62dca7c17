import os
from fastapi import Request
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool
from room_reservation.config import Settings


Base = declarative_base()


def is_memory_sqlite(database_url: str) -> bool:
    url = make_url(database_url)
    return url.get_backend_name() == "sqlite" and url.database in (None, "", ":memory:")


def create_db_engine(settings: Settings) -> Engine:
    """Build an engine whose pool holds at most `settings.pool_size` connections."""
    connect_args = {}
    if settings.database_url.startswith("sqlite"):
        connect_args["check_same_thread"] = False
    if is_memory_sqlite(settings.database_url):
        # one shared connection, otherwise each thread sees its own empty database
        return create_engine(
            settings.database_url, connect_args=connect_args, poolclass=StaticPool
        )
    return create_engine(
        settings.database_url,
        connect_args=connect_args,
        pool_size=settings.pool_size,
        max_overflow=0,
        pool_timeout=settings.pool_timeout,
        pool_pre_ping=True,
    )


def create_session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


def init_database(engine: Engine):
    # imported for their side effect of registering tables on Base
    from room_reservation.models import register, reservation, room  # noqa: F401

    database = engine.url.database
    if engine.url.get_backend_name() == "sqlite" and database and database != ":memory:":
        directory = os.path.dirname(database)
        if directory and not os.path.exists(directory):
            os.makedirs(directory)
    Base.metadata.create_all(bind=engine)


def get_db(request: Request):
    """Provide a database session that is closed on every exit path."""
    db = request.app.state.session_factory()
    try:
        yield db
    finally:
        db.close()

import pytest
from fastapi.testclient import TestClient

from room_reservation.config import Settings
from room_reservation.main import create_app
from room_reservation.models.register import Register
from room_reservation.utils.auth import get_password_hash
from tests.conf_tests import TEST_ROOM_DATA, image_file


@pytest.fixture
def settings(tmp_path):
    """Settings pointing at a per-test database and upload directory"""
    return Settings(
        database_url=f"sqlite:///{tmp_path / 'db' / 'tests.db'}",
        upload_dir=str(tmp_path / "uploads"),
        pool_size=2,
        pool_timeout=2,
        log_level="DEBUG",
    )


@pytest.fixture
def app(settings):
    return create_app(settings)


@pytest.fixture
def client(app):
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def test_db(app, client):
    """Provide a database session for testing"""
    db = app.state.session_factory()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def test_room(client):
    response = client.post("/room", data=TEST_ROOM_DATA, files=image_file())
    assert response.status_code == 200
    return response.json()["data"]


@pytest.fixture
def test_user(test_db):
    """Fixture to create a registered user in the database"""
    user = Register(
        username="budi", nim="12345", password=get_password_hash("testpassword")
    )
    test_db.add(user)
    test_db.commit()
    test_db.refresh(user)
    return user

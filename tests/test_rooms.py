import os
from concurrent.futures import ThreadPoolExecutor
from fastapi import status
from fastapi.testclient import TestClient
from room_reservation.config import Settings
from room_reservation.main import create_app
from room_reservation.models.room import Room
from tests.conf_tests import TEST_ROOM_DATA, image_file


def test_create_room_success(client):
    response = client.post("/room", data=TEST_ROOM_DATA, files=image_file())
    assert response.status_code == status.HTTP_200_OK
    body = response.json()
    assert body["error"] is False
    assert body["message"] == "Room created successfully"
    data = body["data"]
    assert isinstance(data["id"], int) and data["id"] > 0
    assert data["nama_ruangan"] == "Lab A"
    assert data["gambar_ruangan"].endswith(".png")
    assert "/img/" in data["gambar_ruangan"]
    assert os.path.exists(data["gambar_ruangan"])


def test_create_room_then_fetch_by_id(client, test_room):
    response = client.get(f"/room/{test_room['id']}")
    assert response.status_code == status.HTTP_200_OK
    data = response.json()["data"]
    assert data == test_room


def test_uploaded_names_are_unique(client):
    first = client.post("/room", data=TEST_ROOM_DATA, files=image_file()).json()
    second = client.post("/room", data=TEST_ROOM_DATA, files=image_file()).json()
    assert first["data"]["gambar_ruangan"] != second["data"]["gambar_ruangan"]


def test_create_room_missing_field(client, test_db, settings):
    for field in TEST_ROOM_DATA:
        data = dict(TEST_ROOM_DATA, **{field: ""})
        response = client.post("/room", data=data, files=image_file())
        assert response.status_code == status.HTTP_400_BAD_REQUEST
        body = response.json()
        assert body["error"] is True
        assert body["message"] == "Please provide complete room details"
        assert "missing_fields" not in body

    assert test_db.query(Room).count() == 0
    assert os.listdir(os.path.join(settings.upload_dir, "img")) == []


def test_create_room_missing_image(client, test_db, settings):
    response = client.post("/room", data=TEST_ROOM_DATA)
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert test_db.query(Room).count() == 0
    assert os.listdir(os.path.join(settings.upload_dir, "img")) == []


def test_uploaded_image_is_served(client, test_room, settings):
    relative = os.path.relpath(test_room["gambar_ruangan"], settings.upload_dir)
    response = client.get(f"/uploads/{relative}")
    assert response.status_code == status.HTTP_200_OK
    assert response.content == b"\x89PNG fake image"


def test_get_rooms_empty(client):
    response = client.get("/rooms")
    assert response.status_code == status.HTTP_200_OK
    assert response.json() == {"error": False, "data": []}


def test_get_rooms_with_data(client, test_room):
    response = client.get("/rooms")
    assert response.status_code == status.HTTP_200_OK
    data = response.json()["data"]
    assert len(data) == 1
    assert data[0]["id"] == test_room["id"]
    assert data[0]["nama_ruangan"] == test_room["nama_ruangan"]


def test_get_room_not_found(client):
    response = client.get("/room/9999")
    assert response.status_code == status.HTTP_404_NOT_FOUND
    assert response.json() == {"error": True, "message": "Room not found"}


def test_get_room_invalid_id(client):
    response = client.get("/room/abc")
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json()["error"] is True


def test_create_room_database_error_removes_file(client, app, settings):
    with app.state.engine.begin() as conn:
        conn.exec_driver_sql("DROP TABLE room")

    response = client.post("/room", data=TEST_ROOM_DATA, files=image_file())
    assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
    body = response.json()
    assert body["error"] is True
    assert body["message"] == "Failed to create room"
    assert body["detail"]
    assert os.listdir(os.path.join(settings.upload_dir, "img")) == []


def test_get_rooms_database_error(client, app):
    with app.state.engine.begin() as conn:
        conn.exec_driver_sql("DROP TABLE room")

    response = client.get("/rooms")
    assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
    assert response.json()["message"] == "Failed to retrieve rooms"


def test_pool_is_released_after_failures(client, app):
    with app.state.engine.begin() as conn:
        conn.exec_driver_sql("DROP TABLE room")

    # more requests than the pool holds
    for _ in range(5):
        assert client.get("/rooms").status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
        assert client.get("/room/1").status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
    assert app.state.engine.pool.checkedout() == 0
    assert client.get("/reservasi_rooms").status_code == status.HTTP_200_OK


def test_concurrent_requests_up_to_pool_size(client, app, settings, test_room):
    with ThreadPoolExecutor(max_workers=settings.pool_size) as executor:
        responses = list(
            executor.map(lambda _: client.get("/rooms"), range(settings.pool_size))
        )
    assert [r.status_code for r in responses] == [status.HTTP_200_OK] * settings.pool_size
    assert all(r.json()["data"][0]["id"] == test_room["id"] for r in responses)
    assert app.state.engine.pool.checkedout() == 0


def test_pool_timeout_is_reported(settings):
    app = create_app(settings.model_copy(update={"pool_timeout": 0.2}))
    with TestClient(app) as client:
        held = [app.state.engine.connect() for _ in range(settings.pool_size)]
        try:
            response = client.get("/rooms")
        finally:
            for conn in held:
                conn.close()
        assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
        body = response.json()
        assert body["error"] is True
        assert body["message"] == "Failed to retrieve rooms"
        assert body["detail"]
        assert app.state.engine.pool.checkedout() == 0
        assert client.get("/rooms").status_code == status.HTTP_200_OK


def test_in_memory_database(tmp_path):
    app = create_app(Settings(database_url="sqlite://", upload_dir=str(tmp_path / "uploads")))
    with TestClient(app) as client:
        created = client.post("/room", data=TEST_ROOM_DATA, files=image_file())
        assert created.status_code == status.HTTP_200_OK
        response = client.get(f"/room/{created.json()['data']['id']}")
        assert response.status_code == status.HTTP_200_OK
        assert response.json()["data"]["nama_ruangan"] == "Lab A"

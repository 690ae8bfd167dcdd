import asyncio
from typing import List, Optional, Tuple

import pytest
from fastapi.testclient import TestClient
from mongomock_motor import AsyncMongoMockClient

from app.core.config import Settings
from app.core.exceptions import StorageError
from app.db.indexes import create_indexes
from app.db.mongo import MongoDatabase
from app.main import create_app
from app.services.storage_service import object_key

BUCKET_URL = "https://test-bucket.s3.us-east-1.amazonaws.com"
PICTURE = ("avatar.png", b"\x89PNG fake image bytes", "image/png")


class FakeObjectStore:
    """Records uploads instead of talking to S3."""

    def __init__(self):
        self.uploads: List[Tuple[str, bytes, Optional[str]]] = []
        self.fail = False

    async def upload(self, data: bytes, original_name: str, content_type: Optional[str]) -> str:
        if self.fail:
            raise StorageError()
        key = object_key(original_name)
        self.uploads.append((key, data, content_type))
        return f"{BUCKET_URL}/{key}"


@pytest.fixture
def settings(tmp_path):
    return Settings(
        ENVIRONMENT="development",
        JWT_SECRET="test-secret",
        JWT_EXPIRES_MINUTES=60,
        PASSWORD_HASH_ROUNDS=1000,
        ASSETS_DIR=str(tmp_path / "assets"),
    )


@pytest.fixture
def db(settings):
    database = MongoDatabase(settings, database=AsyncMongoMockClient()["sociopedia_test"])
    asyncio.run(create_indexes(database))
    return database


@pytest.fixture
def store():
    return FakeObjectStore()


@pytest.fixture
def app(settings, db, store):
    application = create_app(settings)
    application.state.database = db
    application.state.object_store = store
    return application


@pytest.fixture
def client(app):
    return TestClient(app)


def register_user(client, email="a@x.com", password="p", **profile):
    data = {"email": email, "password": password, "first_name": "Ada", "last_name": "Lovelace"}
    data.update(profile)
    return client.post("/auth/register", data=data, files={"picture": PICTURE})


def login(client, email="a@x.com", password="p"):
    response = client.post("/auth/login", json={"email": email, "password": password})
    assert response.status_code == 200, response.text
    body = response.json()
    return body["token"], body["user"]


def auth_header(token):
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def alice(client):
    register_user(client, email="alice@x.com", password="alice-pw", first_name="Alice")
    token, user = login(client, "alice@x.com", "alice-pw")
    return {"token": token, "id": user["id"], "headers": auth_header(token)}


@pytest.fixture
def bob(client):
    register_user(client, email="bob@x.com", password="bob-pw", first_name="Bob")
    token, user = login(client, "bob@x.com", "bob-pw")
    return {"token": token, "id": user["id"], "headers": auth_header(token)}

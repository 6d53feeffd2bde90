"""
Pytest configuration and shared fixtures.
"""

import copy
from typing import Any, Dict, List, Optional

import pytest
from bson import ObjectId
from fastapi.testclient import TestClient
from pymongo.errors import DuplicateKeyError

from api.config import APIConfig
from api.main import create_app
from catalog.database import MongoDBManager
from catalog.models import BookDocument, UserDocument, utcnow


class InMemoryDBManager(MongoDBManager):
    """
    MongoDBManager backed by dicts, for route tests that need real
    round trips without a MongoDB server.
    """

    def __init__(self):
        super().__init__(connection_url="memory://", database_name="test")
        self.user_docs: Dict[ObjectId, Dict[str, Any]] = {}
        self.book_docs: Dict[ObjectId, Dict[str, Any]] = {}
        self.connected = False

    async def connect(self) -> None:
        self.connected = True

    async def disconnect(self) -> None:
        self.connected = False

    async def health_check(self) -> Dict[str, Any]:
        return {"status": "healthy" if self.connected else "unhealthy"}

    async def create_user(self, user: UserDocument) -> str:
        doc = user.to_mongo()
        if any(existing["email"] == doc["email"] for existing in self.user_docs.values()):
            raise DuplicateKeyError("E11000 duplicate key error collection: users index: email_1")
        doc["_id"] = ObjectId()
        self.user_docs[doc["_id"]] = doc
        return str(doc["_id"])

    async def get_user_by_email(self, email: str) -> Optional[Dict[str, Any]]:
        for doc in self.user_docs.values():
            if doc["email"] == email:
                return copy.deepcopy(doc)
        return None

    async def user_exists(self, user_id: str) -> bool:
        return ObjectId.is_valid(user_id) and ObjectId(user_id) in self.user_docs

    async def insert_book(self, book: BookDocument) -> Dict[str, Any]:
        doc = book.to_mongo()
        doc["_id"] = ObjectId()
        self.book_docs[doc["_id"]] = doc
        return copy.deepcopy(doc)

    async def list_books(self) -> List[Dict[str, Any]]:
        docs = sorted(
            self.book_docs.values(),
            key=lambda d: (d["created_at"], d["_id"]),
            reverse=True,
        )
        return copy.deepcopy(docs)

    async def get_book(self, book_id: ObjectId) -> Optional[Dict[str, Any]]:
        doc = self.book_docs.get(book_id)
        return copy.deepcopy(doc) if doc else None

    async def update_book(self, book_id: ObjectId, update_data: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        doc = self.book_docs.get(book_id)
        if doc is None:
            return None
        doc.update(copy.deepcopy(update_data))
        doc["updated_at"] = utcnow()
        return copy.deepcopy(doc)

    async def delete_book(self, book_id: ObjectId) -> Optional[Dict[str, Any]]:
        return self.book_docs.pop(book_id, None)


@pytest.fixture
def api_config():
    """Configuration with a test-only signing secret."""
    return APIConfig(secret_key="test-secret-key", mongodb_database="library_test")


@pytest.fixture
def memory_db():
    """Create an in-memory store."""
    return InMemoryDBManager()


@pytest.fixture
def app(api_config, memory_db):
    """Create the application wired to the in-memory store."""
    return create_app(config=api_config, db_manager=memory_db)


@pytest.fixture
def client(app):
    """Create test client with lifespan events."""
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def signup_payload():
    """Sample signup payload."""
    return {
        "name": "Ada Reader",
        "email": "ada@example.com",
        "password": "s3cret-pass",
        "phone_number": "+358401234567",
        "gender": "female",
        "date_of_birth": "1990-05-17",
        "membership_status": "active",
    }


@pytest.fixture
def book_payload():
    """Sample book payload."""
    return {
        "title": "The Dispossessed",
        "author": "Ursula K. Le Guin",
        "isbn": "978-0061054884",
        "publisher": "Harper Voyager",
        "genre": "Science Fiction",
        "availability": {"isAvailable": True, "dueDate": None, "borrower": None},
    }


@pytest.fixture
def auth_token(client, signup_payload):
    """Sign up the sample user and return its token."""
    response = client.post("/api/users/signup", json=signup_payload)
    assert response.status_code == 201
    return response.json()["token"]


@pytest.fixture
def auth_headers(auth_token):
    return {"Authorization": f"Bearer {auth_token}"}

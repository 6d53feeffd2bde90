"""
MongoDB database utilities for async operations.
Handles connection, indexing, and CRUD operations for users and books.
"""

from typing import Any, Dict, List, Optional

import structlog
from bson import ObjectId
from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorCollection, AsyncIOMotorDatabase
from pymongo import DESCENDING, ReturnDocument
from pymongo.errors import ConnectionFailure

from .models import BookDocument, UserDocument, utcnow

logger = structlog.get_logger(__name__)


class MongoDBManager:
    """
    Async MongoDB manager for the library catalog.
    Owns the client and exposes one method per store operation.
    """

    def __init__(self, connection_url: str, database_name: str):
        """
        Initialize MongoDB manager.

        Args:
            connection_url: MongoDB connection URL
            database_name: Name of the database
        """
        self.connection_url = connection_url
        self.database_name = database_name
        self.client: Optional[AsyncIOMotorClient] = None
        self.database: Optional[AsyncIOMotorDatabase] = None
        self.users: Optional[AsyncIOMotorCollection] = None
        self.books: Optional[AsyncIOMotorCollection] = None

    async def connect(self) -> None:
        """Establish connection to MongoDB."""
        try:
            self.client = AsyncIOMotorClient(self.connection_url)
            self.database = self.client[self.database_name]
            self.users = self.database.users
            self.books = self.database.books

            await self.client.admin.command('ping')
            logger.info("Successfully connected to MongoDB", database=self.database_name)

            await self._create_indexes()

        except ConnectionFailure as e:
            logger.error("Failed to connect to MongoDB", error=str(e))
            raise

    async def disconnect(self) -> None:
        """Close MongoDB connection."""
        if self.client:
            self.client.close()
            logger.info("Disconnected from MongoDB")

    async def _create_indexes(self) -> None:
        try:
            # Email is the login key
            await self.users.create_index("email", unique=True)

            await self.books.create_index([("created_at", DESCENDING), ("_id", DESCENDING)])
            await self.books.create_index("user_id")

            logger.info("Successfully created MongoDB indexes")

        except Exception as e:
            logger.error("Failed to create indexes", error=str(e))
            raise

    async def health_check(self) -> Dict[str, Any]:
        """
        Perform database health check.

        Returns:
            Dictionary with health status
        """
        try:
            await self.database.command("ping")
            return {"status": "healthy"}
        except Exception as e:
            logger.error("Database health check failed", error=str(e))
            return {"status": "unhealthy", "error": str(e)}

    # Users

    async def create_user(self, user: UserDocument) -> str:
        """
        Insert a new user.

        Returns:
            The new user's identifier

        Raises:
            DuplicateKeyError: If the email is already registered
        """
        result = await self.users.insert_one(user.to_mongo())
        logger.debug("Successfully inserted user", user_id=str(result.inserted_id))
        return str(result.inserted_id)

    async def get_user_by_email(self, email: str) -> Optional[Dict[str, Any]]:
        return await self.users.find_one({"email": email})

    async def user_exists(self, user_id: str) -> bool:
        if not ObjectId.is_valid(user_id):
            return False
        count = await self.users.count_documents({"_id": ObjectId(user_id)}, limit=1)
        return count > 0

    # Books

    async def insert_book(self, book: BookDocument) -> Dict[str, Any]:
        """
        Insert a single book.

        Returns:
            The stored document including its ``_id``
        """
        book_dict = book.to_mongo()
        result = await self.books.insert_one(book_dict)
        book_dict["_id"] = result.inserted_id
        logger.debug("Successfully inserted book", book_id=str(result.inserted_id), title=book.title)
        return book_dict

    async def list_books(self) -> List[Dict[str, Any]]:
        """All books, newest first. ``_id`` breaks ties between equal timestamps."""
        cursor = self.books.find({}).sort([("created_at", DESCENDING), ("_id", DESCENDING)])
        return await cursor.to_list(length=None)

    async def get_book(self, book_id: ObjectId) -> Optional[Dict[str, Any]]:
        return await self.books.find_one({"_id": book_id})

    async def update_book(self, book_id: ObjectId, update_data: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        """
        Overwrite the given top-level fields of a book.

        Args:
            book_id: MongoDB _id of the book to update
            update_data: Fields to overwrite; nested documents are replaced whole

        Returns:
            The updated document, or None if not found
        """
        update_data = {**update_data, "updated_at": utcnow()}
        book = await self.books.find_one_and_update(
            {"_id": book_id},
            {"$set": update_data},
            return_document=ReturnDocument.AFTER,
        )
        if book is None:
            logger.warning("Book not found for update", book_id=str(book_id))
        return book

    async def delete_book(self, book_id: ObjectId) -> Optional[Dict[str, Any]]:
        """
        Delete a book.

        Returns:
            The deleted document, or None if not found
        """
        book = await self.books.find_one_and_delete({"_id": book_id})
        if book is None:
            logger.warning("Book not found for deletion", book_id=str(book_id))
        return book

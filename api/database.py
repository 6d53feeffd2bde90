"""
Catalog service layer for the FastAPI application.
"""

from typing import List

import structlog
from bson import ObjectId
from pymongo.errors import PyMongoError

from api.auth import AuthContext
from api.exceptions import NotFound, StoreError, ValidationError
from api.models import BookCreate, BookResponse, BookUpdate
from catalog.database import MongoDBManager
from catalog.models import BookDocument

logger = structlog.get_logger(__name__)


def parse_book_id(book_id: str) -> ObjectId:
    """
    Convert a path identifier to an ObjectId.

    Raises:
        ValidationError: If the identifier is not a valid ObjectId
    """
    if not ObjectId.is_valid(book_id):
        raise ValidationError("Invalid book ID")
    return ObjectId(book_id)


class CatalogService:
    """CRUD operations over the books collection."""

    def __init__(self, db_manager: MongoDBManager):
        self.db_manager = db_manager

    async def list_books(self) -> List[BookResponse]:
        """
        Get all books, newest first.

        Returns:
            List of BookResponse
        """
        try:
            books_docs = await self.db_manager.list_books()
        except PyMongoError as e:
            logger.error("Failed to get books", error=str(e))
            raise StoreError("Failed to retrieve books") from e

        return [BookResponse.from_document(book_doc) for book_doc in books_docs]

    async def get_book(self, book_id: str) -> BookResponse:
        """
        Get a single book by ID.

        Args:
            book_id: MongoDB ObjectId as a string

        Raises:
            ValidationError: If the ID is malformed
            NotFound: If no book has this ID
            StoreError: If the database call fails
        """
        object_id = parse_book_id(book_id)
        try:
            book_doc = await self.db_manager.get_book(object_id)
        except PyMongoError as e:
            logger.error("Failed to get book by ID", book_id=book_id, error=str(e))
            raise StoreError("Failed to retrieve book") from e

        if not book_doc:
            raise NotFound("No such book")
        return BookResponse.from_document(book_doc)

    async def create_book(self, payload: BookCreate, caller: AuthContext) -> BookResponse:
        """
        Create a book owned by the caller.

        The owner always comes from the verified identity, never the payload.
        """
        book = BookDocument(**payload.model_dump(), user_id=caller.user_id)
        try:
            book_doc = await self.db_manager.insert_book(book)
        except PyMongoError as e:
            logger.error("Failed to create book", user_id=caller.user_id, error=str(e))
            raise StoreError("Failed to create book") from e

        logger.info("Book created", book_id=str(book_doc["_id"]), user_id=caller.user_id)
        return BookResponse.from_document(book_doc)

    async def update_book(self, book_id: str, payload: BookUpdate, caller: AuthContext) -> BookResponse:
        """
        Overwrite the supplied fields of a book.

        A supplied ``availability`` replaces the stored one as a whole.
        """
        object_id = parse_book_id(book_id)
        try:
            book_doc = await self.db_manager.update_book(object_id, payload.to_update())
        except PyMongoError as e:
            logger.error("Failed to update book", book_id=book_id, error=str(e))
            raise StoreError("Failed to update book") from e

        if not book_doc:
            raise NotFound("No such book")
        logger.info("Book updated", book_id=book_id, user_id=caller.user_id)
        return BookResponse.from_document(book_doc)

    async def delete_book(self, book_id: str, caller: AuthContext) -> None:
        object_id = parse_book_id(book_id)
        try:
            book_doc = await self.db_manager.delete_book(object_id)
        except PyMongoError as e:
            logger.error("Failed to delete book", book_id=book_id, error=str(e))
            raise StoreError("Failed to delete book") from e

        if not book_doc:
            raise NotFound("No such book")
        logger.info("Book deleted", book_id=book_id, user_id=caller.user_id)

"""
Pydantic models for the documents persisted in MongoDB.
Defines the stored shape of users and books, including the nested
availability record.
"""

from datetime import date, datetime, time, timezone
from typing import Any, Dict, Optional

from bson import ObjectId
from pydantic import BaseModel, Field


def utcnow() -> datetime:
    """Current UTC time as stored on documents."""
    return datetime.now(timezone.utc)


def as_datetime(value: Optional[date]) -> Optional[datetime]:
    """BSON has no plain date type, so dates are stored as midnight datetimes."""
    if value is None or isinstance(value, datetime):
        return value
    return datetime.combine(value, time.min)


class Availability(BaseModel):
    """Lending state of a book."""
    is_available: bool = Field(..., alias="isAvailable", description="Whether the book can be borrowed")
    due_date: Optional[datetime] = Field(None, alias="dueDate", description="When a borrowed copy is due back")
    borrower: Optional[str] = Field(None, description="Who currently holds the book")

    model_config = {"populate_by_name": True}


class UserDocument(BaseModel):
    """
    Stored user record. ``password`` always holds a hash.
    """
    name: str = Field(..., description="Display name")
    email: str = Field(..., description="Login key, unique across users")
    password: str = Field(..., description="Salted password hash")
    phone_number: str = Field(..., description="Contact phone number")
    gender: str = Field(..., description="Gender")
    date_of_birth: datetime = Field(..., description="Date of birth")
    membership_status: str = Field(..., description="Library membership status")
    created_at: datetime = Field(default_factory=utcnow, description="Creation timestamp")
    updated_at: datetime = Field(default_factory=utcnow, description="Last update timestamp")

    def to_mongo(self) -> Dict[str, Any]:
        return self.model_dump()


class BookDocument(BaseModel):
    """
    Stored book record, owned by the user that created it.
    """
    title: str = Field(..., description="Book title")
    author: str = Field(..., description="Book author")
    isbn: str = Field(..., description="ISBN")
    publisher: str = Field(..., description="Publisher")
    genre: str = Field(..., description="Genre")
    availability: Availability = Field(..., description="Lending state")
    user_id: str = Field(..., description="Identifier of the owning user")
    created_at: datetime = Field(default_factory=utcnow, description="Creation timestamp")
    updated_at: datetime = Field(default_factory=utcnow, description="Last update timestamp")

    def to_mongo(self) -> Dict[str, Any]:
        doc = self.model_dump(by_alias=True)
        # Stored as an ObjectId, like users._id
        doc["user_id"] = ObjectId(self.user_id)
        return doc

    class Config:
        json_schema_extra = {
            "example": {
                "title": "The Left Hand of Darkness",
                "author": "Ursula K. Le Guin",
                "isbn": "978-0441478125",
                "publisher": "Ace",
                "genre": "Science Fiction",
                "availability": {"isAvailable": True, "dueDate": None, "borrower": None},
                "user_id": "65f1c0a2e4b0a1b2c3d4e5f6",
            }
        }

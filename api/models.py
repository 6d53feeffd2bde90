"""
API models and schemas for the FastAPI application.
"""

from datetime import date, datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, field_validator

from catalog.models import Availability


class SignupRequest(BaseModel):
    """
    Signup payload. Fields are optional at parse time so that a missing
    field is reported the same way as an empty one.
    """
    name: Optional[str] = Field(None, description="Display name")
    email: Optional[str] = Field(None, description="Email address, used to log in")
    password: Optional[str] = Field(None, description="Plaintext password")
    phone_number: Optional[str] = Field(None, description="Contact phone number")
    gender: Optional[str] = Field(None, description="Gender")
    date_of_birth: Optional[date] = Field(None, description="Date of birth (YYYY-MM-DD)")
    membership_status: Optional[str] = Field(None, description="Library membership status")

    @field_validator("date_of_birth", mode="before")
    @classmethod
    def blank_date_is_missing(cls, v):
        if isinstance(v, str) and not v.strip():
            return None
        return v

    def missing_fields(self) -> List[str]:
        """Names of fields that are absent or blank."""
        missing = []
        for field_name, value in self.model_dump().items():
            if value is None or (isinstance(value, str) and not value.strip()):
                missing.append(field_name)
        return missing


class LoginRequest(BaseModel):
    """Login payload."""
    email: Optional[str] = Field(None, description="Email address")
    password: Optional[str] = Field(None, description="Plaintext password")


class AuthResponse(BaseModel):
    """Returned by signup and login."""
    email: str = Field(..., description="Email of the authenticated user")
    token: str = Field(..., description="Bearer token, valid for 3 days")


class BookCreate(BaseModel):
    """
    Payload for creating a book. An owner sent by the client is not part of
    the schema and is dropped.
    """
    title: str = Field(..., min_length=1, description="Book title")
    author: str = Field(..., min_length=1, description="Book author")
    isbn: str = Field(..., min_length=1, description="ISBN")
    publisher: str = Field(..., min_length=1, description="Publisher")
    genre: str = Field(..., min_length=1, description="Genre")
    availability: Availability = Field(..., description="Lending state")


class BookUpdate(BaseModel):
    """Payload for updating a book. Only supplied fields are written."""
    title: Optional[str] = Field(None, min_length=1)
    author: Optional[str] = Field(None, min_length=1)
    isbn: Optional[str] = Field(None, min_length=1)
    publisher: Optional[str] = Field(None, min_length=1)
    genre: Optional[str] = Field(None, min_length=1)
    availability: Optional[Availability] = None

    def to_update(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_unset=True, exclude_none=True)


class BookResponse(BaseModel):
    """Book response model for API."""
    id: str = Field(..., description="Unique book identifier")
    title: str = Field(..., description="Book title")
    author: str = Field(..., description="Book author")
    isbn: str = Field(..., description="ISBN")
    publisher: str = Field(..., description="Publisher")
    genre: str = Field(..., description="Genre")
    availability: Availability = Field(..., description="Lending state")
    user_id: Optional[str] = Field(None, description="Identifier of the owning user")
    created_at: Optional[datetime] = Field(None, description="Creation timestamp")
    updated_at: Optional[datetime] = Field(None, description="Last update timestamp")

    @classmethod
    def from_document(cls, book_doc: Dict[str, Any]) -> "BookResponse":
        book_doc = dict(book_doc)
        book_doc["id"] = str(book_doc.pop("_id"))
        if book_doc.get("user_id") is not None:
            book_doc["user_id"] = str(book_doc["user_id"])
        return cls(**book_doc)


class ErrorResponse(BaseModel):
    """Error response model."""
    error: str = Field(..., description="Error message")
    detail: Optional[Any] = Field(None, description="Additional error details")
    status_code: int = Field(..., description="HTTP status code")


class HealthResponse(BaseModel):
    """Health check response model."""
    status: str = Field(..., description="Service status")
    timestamp: datetime = Field(..., description="Current timestamp")
    version: str = Field(..., description="API version")
    database_status: str = Field(..., description="Database connection status")

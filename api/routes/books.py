"""
Book catalog endpoints. Reads are public; writes need a bearer token.
"""

from typing import List

from fastapi import APIRouter, Depends, Request, Response, status

from api.auth import AuthContext, require_user
from api.database import CatalogService
from api.models import BookCreate, BookResponse, BookUpdate

router = APIRouter(prefix="/api/books", tags=["Books"])


def get_catalog_service(request: Request) -> CatalogService:
    return CatalogService(request.app.state.db_manager)


@router.get("", response_model=List[BookResponse])
async def get_all_books(catalog: CatalogService = Depends(get_catalog_service)):
    """List all books, newest first."""
    return await catalog.list_books()


@router.get("/{book_id}", response_model=BookResponse)
async def get_book_by_id(book_id: str, catalog: CatalogService = Depends(get_catalog_service)):
    """
    Get a single book by ID.

    - **book_id**: MongoDB ObjectId of the book
    """
    return await catalog.get_book(book_id)


@router.post("", response_model=BookResponse, status_code=status.HTTP_201_CREATED)
async def create_book(
    payload: BookCreate,
    caller: AuthContext = Depends(require_user),
    catalog: CatalogService = Depends(get_catalog_service),
):
    """Create a book owned by the authenticated user."""
    return await catalog.create_book(payload, caller)


@router.put("/{book_id}", response_model=BookResponse)
async def update_book(
    book_id: str,
    payload: BookUpdate,
    caller: AuthContext = Depends(require_user),
    catalog: CatalogService = Depends(get_catalog_service),
):
    """Overwrite the supplied fields of a book."""
    return await catalog.update_book(book_id, payload, caller)


@router.delete("/{book_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_book(
    book_id: str,
    caller: AuthContext = Depends(require_user),
    catalog: CatalogService = Depends(get_catalog_service),
):
    """Delete a book."""
    await catalog.delete_book(book_id, caller)
    return Response(status_code=status.HTTP_204_NO_CONTENT)

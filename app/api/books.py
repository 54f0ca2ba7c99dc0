"""
Book API Routes - profile and spreadsheet documents owned by the current user.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.db import get_app_db
from app.dependencies.auth import get_current_identity
from app.schemas import (
    BookCreate,
    BookCreated,
    BookDetailResponse,
    BookResponse,
    BookUpdate,
    Identity,
    MessageResponse,
)
from app.services.book_service import BookService

router = APIRouter(prefix="/api/books", tags=["Books"])


@router.get("", response_model=list[BookResponse])
async def list_books(
    identity: Identity = Depends(get_current_identity),
    db: AsyncSession = Depends(get_app_db),
):
    """List the caller's books, newest first."""
    books = await BookService(db).list_books(identity)
    return [BookResponse.model_validate(book.to_dict()) for book in books]


@router.post("", response_model=BookCreated)
async def create_book(
    book_data: BookCreate,
    identity: Identity = Depends(get_current_identity),
    db: AsyncSession = Depends(get_app_db),
):
    book = await BookService(db).create_book(identity, book_data.title, book_data.type)
    return BookCreated(id=str(book.id), title=book.title, type=book.type)


@router.get(
    "/{book_id}",
    response_model=BookDetailResponse,
    response_model_exclude_unset=True,
)
async def get_book(
    book_id: str,
    identity: Identity = Depends(get_current_identity),
    db: AsyncSession = Depends(get_app_db),
):
    """
    Retrieve one book. Profile books include their entries; spreadsheet books
    carry the serialized grid in ``content``.
    """
    detail = await BookService(db).get_book(identity, book_id)
    return BookDetailResponse.model_validate(detail)


@router.put("/{book_id}", response_model=MessageResponse)
async def update_book(
    book_id: str,
    update_data: BookUpdate,
    identity: Identity = Depends(get_current_identity),
    db: AsyncSession = Depends(get_app_db),
):
    await BookService(db).update_book(
        identity, book_id, title=update_data.title, content=update_data.content
    )
    return MessageResponse(message="Updated")


@router.delete("/{book_id}", response_model=MessageResponse)
async def delete_book(
    book_id: str,
    identity: Identity = Depends(get_current_identity),
    db: AsyncSession = Depends(get_app_db),
):
    """Delete a book together with all of its entries."""
    await BookService(db).delete_book(identity, book_id)
    return MessageResponse(message="Deleted")

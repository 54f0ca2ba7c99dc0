"""
Entry API Routes - tagged lines (trait, weakness, secret, feature) of a book.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.db import get_app_db
from app.dependencies.auth import get_current_identity
from app.schemas import EntryCreate, EntryResponse, Identity, MessageResponse
from app.services.entry_service import EntryService

router = APIRouter(prefix="/api/entries", tags=["Entries"])


@router.post("", response_model=EntryResponse)
async def create_entry(
    entry_data: EntryCreate,
    identity: Identity = Depends(get_current_identity),
    db: AsyncSession = Depends(get_app_db),
):
    """Add an entry to one of the caller's books (403 if the book is not theirs)."""
    entry = await EntryService(db).create_entry(
        identity, entry_data.book_id, entry_data.type, entry_data.content
    )
    return EntryResponse.model_validate(entry.to_dict())


@router.delete("/{entry_id}", response_model=MessageResponse)
async def delete_entry(
    entry_id: str,
    identity: Identity = Depends(get_current_identity),
    db: AsyncSession = Depends(get_app_db),
):
    await EntryService(db).delete_entry(identity, entry_id)
    return MessageResponse(message="Deleted")

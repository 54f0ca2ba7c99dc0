"""
Request and response models for the Shadow Ledger API.

Request bodies are deliberately permissive (every field optional, loosely
typed) so that missing or malformed values reach the services, which own the
validation rules and report them as ``InvalidInputError``.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


# --- Identity & auth ---


class Credentials(BaseModel):
    username: str | None = Field(default=None, description="Login name")
    password: str | None = Field(default=None, description="Plain-text password")


class Identity(BaseModel):
    """Who the caller is, as carried in the session token."""

    id: str = Field(..., description="User unique identifier")
    username: str = Field(..., description="Username")


class Session(BaseModel):
    token: str
    user: Identity


class UserEnvelope(BaseModel):
    user: Identity


class MessageResponse(BaseModel):
    message: str = Field(..., description="Response message")


class ErrorResponse(BaseModel):
    error: str


# --- Books ---


class BookCreate(BaseModel):
    title: str | None = None
    type: str | None = Field(default=None, description="profile or spreadsheet")


class BookUpdate(BaseModel):
    title: str | None = None
    # A JSON string (what the browser client sends) or the grid itself
    content: Any = None


class BookCreated(BaseModel):
    id: str
    title: str
    type: str


class EntryResponse(BaseModel):
    id: str
    book_id: str
    type: str
    content: str
    created_at: str | None = None

    model_config = ConfigDict(from_attributes=True)


class BookResponse(BaseModel):
    id: str
    user_id: str
    title: str
    type: str
    content: str | None = None
    created_at: str
    updated_at: str | None = None


class BookDetailResponse(BookResponse):
    # Only present for profile books
    entries: list[EntryResponse] | None = None


# --- Entries ---


class EntryCreate(BaseModel):
    book_id: str | None = None
    type: str | None = Field(default=None, description="trait, weakness, secret or feature")
    content: str | None = None

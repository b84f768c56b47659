"""
Pydantic schemas for compositions.

A composition is a name plus an opaque ``tracks`` payload.  The
payload is typically JSON produced by the browser client, but the API
never parses it: whatever string is saved is returned byte for byte.

Request fields are optional at the schema level so that absent or empty
values reach the store and are rejected there as ``MissingFields``
with a single, uniform error message.
"""

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field

from composition_store.app.core.identity import Address


class CompositionSave(BaseModel):
    """Schema for saving a composition.

    ``id`` is required under the opaque‑code strategy and ignored under
    the sequential strategy.
    """

    id: Optional[Any] = Field(None, description="Caller‑chosen code (code strategy only)")
    name: Optional[str] = Field(None, description="Display name of the composition")
    tracks: Optional[str] = Field(None, description="Serialized tracks and clips, stored verbatim")


class CompositionUpsert(BaseModel):
    """Schema for replacing a composition addressed by the URL path."""

    name: Optional[str] = None
    tracks: Optional[str] = None


class CompositionSummary(BaseModel):
    """List projection of a composition; never carries ``tracks``."""

    model_config = ConfigDict(populate_by_name=True)

    id: Address
    name: str
    created_at: str = Field(..., alias="createdAt")


class CompositionRead(CompositionSummary):
    """Full composition including the serialized tracks."""

    tracks: str


class SaveResult(BaseModel):
    id: Address


class DeleteResult(BaseModel):
    deleted: bool

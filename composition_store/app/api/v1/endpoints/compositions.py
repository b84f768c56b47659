"""
Composition endpoints for API v1.

These routes expose saving, loading, listing and deleting of
compositions.  How a composition is addressed depends on the identity
strategy the deployment was started with: caller‑chosen codes (saving
under an existing code replaces it) or store‑assigned integers.

Handlers are plain functions so FastAPI runs the blocking SQLite calls
in its threadpool.
"""

from typing import List

from fastapi import APIRouter, Depends, HTTPException, status

from composition_store.app.api.deps import get_store
from composition_store.app.core.exceptions import (
    MissingFields,
    StoreUnavailable,
    UnsupportedOperation,
)
from composition_store.app.schemas.composition import (
    CompositionRead,
    CompositionSave,
    CompositionSummary,
    CompositionUpsert,
    DeleteResult,
    SaveResult,
)
from composition_store.app.services.composition_service import CompositionStore

router = APIRouter()


def _unavailable(exc: StoreUnavailable) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        detail=f"Composition store unavailable: {exc}",
    )


@router.get("/", response_model=List[CompositionSummary])
def list_compositions(store: CompositionStore = Depends(get_store)) -> List[CompositionSummary]:
    """Return all compositions, newest first, without their tracks."""
    try:
        return store.list()
    except StoreUnavailable as e:
        raise _unavailable(e)


@router.get("/{composition_id}", response_model=CompositionRead)
def get_composition(
    composition_id: str,
    store: CompositionStore = Depends(get_store),
) -> CompositionRead:
    """Retrieve a single composition including its tracks.

    Returns HTTP 404 if nothing is stored under the address.
    """
    try:
        composition = store.get(composition_id)
    except MissingFields as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except StoreUnavailable as e:
        raise _unavailable(e)
    if composition is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Composition not found")
    return composition


@router.post("/", response_model=SaveResult, status_code=status.HTTP_201_CREATED)
def save_composition(
    composition_in: CompositionSave,
    store: CompositionStore = Depends(get_store),
) -> SaveResult:
    """Save a composition and return its address."""
    try:
        composition_id = store.save(
            composition_in.name, composition_in.tracks, composition_id=composition_in.id
        )
    except MissingFields as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except StoreUnavailable as e:
        raise _unavailable(e)
    return SaveResult(id=composition_id)


@router.put("/{composition_id}", response_model=SaveResult)
def upsert_composition(
    composition_id: str,
    composition_in: CompositionUpsert,
    store: CompositionStore = Depends(get_store),
) -> SaveResult:
    """Create or replace the composition stored under a caller‑chosen code."""
    try:
        saved_id = store.upsert(composition_id, composition_in.name, composition_in.tracks)
    except UnsupportedOperation as e:
        raise HTTPException(status_code=status.HTTP_405_METHOD_NOT_ALLOWED, detail=str(e))
    except MissingFields as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except StoreUnavailable as e:
        raise _unavailable(e)
    return SaveResult(id=saved_id)


@router.delete("/{composition_id}", response_model=DeleteResult)
def delete_composition(
    composition_id: str,
    store: CompositionStore = Depends(get_store),
) -> DeleteResult:
    """Delete a composition.

    Deleting an address with no row is not an error; the response
    reports ``deleted: false`` instead.
    """
    try:
        deleted = store.delete(composition_id)
    except MissingFields as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except StoreUnavailable as e:
        raise _unavailable(e)
    return DeleteResult(deleted=deleted)

# =============================================================================
# app/routers/collections.py - Collection CRUD Endpoints
# =============================================================================
# Collections are user-owned folders of study items and flashcard sets.
# All endpoints require authentication; another user's collection is
# reported as not found.
# =============================================================================

from fastapi import APIRouter, Depends, Path, status

from app.auth import get_current_user, AuthUser
from core.models.collection import CollectionRequest
from core.models.common import ok
from core.services.collection_service import CollectionService

router = APIRouter()


@router.get("")
def list_collections(user: AuthUser = Depends(get_current_user)):
    """
    List the user's collections, newest first.

    Each collection carries item_count, the number of study items in it.
    """
    return ok(CollectionService.list_collections(user.id))


@router.get("/{collection_id}")
def get_collection(
    collection_id: str = Path(description="Collection ID"),
    user: AuthUser = Depends(get_current_user),
):
    """Get one collection with its item_count."""
    return ok(CollectionService.get_collection(collection_id, user.id))


@router.post("", status_code=status.HTTP_201_CREATED)
def create_collection(
    request: CollectionRequest,
    user: AuthUser = Depends(get_current_user),
):
    """
    Create a collection.

    Raises:
        400: Title missing
    """
    return ok(CollectionService.create_collection(user.id, request))


@router.put("/{collection_id}")
def update_collection(
    request: CollectionRequest,
    collection_id: str = Path(description="Collection ID"),
    user: AuthUser = Depends(get_current_user),
):
    """
    Update a collection's title, description, color and icon.

    Raises:
        400: Title missing
        404: Not found or not owned
    """
    return ok(CollectionService.update_collection(collection_id, user.id, request))


@router.delete("/{collection_id}")
def delete_collection(
    collection_id: str = Path(description="Collection ID"),
    user: AuthUser = Depends(get_current_user),
):
    """Delete a collection."""
    CollectionService.delete_collection(collection_id, user.id)
    return ok("Collection deleted successfully")


@router.get("/{collection_id}/items")
def list_collection_items(
    collection_id: str = Path(description="Collection ID"),
    user: AuthUser = Depends(get_current_user),
):
    """Study items in the collection, newest first."""
    return ok(CollectionService.list_items(collection_id, user.id))


@router.get("/{collection_id}/flashcards")
def list_collection_flashcards(
    collection_id: str = Path(description="Collection ID"),
    user: AuthUser = Depends(get_current_user),
):
    """Flashcard sets in the collection (with their cards), newest first."""
    return ok(CollectionService.list_flashcard_sets(collection_id, user.id))

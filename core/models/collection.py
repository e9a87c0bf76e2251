# =============================================================================
# core/models/collection.py - Collection Schemas
# =============================================================================
# A collection is a user-owned folder of study items and flashcard sets.
# =============================================================================

from pydantic import BaseModel, Field


class CollectionRequest(BaseModel):
    """
    Body for creating or updating a collection.

    title is required by the router; the rest are optional display fields.

    Example:
        {"title": "Biology 101", "description": "Cells and genetics", "color": "#22c55e"}
    """

    title: str | None = Field(
        default=None,
        max_length=200,
        description="Collection title"
    )

    description: str | None = Field(
        default=None,
        max_length=2000,
        description="Optional description"
    )

    # Hex color or palette name chosen in the client
    color: str | None = Field(
        default=None,
        max_length=32,
        description="Display color"
    )

    icon: str | None = Field(
        default=None,
        max_length=64,
        description="Display icon name"
    )

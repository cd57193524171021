"""
Base Entity Classes

Entities are domain objects with identity and lifecycle.
They keep their identity regardless of their attributes.
"""

from abc import ABC
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Generic, TypeVar

# Type variable for entity ID (int, str, UUID, etc.)
TId = TypeVar("TId")


def utc_now() -> datetime:
    """Current time as a timezone-aware UTC datetime."""
    return datetime.now(UTC)


@dataclass
class Entity(ABC, Generic[TId]):
    """
    Base class for all domain entities.

    Type Parameters:
        TId: Type of entity identifier (int, str, UUID)

    Example:
        ```python
        @dataclass
        class Product(Entity[int]):
            name: str = ""
            price: Price = field(default_factory=Price.zero)
        ```
    """

    id: TId | None = field(default=None)
    created_at: datetime = field(default_factory=utc_now)
    updated_at: datetime = field(default_factory=utc_now)

    def __eq__(self, other: object) -> bool:
        """Entities are equal if they have the same ID."""
        if not isinstance(other, Entity):
            return False
        if self.id is None or other.id is None:
            return False
        return self.id == other.id

    def __hash__(self) -> int:
        """Hash based on ID for use in sets and dicts."""
        return hash(self.id) if self.id is not None else id(self)

    def is_new(self) -> bool:
        """Check if entity is new (not yet persisted)."""
        return self.id is None

    def touch(self) -> None:
        """Update the updated_at timestamp."""
        self.updated_at = utc_now()


@dataclass
class AggregateRoot(Entity[TId], Generic[TId]):
    """
    Base class for aggregate roots.

    An aggregate root is the only entry point through which its state is
    changed, so every invariant of the aggregate is enforced in its methods.
    """


@dataclass
class SoftDeletableEntity(Entity[TId], Generic[TId]):
    """
    Entity with soft delete support.

    Instead of physical deletion, the entity is flagged inactive and kept
    for audit.
    """

    deleted_at: datetime | None = field(default=None)
    is_active: bool = field(default=True)

    def soft_delete(self) -> None:
        """Mark entity as deleted."""
        self.deleted_at = utc_now()
        self.is_active = False
        self.touch()

    def restore(self) -> None:
        """Restore a soft-deleted entity."""
        self.deleted_at = None
        self.is_active = True
        self.touch()

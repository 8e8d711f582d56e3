"""Generic repository base interface.

Repository[T] is the root abstraction for the keyed tables of this domain.
Concrete implementations live in portfolio_ledger/infrastructure/ (in-memory
and SQLAlchemy) and are obtained through a UnitOfWork, never constructed by
the services directly.

Design notes:
  - All methods are async to accommodate async database drivers.
  - T is the domain model type (never an ORM row or DTO).
  - Returned entities are detached copies; mutating one has no effect until it
    is passed back through update()/save().
  - delete() is present on the base; specialised interfaces may leave it
    unsupported when the domain never physically removes the entity.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Generic, TypeVar

T = TypeVar("T")


class Repository(ABC, Generic[T]):
    """Abstract CRUD interface for a domain aggregate keyed by integer id."""

    @abstractmethod
    async def get(self, id: int) -> T | None:
        """Return the entity with the given primary key, or None if not found."""

    @abstractmethod
    async def list(self, limit: int = 50, offset: int = 0) -> list[T]:
        """Return a page of entities ordered by id ascending."""

    @abstractmethod
    async def create(self, entity: T) -> T:
        """Persist a new entity and return it (with any generated fields populated)."""

    @abstractmethod
    async def update(self, entity: T) -> T:
        """Persist changes to an existing entity and return the updated version."""

    @abstractmethod
    async def delete(self, id: int) -> None:
        """Remove the entity with the given primary key."""

"""In-memory store — swappable with the SQLAlchemy persistence behind UnitOfWork."""

from .store import InMemoryStore
from .unit_of_work import InMemoryUnitOfWork, in_memory_uow_factory

__all__ = ["InMemoryStore", "InMemoryUnitOfWork", "in_memory_uow_factory"]

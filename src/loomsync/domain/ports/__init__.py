"""Domain port definitions for adapters."""

from __future__ import annotations

from .persistence import ItemRepository
from .sources import Inventory, ResourceSource, UniverseLookup
from .store import AggregationStore
from .unit_of_work import ItemRepositories, ItemUnitOfWork, RepositoryCollection, UnitOfWork

__all__ = [
    "AggregationStore",
    "Inventory",
    "ItemRepositories",
    "ItemRepository",
    "ItemUnitOfWork",
    "RepositoryCollection",
    "ResourceSource",
    "UniverseLookup",
    "UnitOfWork",
]

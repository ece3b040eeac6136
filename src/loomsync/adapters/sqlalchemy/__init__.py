"""SQLAlchemy adapter package for loomsync."""

from __future__ import annotations

from .mappings import item_edge_table, item_table, metadata
from .repositories import SqlAlchemyItemRepository
from .unit_of_work import (
    SqlAlchemyAggregationStore,
    SqlAlchemyItemUnitOfWork,
    StartupError,
    configured_engine,
    is_started,
    shutdown,
    startup,
)

__all__ = [
    "SqlAlchemyAggregationStore",
    "SqlAlchemyItemRepository",
    "SqlAlchemyItemUnitOfWork",
    "StartupError",
    "configured_engine",
    "is_started",
    "item_edge_table",
    "item_table",
    "metadata",
    "shutdown",
    "startup",
]

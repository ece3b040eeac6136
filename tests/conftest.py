from __future__ import annotations

import os
from typing import TYPE_CHECKING

import pytest
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine  # noqa: TC002
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from loomsync.adapters.memory import InMemoryAggregationStore, StaticInventory
from loomsync.adapters.sqlalchemy.migrations import upgrade_head
from loomsync.adapters.sqlalchemy.unit_of_work import (
    SqlAlchemyAggregationStore,
    SqlAlchemyItemUnitOfWork,
    shutdown,
    startup,
)

os.environ.setdefault("DATABASE_URI", "sqlite+pysqlite:///:memory:")

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator


@pytest.fixture
def sqlite_engine() -> Iterator[Engine]:
    # one shared connection so that every session sees the same in-memory database
    engine = create_engine(
        "sqlite+pysqlite:///:memory:",
        future=True,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    upgrade_head(engine=engine)
    try:
        yield engine
    finally:
        engine.dispose()


@pytest.fixture
def sqlite_session(sqlite_engine: Engine) -> Iterator[Session]:
    session_factory = sessionmaker(bind=sqlite_engine, future=True)
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def sqlite_unit_of_work(
    sqlite_engine: Engine,
) -> Iterator[Callable[[], SqlAlchemyItemUnitOfWork]]:
    startup(engine=sqlite_engine, force=True)

    def factory() -> SqlAlchemyItemUnitOfWork:
        return SqlAlchemyItemUnitOfWork()

    try:
        yield factory
    finally:
        shutdown()


@pytest.fixture
def sqlite_store(
    sqlite_unit_of_work: Callable[[], SqlAlchemyItemUnitOfWork],
) -> SqlAlchemyAggregationStore:
    _ = sqlite_unit_of_work
    return SqlAlchemyAggregationStore()


@pytest.fixture
def memory_store() -> InMemoryAggregationStore:
    return InMemoryAggregationStore()


@pytest.fixture
def inventory() -> StaticInventory:
    return StaticInventory()

"""SQLAlchemy table metadata for published items and their edges."""

from __future__ import annotations

import json
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any, cast

from sqlalchemy import (
    Column,
    DateTime,
    Dialect,
    Enum,
    Index,
    Integer,
    MetaData,
    String,
    Table,
    Text,
    TypeDecorator,
    UniqueConstraint,
)

from loomsync.domain.model import RelationshipType, ResourceKind

if TYPE_CHECKING:
    from collections.abc import Mapping

    from loomsync.domain.model import FieldValue


class UTCDateTime(TypeDecorator[datetime]):
    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        _ = dialect
        if value is None:
            return None
        if value.tzinfo is None:
            value = value.replace(tzinfo=UTC)
        return value.astimezone(UTC)

    def process_result_value(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        _ = dialect
        if value is None:
            return None
        return value if value.tzinfo else value.replace(tzinfo=UTC)


class FieldsType(TypeDecorator[dict[str, Any]]):
    """Projected attribute fields stored as a JSON object.

    JSON has no tuples; list values are restored as tuples of strings so that a
    loaded record compares equal to a freshly projected one.
    """

    impl = Text
    cache_ok = True

    def process_bind_param(
        self,
        value: Mapping[str, FieldValue] | None,
        dialect: Dialect,
    ) -> str | None:
        _ = dialect
        if value is None:
            return None
        payload = {
            name: list(item) if isinstance(item, tuple) else item for name, item in value.items()
        }
        return json.dumps(payload, sort_keys=True)

    def process_result_value(self, value: str | None, dialect: Dialect) -> dict[str, FieldValue]:
        _ = dialect
        if value is None:
            return {}
        loaded = json.loads(value)
        if not isinstance(loaded, dict):
            return {}
        fields: dict[str, FieldValue] = {}
        for name, item in cast(dict[str, Any], loaded).items():
            if isinstance(item, list):
                fields[name] = tuple(str(entry) for entry in cast(list[Any], item))
            else:
                fields[name] = item
        return fields


metadata = MetaData(
    naming_convention={
        "ix": "ix_%(column_0_label)s",
        "uq": "uq_%(table_name)s_%(column_0_label)s",
        "ck": "ck_%(table_name)s_%(constraint_name)s",
        "fk": "fk_%(table_name)s_%(column_0_label)s_%(referred_table_name)s",
        "pk": "pk_%(table_name)s",
    }
)

# Core tables -----------------------------------------------------------------

item_table = Table(
    "item",
    metadata,
    Column("logical_id", String, primary_key=True),
    Column("item_type", Enum(ResourceKind, native_enum=False), nullable=False),
    Column("name", String, nullable=False),
    Column("description", String, nullable=False),
    Column("fields", FieldsType, nullable=False),
    Column("updated_at", UTCDateTime, nullable=False),
    Index("ix_item_item_type", "item_type"),
)

# Targets are not foreign keys: an edge may outlive its target by one cycle.
item_edge_table = Table(
    "item_edge",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("source_id", String, nullable=False),
    Column("position", Integer, nullable=False),
    Column("relationship_type", Enum(RelationshipType, native_enum=False), nullable=False),
    Column("target_item_type", Enum(ResourceKind, native_enum=False), nullable=False),
    Column("target_logical_id", String, nullable=False),
    UniqueConstraint("source_id", "position"),
    Index("ix_item_edge_source_id", "source_id"),
)

item_invalidation_table = Table(
    "item_invalidation",
    metadata,
    Column("item_type", Enum(ResourceKind, native_enum=False), primary_key=True),
    Column("logical_id", String, primary_key=True),
    Column("invalidated_at", UTCDateTime, nullable=False),
)

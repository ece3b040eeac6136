"""Reconciled items: the identity-stable representation of a resource across cycles."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Mapping

    from loomsync.domain.model.enums import RelationshipType, ResourceKind
    from loomsync.domain.model.primitives import FieldValue, LogicalId


def _frozen_fields(values: Mapping[str, FieldValue]) -> Mapping[str, FieldValue]:
    return MappingProxyType(dict(values))


@dataclass(frozen=True, slots=True, kw_only=True)
class AttributeRecord:
    """Flat projection of a resource's observable state at one point in time."""

    item_id: LogicalId
    name: str
    description: str
    fields: Mapping[str, FieldValue] = field(default_factory=lambda: _frozen_fields({}))

    def __post_init__(self) -> None:
        object.__setattr__(self, "fields", _frozen_fields(self.fields))

    def get(self, name: str) -> FieldValue:
        return self.fields.get(name)

    def changed_fields(self, other: AttributeRecord) -> frozenset[str]:
        """Names of the projected fields whose values differ between both records."""

        names = set(self.fields) | set(other.fields)
        return frozenset(
            name
            for name in names
            if name not in self.fields
            or name not in other.fields
            or self.fields[name] != other.fields[name]
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, AttributeRecord):
            return NotImplemented
        return (
            self.item_id == other.item_id
            and self.name == other.name
            and self.description == other.description
            and dict(self.fields) == dict(other.fields)
        )

    def __hash__(self) -> int:
        return hash((self.item_id, self.name, self.description, tuple(sorted(self.fields))))


@dataclass(frozen=True, slots=True)
class RelationshipEdge:
    """Directed, typed link from one item to another."""

    relationship_type: RelationshipType
    target_item_type: ResourceKind
    target_logical_id: LogicalId


@dataclass(frozen=True, slots=True, kw_only=True)
class Item:
    logical_id: LogicalId
    item_type: ResourceKind
    attributes: AttributeRecord
    edges: tuple[RelationshipEdge, ...] = ()

    def with_edges(self, edges: tuple[RelationshipEdge, ...]) -> Item:
        return replace(self, edges=edges)

"""Public domain model surface."""

from __future__ import annotations

from loomsync.domain.model.enums import ChangeStatus, CycleState, RelationshipType, ResourceKind
from loomsync.domain.model.item import AttributeRecord, Item, RelationshipEdge
from loomsync.domain.model.primitives import (
    FieldValue,
    IdentityKey,
    IdentityValue,
    LogicalId,
    Scalar,
)
from loomsync.domain.model.resources import Container, Host, Resource, Volume

__all__ = [
    "AttributeRecord",
    "ChangeStatus",
    "Container",
    "CycleState",
    "FieldValue",
    "Host",
    "IdentityKey",
    "IdentityValue",
    "Item",
    "LogicalId",
    "RelationshipEdge",
    "RelationshipType",
    "Resource",
    "ResourceKind",
    "Scalar",
    "Volume",
]

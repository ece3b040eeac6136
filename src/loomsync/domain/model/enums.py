"""Domain enums (pure, dependency-light)."""

from __future__ import annotations

from enum import StrEnum


class ResourceKind(StrEnum):
    """Resource-type tag; doubles as the item type of the reconciled items."""

    HOST = "host"
    CONTAINER = "container"
    VOLUME = "volume"


class RelationshipType(StrEnum):
    MOUNTS = "mounts"
    RUNS_ON = "runs_on"


class ChangeStatus(StrEnum):
    """Cache-invalidation impact of the transition between two attribute records."""

    UNCHANGED = "unchanged"
    CHANGED_IGNORE = "changed_ignore"
    CHANGED_UPDATE = "changed_update"


class CycleState(StrEnum):
    IDLE = "idle"
    ENUMERATING = "enumerating"
    PROJECTING = "projecting"
    CLASSIFYING = "classifying"
    LINKING = "linking"
    PUBLISHING = "publishing"

"""Error taxonomy of the reconciliation core.

Only ``EnumerationFailure`` ends a cycle. The per-resource errors are caught by the
cycle driver, logged with the resource's best-effort identity and recorded on the
cycle result; the resource is skipped for that cycle.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Mapping

    from loomsync.domain.model import LogicalId, RelationshipType, ResourceKind


class ReconciliationError(RuntimeError):
    """Base class for reconciliation errors."""


class ResourceError(ReconciliationError):
    """A single resource could not be processed this cycle."""

    def __init__(
        self,
        message: str,
        *,
        kind: ResourceKind,
        identity: Mapping[str, object] | None = None,
    ) -> None:
        self.kind = kind
        self.identity = dict(identity or {})
        super().__init__(message)


class IdentityResolutionError(ResourceError):
    """Raised when a resource lacks the fields needed to compute its logical id."""


class ProjectionError(ResourceError):
    """Raised when a malformed resource cannot be projected into an attribute record."""

    def __init__(
        self,
        message: str,
        *,
        kind: ResourceKind,
        identity: Mapping[str, object] | None = None,
        logical_id: LogicalId | None = None,
    ) -> None:
        self.logical_id = logical_id
        super().__init__(message, kind=kind, identity=identity)


class RelationshipLookupInconsistency(ReconciliationError):
    """A related resource referenced by an edge is missing from this cycle's universe.

    Recoverable: the edge is skipped and expected to reappear on a later cycle.
    """

    def __init__(
        self,
        message: str,
        *,
        kind: ResourceKind,
        relationship_type: RelationshipType,
        target_kind: ResourceKind | None = None,
        target_key: tuple[object, ...] | None = None,
        source_logical_id: LogicalId | None = None,
    ) -> None:
        self.kind = kind
        self.relationship_type = relationship_type
        self.target_kind = target_kind
        self.target_key = target_key
        self.source_logical_id = source_logical_id
        super().__init__(message)


class EnumerationFailure(ReconciliationError):
    """The resource source could not produce a complete snapshot; the cycle is aborted."""


class CycleInProgressError(ReconciliationError):
    """Raised when a cycle is started while another one is still running."""

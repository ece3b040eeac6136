"""Shared reconciliation contract components.

This module intentionally holds only:
- the per-item status envelope and the publication handed to the aggregation store
- the per-resource failure record and the summary of one cycle
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import TYPE_CHECKING

from loomsync.domain.model import ChangeStatus

if TYPE_CHECKING:
    from collections.abc import Mapping

    from loomsync.domain.model import Item, LogicalId, ResourceKind

    from .errors import RelationshipLookupInconsistency, ResourceError


@dataclass(frozen=True, slots=True)
class ItemUpdate:
    item: Item
    status: ChangeStatus

    @property
    def logical_id(self) -> LogicalId:
        return self.item.logical_id

    @property
    def invalidates(self) -> bool:
        return self.status is ChangeStatus.CHANGED_UPDATE


@dataclass(frozen=True, slots=True, kw_only=True)
class Publication:
    """Everything one cycle proposes to the aggregation store for one item type.

    ``updates`` holds every item observed this cycle (sorted by logical id);
    ``removed`` lists logical ids published last cycle but absent now.
    """

    item_type: ResourceKind
    updates: tuple[ItemUpdate, ...] = ()
    removed: tuple[LogicalId, ...] = ()

    def __post_init__(self) -> None:
        for update in self.updates:
            if update.item.item_type is not self.item_type:
                raise ValueError(
                    f"Publication for {self.item_type} contains a {update.item.item_type} item"
                )
        overlap = {update.logical_id for update in self.updates} & set(self.removed)
        if overlap:
            raise ValueError(f"Items both updated and removed: {sorted(overlap)}")

    @property
    def invalidated(self) -> tuple[LogicalId, ...]:
        """Logical ids whose derived caches must be dropped."""

        changed = [update.logical_id for update in self.updates if update.invalidates]
        return tuple(sorted([*changed, *self.removed]))


@dataclass(frozen=True, slots=True, kw_only=True)
class ResourceFailure:
    """Per-resource error recorded for one cycle."""

    kind: ResourceKind
    error_kind: str
    message: str
    identity: Mapping[str, object] = field(default_factory=dict[str, object])
    logical_id: LogicalId | None = None

    @classmethod
    def from_error(
        cls,
        error: ResourceError,
        *,
        logical_id: LogicalId | None = None,
    ) -> ResourceFailure:
        return cls(
            kind=error.kind,
            error_kind=type(error).__name__,
            message=str(error),
            identity=error.identity,
            logical_id=logical_id or getattr(error, "logical_id", None),
        )


@dataclass(slots=True, kw_only=True)
class CycleResult:
    """Summary of one reconciliation cycle."""

    item_type: ResourceKind
    started_at: datetime = field(default_factory=lambda: datetime.now(tz=UTC))
    finished_at: datetime | None = None
    aborted: bool = False
    abort_reason: str | None = None
    publication: Publication | None = None
    failures: list[ResourceFailure] = field(default_factory=list["ResourceFailure"])
    inconsistencies: list[RelationshipLookupInconsistency] = field(
        default_factory=list["RelationshipLookupInconsistency"]
    )

    @property
    def updates(self) -> tuple[ItemUpdate, ...]:
        return self.publication.updates if self.publication is not None else ()

    @property
    def removed(self) -> tuple[LogicalId, ...]:
        return self.publication.removed if self.publication is not None else ()

    @property
    def invalidated(self) -> tuple[LogicalId, ...]:
        return self.publication.invalidated if self.publication is not None else ()

    def status_for(self, logical_id: LogicalId) -> ChangeStatus | None:
        for update in self.updates:
            if update.logical_id == logical_id:
                return update.status
        return None

    def status_counts(self) -> dict[ChangeStatus, int]:
        counts = Counter(update.status for update in self.updates)
        return {status: counts.get(status, 0) for status in ChangeStatus}

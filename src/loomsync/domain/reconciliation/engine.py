"""Cycle driver for the reconciliation subsystem.

The driver composes stage interfaces but does not prescribe concrete adapters.
One instance runs per resource type; every ``run()`` walks

    IDLE -> ENUMERATING -> PROJECTING -> CLASSIFYING -> LINKING -> PUBLISHING -> IDLE

and proposes creations, updates and removals to the aggregation store in one
publication at the very end. Per-resource failures are isolated; an
``EnumerationFailure`` aborts the cycle before anything is published.
"""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from datetime import UTC, datetime
from logging import getLogger
from threading import Lock
from typing import TYPE_CHECKING

from loomsync.domain.model import ChangeStatus, CycleState, Item

from .classify import classify_change
from .contracts import CycleResult, ItemUpdate, Publication, ResourceFailure
from .errors import (
    CycleInProgressError,
    EnumerationFailure,
    IdentityResolutionError,
    ProjectionError,
    ReconciliationError,
    ResourceError,
)
from .identity import raw_identity, resolve_identity
from .link import link_relationships
from .project import project_attributes

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping, Sequence

    from loomsync.domain.model import AttributeRecord, LogicalId, Resource
    from loomsync.domain.ports import AggregationStore, ResourceSource, UniverseLookup

    from .classify import ClassifyChange
    from .identity import ResolveIdentity
    from .link import LinkRelationships
    from .policy import ResourceTypeConfig
    from .project import ProjectAttributes
    from .snapshot import UniverseSnapshot

log = getLogger(__name__)


@dataclass(frozen=True, slots=True)
class _Observation:
    logical_id: LogicalId
    resource: Resource
    attributes: AttributeRecord


@dataclass(frozen=True, slots=True)
class _Rejected:
    failure: ResourceFailure
    logical_id: LogicalId | None = None


@dataclass(slots=True)
class ReconciliationCycle:
    """Run reconciliation cycles for one resource type."""

    config: ResourceTypeConfig
    source: ResourceSource
    universe: UniverseLookup
    store: AggregationStore
    resolve: ResolveIdentity = resolve_identity
    project: ProjectAttributes = project_attributes
    classify: ClassifyChange = classify_change
    link: LinkRelationships = link_relationships
    max_workers: int = 1
    _state: CycleState = field(default=CycleState.IDLE, init=False)
    _lock: Lock = field(default_factory=Lock, init=False, repr=False)

    @property
    def state(self) -> CycleState:
        return self._state

    def run(self) -> CycleResult:
        """Run one full cycle; raises ``CycleInProgressError`` if one is active."""

        if not self._lock.acquire(blocking=False):
            raise CycleInProgressError(f"A {self.config.kind} cycle is already running")
        result = CycleResult(item_type=self.config.kind)
        try:
            self._run(result)
        finally:
            self._transition(CycleState.IDLE)
            result.finished_at = datetime.now(tz=UTC)
            self._lock.release()
        return result

    def _run(self, result: CycleResult) -> None:
        kind = self.config.kind

        self._transition(CycleState.ENUMERATING)
        try:
            resources = tuple(self.source.enumerate())
            universe = self.universe.snapshot()
        except EnumerationFailure as exc:
            result.aborted = True
            result.abort_reason = str(exc)
            log.exception("Aborting %s cycle; previously published items are kept", kind)
            return

        self._transition(CycleState.PROJECTING)
        observed = self._map(self._observe, resources)

        previous = self.store.snapshot(kind)
        self._transition(CycleState.CLASSIFYING)
        observations, carried = self._accept(observed, previous=previous, result=result)
        statuses = self._map(
            lambda observation: self._classify(observation, previous=previous),
            observations,
        )

        self._transition(CycleState.LINKING)
        updates = list(carried)
        for observation, status in zip(observations, statuses, strict=True):
            update = self._link(
                observation,
                status=status,
                prior=previous.get(observation.logical_id),
                universe=universe,
                result=result,
            )
            if update is None:
                prior = previous.get(observation.logical_id)
                if prior is not None:
                    updates.append(ItemUpdate(prior, ChangeStatus.UNCHANGED))
                continue
            updates.append(update)

        self._transition(CycleState.PUBLISHING)
        updates.sort(key=lambda update: update.logical_id)
        present = {update.logical_id for update in updates}
        removed = tuple(sorted(set(previous) - present))
        publication = Publication(item_type=kind, updates=tuple(updates), removed=removed)
        self.store.publish(publication)
        result.publication = publication

        counts = result.status_counts()
        log.info(
            "Finished %s cycle: items=%s, new_or_updated=%s, ignored=%s, unchanged=%s, "
            "removed=%s, failures=%s, skipped_edges=%s",
            kind,
            len(updates),
            counts[ChangeStatus.CHANGED_UPDATE],
            counts[ChangeStatus.CHANGED_IGNORE],
            counts[ChangeStatus.UNCHANGED],
            len(removed),
            len(result.failures),
            len(result.inconsistencies),
        )

    def _observe(self, resource: Resource) -> _Observation | _Rejected:
        """Map step: resolve and project one resource. Reads no shared state."""

        try:
            logical_id = self.resolve(resource, config=self.config)
        except IdentityResolutionError as exc:
            return _Rejected(ResourceFailure.from_error(exc))
        try:
            attributes = self.project(resource, config=self.config, item_id=logical_id)
        except ProjectionError as exc:
            return _Rejected(ResourceFailure.from_error(exc, logical_id=logical_id), logical_id)
        return _Observation(logical_id=logical_id, resource=resource, attributes=attributes)

    def _accept(
        self,
        observed: Sequence[_Observation | _Rejected],
        *,
        previous: Mapping[LogicalId, Item],
        result: CycleResult,
    ) -> tuple[list[_Observation], list[ItemUpdate]]:
        """Split observations from rejects; rejected known items keep their prior state."""

        accepted: dict[LogicalId, _Observation] = {}
        carried: dict[LogicalId, ItemUpdate] = {}
        for entry in observed:
            if isinstance(entry, _Rejected):
                self._record_failure(entry.failure, result=result)
                prior = previous.get(entry.logical_id) if entry.logical_id else None
                if prior is not None:
                    carried[prior.logical_id] = ItemUpdate(prior, ChangeStatus.UNCHANGED)
                continue
            if entry.logical_id in accepted:
                duplicate = IdentityResolutionError(
                    f"Duplicate logical id {entry.logical_id} in one enumeration",
                    kind=self.config.kind,
                    identity=raw_identity(entry.resource, config=self.config),
                )
                self._record_failure(
                    ResourceFailure.from_error(duplicate, logical_id=entry.logical_id),
                    result=result,
                )
                continue
            accepted[entry.logical_id] = entry

        for logical_id in accepted:
            carried.pop(logical_id, None)
        ordered = [accepted[logical_id] for logical_id in sorted(accepted)]
        return ordered, list(carried.values())

    def _classify(
        self,
        observation: _Observation,
        *,
        previous: Mapping[LogicalId, Item],
    ) -> ChangeStatus:
        prior = previous.get(observation.logical_id)
        return self.classify(
            prior.attributes if prior is not None else None,
            observation.attributes,
            config=self.config,
        )

    def _link(
        self,
        observation: _Observation,
        *,
        status: ChangeStatus,
        prior: Item | None,
        universe: UniverseSnapshot,
        result: CycleResult,
    ) -> ItemUpdate | None:
        item = Item(
            logical_id=observation.logical_id,
            item_type=self.config.kind,
            attributes=observation.attributes,
        )
        try:
            edges = self.link(
                item,
                observation.resource,
                universe,
                config=self.config,
                on_inconsistency=result.inconsistencies.append,
            )
        except ResourceError as exc:
            self._record_failure(
                ResourceFailure.from_error(exc, logical_id=observation.logical_id),
                result=result,
            )
            return None
        except ReconciliationError as exc:
            self._record_failure(
                ResourceFailure(
                    kind=self.config.kind,
                    error_kind=type(exc).__name__,
                    message=str(exc),
                    identity=raw_identity(observation.resource, config=self.config),
                    logical_id=observation.logical_id,
                ),
                result=result,
            )
            return None

        edges_changed = prior is not None and prior.edges != edges
        if edges_changed and status is not ChangeStatus.CHANGED_UPDATE:
            log.debug(
                "Edges of %s item %s changed; escalating %s to update",
                self.config.kind,
                observation.logical_id,
                status,
            )
            status = ChangeStatus.CHANGED_UPDATE
        return ItemUpdate(item.with_edges(edges), status)

    def _record_failure(self, failure: ResourceFailure, *, result: CycleResult) -> None:
        log.warning(
            "Skipping %s resource %s this cycle (%s): %s",
            failure.kind,
            dict(failure.identity),
            failure.error_kind,
            failure.message,
        )
        result.failures.append(failure)

    def _map[T, R](self, func: Callable[[T], R], values: Sequence[T]) -> list[R]:
        if self.max_workers <= 1 or len(values) <= 1:
            return [func(value) for value in values]
        with ThreadPoolExecutor(
            max_workers=self.max_workers,
            thread_name_prefix=f"loomsync-{self.config.kind}",
        ) as pool:
            return list(pool.map(func, values))

    def _transition(self, state: CycleState) -> None:
        log.debug("%s cycle: %s -> %s", self.config.kind, self._state, state)
        self._state = state

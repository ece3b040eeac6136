"""In-process adapters: a dictionary-backed aggregation store and a static inventory."""

from __future__ import annotations

from collections import Counter
from logging import getLogger
from threading import Lock
from types import MappingProxyType
from typing import TYPE_CHECKING

from loomsync.domain.model import ChangeStatus
from loomsync.domain.reconciliation import EnumerationFailure, UniverseSnapshot
from loomsync.domain.resource_types import DEFAULT_RESOURCE_TYPES

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping

    from loomsync.domain.model import Item, LogicalId, Resource, ResourceKind
    from loomsync.domain.reconciliation import Publication, ResourceTypeConfig

log = getLogger(__name__)


class InMemoryAggregationStore:
    """Aggregation store keeping every published item set in memory.

    ``writes`` counts storage writes per item type so callers can verify that
    unchanged items are never rewritten.
    """

    def __init__(self) -> None:
        self._items: dict[ResourceKind, Mapping[LogicalId, Item]] = {}
        self._invalidated: dict[ResourceKind, set[LogicalId]] = {}
        self._lock = Lock()
        self.writes: Counter[ResourceKind] = Counter()
        self.publications: list[Publication] = []

    def snapshot(self, item_type: ResourceKind) -> Mapping[LogicalId, Item]:
        with self._lock:
            return self._items.get(item_type, MappingProxyType({}))

    def publish(self, publication: Publication) -> None:
        item_type = publication.item_type
        with self._lock:
            items = dict(self._items.get(item_type, {}))
            invalidated = set(self._invalidated.get(item_type, set()))
            for update in publication.updates:
                if update.status is ChangeStatus.UNCHANGED:
                    continue
                items[update.logical_id] = update.item
                self.writes[item_type] += 1
                if update.invalidates:
                    invalidated.add(update.logical_id)
            for logical_id in publication.removed:
                items.pop(logical_id, None)
                invalidated.add(logical_id)
            self._items[item_type] = MappingProxyType(items)
            self._invalidated[item_type] = invalidated
            self.publications.append(publication)

    def get(self, item_type: ResourceKind, logical_id: LogicalId) -> Item | None:
        return self.snapshot(item_type).get(logical_id)

    def invalidated(self, item_type: ResourceKind) -> tuple[LogicalId, ...]:
        with self._lock:
            return tuple(sorted(self._invalidated.get(item_type, set())))

    def clear_invalidated(
        self,
        item_type: ResourceKind,
        logical_ids: Iterable[LogicalId] | None = None,
    ) -> None:
        with self._lock:
            if logical_ids is None:
                self._invalidated.pop(item_type, None)
                return
            self._invalidated.get(item_type, set()).difference_update(logical_ids)


class _StaticSource:
    def __init__(self, inventory: StaticInventory, kind: ResourceKind) -> None:
        self._inventory = inventory
        self._kind = kind

    def enumerate(self) -> tuple[Resource, ...]:
        return self._inventory.resources_of(self._kind)


class StaticInventory:
    """Inventory over a caller-supplied resource list.

    Assign ``resources`` between cycles to simulate the observed environment, or set
    ``unavailable`` to a reason to make every enumeration fail.
    """

    def __init__(
        self,
        resources: Iterable[Resource] = (),
        *,
        configs: Mapping[ResourceKind, ResourceTypeConfig] | None = None,
    ) -> None:
        self.resources: tuple[Resource, ...] = tuple(resources)
        self.unavailable: str | None = None
        self._configs = configs or DEFAULT_RESOURCE_TYPES

    def refresh(self) -> None:
        log.debug("Static inventory holds %s resources", len(self.resources))

    def source(self, kind: ResourceKind) -> _StaticSource:
        return _StaticSource(self, kind)

    def resources_of(self, kind: ResourceKind) -> tuple[Resource, ...]:
        self._raise_if_unavailable()
        return tuple(resource for resource in self.resources if resource.kind is kind)

    def snapshot(self) -> UniverseSnapshot:
        self._raise_if_unavailable()
        return UniverseSnapshot.build(self.resources, configs=self._configs)

    def _raise_if_unavailable(self) -> None:
        if self.unavailable is not None:
            raise EnumerationFailure(self.unavailable)

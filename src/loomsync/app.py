"""Application orchestration entry points."""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING

from loomsync.adapters.docker import DockerInventory
from loomsync.adapters.sqlalchemy.unit_of_work import (
    SqlAlchemyAggregationStore,
    is_started,
    startup,
)
from loomsync.config import CollectorConfig, get_collector_config
from loomsync.domain.reconciliation import ReconciliationCycle
from loomsync.domain.resource_types import DEFAULT_RESOURCE_TYPES, ordered_kinds

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable, Mapping

    from loomsync.domain.model import Item, ResourceKind
    from loomsync.domain.ports import AggregationStore, Inventory
    from loomsync.domain.reconciliation import CycleResult, ResourceTypeConfig


log = getLogger(__name__)


@dataclass(slots=True)
class CollectorRun:
    """Summary of a collector run; only the results of the last round are kept."""

    rounds: int = 0
    aborted_cycles: int = 0
    failures: int = 0
    last_round: tuple[CycleResult, ...] = field(default_factory=tuple)


def default_store() -> SqlAlchemyAggregationStore:
    """Return an aggregation store on the configured database, starting the adapter once."""

    if not is_started():
        startup()
    return SqlAlchemyAggregationStore()


def build_cycles(
    inventory: Inventory,
    store: AggregationStore,
    *,
    kinds: Iterable[ResourceKind],
    max_workers: int = 1,
    configs: Mapping[ResourceKind, ResourceTypeConfig] = DEFAULT_RESOURCE_TYPES,
) -> tuple[ReconciliationCycle, ...]:
    """Build one cycle driver per resource kind, in dependency order."""

    return tuple(
        ReconciliationCycle(
            config=configs[kind],
            source=inventory.source(kind),
            universe=inventory,
            store=store,
            max_workers=max_workers,
        )
        for kind in ordered_kinds(kinds)
    )


def run_round(
    inventory: Inventory,
    cycles: Iterable[ReconciliationCycle],
) -> tuple[CycleResult, ...]:
    """Observe the environment once and run every cycle against that observation."""

    inventory.refresh()
    return tuple(cycle.run() for cycle in cycles)


def run_collector(
    *,
    inventory: Inventory | None = None,
    store: AggregationStore | None = None,
    config: CollectorConfig | None = None,
    sleep: Callable[[float], None] = time.sleep,
) -> CollectorRun:
    """Run collection rounds until ``config.max_cycles`` is reached (forever if unset)."""

    effective_config = config or get_collector_config()
    effective_inventory = inventory or DockerInventory()
    effective_store = store or default_store()
    cycles = build_cycles(
        effective_inventory,
        effective_store,
        kinds=effective_config.kinds,
        max_workers=effective_config.max_workers,
    )
    log.info(
        "Starting collector: kinds=%s, interval=%ss, max_workers=%s, max_cycles=%s",
        ",".join(cycle.config.kind for cycle in cycles),
        effective_config.interval_seconds,
        effective_config.max_workers,
        effective_config.max_cycles,
    )

    run = CollectorRun()
    while True:
        results = run_round(effective_inventory, cycles)
        run.rounds += 1
        run.aborted_cycles += sum(1 for result in results if result.aborted)
        run.failures += sum(len(result.failures) for result in results)
        run.last_round = results
        if effective_config.max_cycles is not None and run.rounds >= effective_config.max_cycles:
            break
        sleep(effective_config.interval_seconds)

    log.info(
        "Collector stopped: rounds=%s, aborted_cycles=%s, failures=%s",
        run.rounds,
        run.aborted_cycles,
        run.failures,
    )
    return run


def list_items(kind: ResourceKind, *, store: AggregationStore | None = None) -> list[Item]:
    """Return the published items of ``kind`` ordered by logical id."""

    effective_store = store or default_store()
    items = effective_store.snapshot(kind)
    return [items[logical_id] for logical_id in sorted(items)]

from __future__ import annotations

import pytest

from loomsync import app as app_module
from loomsync.adapters.memory import InMemoryAggregationStore, StaticInventory
from loomsync.app import build_cycles, list_items, run_collector
from loomsync.config import CollectorConfig
from loomsync.domain.model import ResourceKind
from loomsync.domain.reconciliation import logical_id_for
from tests.helpers.resources import make_container, make_host, make_volume


def _inventory() -> StaticInventory:
    return StaticInventory(
        [
            make_host("h1"),
            make_container("c1", "h1"),
            make_volume("/data", "h1", mounted_by=("c1",)),
        ]
    )


def test_build_cycles_orders_kinds() -> None:
    cycles = build_cycles(
        _inventory(),
        InMemoryAggregationStore(),
        kinds=[ResourceKind.VOLUME, ResourceKind.HOST, ResourceKind.CONTAINER],
    )

    assert [cycle.config.kind for cycle in cycles] == [
        ResourceKind.HOST,
        ResourceKind.CONTAINER,
        ResourceKind.VOLUME,
    ]


def test_run_collector_links_the_whole_graph(memory_store: InMemoryAggregationStore) -> None:
    sleeps: list[float] = []

    run = run_collector(
        inventory=_inventory(),
        store=memory_store,
        config=CollectorConfig(interval_seconds=7.0, max_cycles=2),
        sleep=sleeps.append,
    )

    assert run.rounds == 2
    assert run.aborted_cycles == 0
    assert sleeps == [7.0]
    container_id = logical_id_for(ResourceKind.CONTAINER, ("h1", "c1"))
    volume = list_items(ResourceKind.VOLUME, store=memory_store)[0]
    container = list_items(ResourceKind.CONTAINER, store=memory_store)[0]
    assert [edge.target_logical_id for edge in volume.edges] == [container_id]
    assert container.edges[0].target_logical_id == logical_id_for(ResourceKind.HOST, ("h1",))
    # the second round saw no change
    assert {update.status.value for result in run.last_round for update in result.updates} == {
        "unchanged"
    }


def test_unavailable_inventory_aborts_every_cycle(memory_store: InMemoryAggregationStore) -> None:
    inventory = _inventory()
    inventory.unavailable = "daemon down"

    run = run_collector(
        inventory=inventory,
        store=memory_store,
        config=CollectorConfig(max_cycles=1),
        sleep=lambda _seconds: None,
    )

    assert run.aborted_cycles == 3
    assert memory_store.publications == []


def test_list_items_uses_default_store(
    monkeypatch: pytest.MonkeyPatch,
    memory_store: InMemoryAggregationStore,
) -> None:
    monkeypatch.setattr(app_module, "default_store", lambda: memory_store)
    run_collector(
        inventory=_inventory(),
        store=memory_store,
        config=CollectorConfig(max_cycles=1, kinds=(ResourceKind.HOST,)),
        sleep=lambda _seconds: None,
    )

    items = list_items(ResourceKind.HOST)

    assert [item.attributes.name for item in items] == ["h1"]

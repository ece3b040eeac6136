from __future__ import annotations

import logging

import pytest

from loomsync.domain.model import Item, RelationshipType, Resource, ResourceKind
from loomsync.domain.reconciliation import (
    RelationshipLookupInconsistency,
    UniverseSnapshot,
    link_relationships,
    logical_id_for,
    project_attributes,
    resolve_identity,
)
from loomsync.domain.resource_types import (
    CONTAINER_TYPE,
    DEFAULT_RESOURCE_TYPES,
    HOST_TYPE,
    VOLUME_TYPE,
)
from tests.helpers.resources import make_container, make_host, make_volume


def _item_for(resource: Resource) -> Item:
    config = DEFAULT_RESOURCE_TYPES[resource.kind]
    logical_id = resolve_identity(resource, config=config)
    return Item(
        logical_id=logical_id,
        item_type=config.kind,
        attributes=project_attributes(resource, config=config, item_id=logical_id),
    )


def test_volume_links_every_mounting_container() -> None:
    volume = make_volume("/data", mounted_by=("c2", "c1", "c3"))
    universe = UniverseSnapshot.build(
        [
            make_host("h1"),
            make_container("c1"),
            make_container("c2"),
            make_container("c3"),
            volume,
        ],
        configs=DEFAULT_RESOURCE_TYPES,
    )

    edges = link_relationships(_item_for(volume), volume, universe, config=VOLUME_TYPE)

    expected = sorted(
        logical_id_for(ResourceKind.CONTAINER, ("h1", container_id))
        for container_id in ("c1", "c2", "c3")
    )
    assert [edge.target_logical_id for edge in edges] == expected
    assert {edge.relationship_type for edge in edges} == {RelationshipType.MOUNTS}
    assert {edge.target_item_type for edge in edges} == {ResourceKind.CONTAINER}


def test_missing_container_drops_exactly_one_edge(caplog: pytest.LogCaptureFixture) -> None:
    volume = make_volume("/data", mounted_by=("c1", "c2", "c3"))
    universe = UniverseSnapshot.build(
        [make_host("h1"), make_container("c1"), make_container("c3"), volume],
        configs=DEFAULT_RESOURCE_TYPES,
    )
    reported: list[RelationshipLookupInconsistency] = []

    with caplog.at_level(logging.WARNING):
        edges = link_relationships(
            _item_for(volume),
            volume,
            universe,
            config=VOLUME_TYPE,
            on_inconsistency=reported.append,
        )

    assert len(edges) == 2
    assert len(reported) == 1
    assert reported[0].target_key == ("h1", "c2")
    assert reported[0].target_kind is ResourceKind.CONTAINER
    assert "Skipping edge" in caplog.text


def test_missing_host_skips_mount_edges_without_raising() -> None:
    volume = make_volume("/data", mounted_by=("c1",))
    universe = UniverseSnapshot.build(
        [make_container("c1"), volume],
        configs=DEFAULT_RESOURCE_TYPES,
    )
    item = _item_for(volume)
    reported: list[RelationshipLookupInconsistency] = []

    edges = link_relationships(
        item, volume, universe, config=VOLUME_TYPE, on_inconsistency=reported.append
    )

    assert edges == ()
    assert len(reported) == 1
    assert reported[0].source_logical_id == item.logical_id
    assert reported[0].target_kind is ResourceKind.HOST


def test_container_runs_on_its_host() -> None:
    container = make_container("c1", "h1")
    universe = UniverseSnapshot.build(
        [make_host("h1"), container], configs=DEFAULT_RESOURCE_TYPES
    )

    edges = link_relationships(_item_for(container), container, universe, config=CONTAINER_TYPE)

    assert len(edges) == 1
    assert edges[0].relationship_type is RelationshipType.RUNS_ON
    assert edges[0].target_logical_id == resolve_identity(make_host("h1"), config=HOST_TYPE)


def test_no_reverse_edges_are_created() -> None:
    host = make_host("h1")
    universe = UniverseSnapshot.build(
        [host, make_container("c1", "h1")], configs=DEFAULT_RESOURCE_TYPES
    )

    assert link_relationships(_item_for(host), host, universe, config=HOST_TYPE) == ()


def test_duplicate_volume_links_only_first_observed_mounts() -> None:
    first = make_volume("/data", mounted_by=("c1",))
    repeated = make_volume("/data", mounted_by=("c2",))
    universe = UniverseSnapshot.build(
        [make_host("h1"), make_container("c1"), make_container("c2"), first, repeated],
        configs=DEFAULT_RESOURCE_TYPES,
    )

    edges = link_relationships(_item_for(first), first, universe, config=VOLUME_TYPE)

    assert len(edges) == 1
    assert edges[0].target_logical_id == logical_id_for(ResourceKind.CONTAINER, ("h1", "c1"))

from __future__ import annotations

import logging

import pytest

from loomsync.domain.model import AttributeRecord, ChangeStatus
from loomsync.domain.reconciliation import classify_change, project_attributes
from loomsync.domain.resource_types import CONTAINER_TYPE, HOST_TYPE, VOLUME_TYPE
from tests.helpers.resources import make_container, make_host, make_volume


def _record(**overrides: object) -> AttributeRecord:
    return project_attributes(make_volume(**overrides), config=VOLUME_TYPE, item_id="volume:x")


def test_new_item_is_an_update() -> None:
    assert classify_change(None, _record(), config=VOLUME_TYPE) is ChangeStatus.CHANGED_UPDATE


def test_identical_records_are_unchanged() -> None:
    assert classify_change(_record(), _record(), config=VOLUME_TYPE) is ChangeStatus.UNCHANGED


def test_only_ignored_fields_changed_is_ignore() -> None:
    previous = _record(size_bytes=1)
    current = _record(size_bytes=2)

    assert classify_change(previous, current, config=VOLUME_TYPE) is ChangeStatus.CHANGED_IGNORE


@pytest.mark.parametrize(
    ("previous", "current"),
    [
        ({"driver": "local"}, {"driver": "nfs"}),
        ({"mounted_by": ()}, {"mounted_by": ("c1",)}),
        ({"size_bytes": 1, "driver": "local"}, {"size_bytes": 2, "driver": "nfs"}),
        ({"size_bytes": None}, {"size_bytes": 5, "name": "renamed"}),
    ],
)
def test_relevant_changes_are_updates(
    previous: dict[str, object],
    current: dict[str, object],
) -> None:
    status = classify_change(_record(**previous), _record(**current), config=VOLUME_TYPE)

    assert status is ChangeStatus.CHANGED_UPDATE


def test_description_change_is_update() -> None:
    previous = _record()
    current = AttributeRecord(
        item_id=previous.item_id,
        name=previous.name,
        description="Something else",
        fields=previous.fields,
    )

    assert classify_change(previous, current, config=VOLUME_TYPE) is ChangeStatus.CHANGED_UPDATE


def test_identity_change_is_update_and_logged(caplog: pytest.LogCaptureFixture) -> None:
    previous = project_attributes(make_volume("/a"), config=VOLUME_TYPE, item_id="volume:a")
    current = project_attributes(make_volume("/b"), config=VOLUME_TYPE, item_id="volume:b")

    with caplog.at_level(logging.WARNING):
        status = classify_change(previous, current, config=VOLUME_TYPE)

    assert status is ChangeStatus.CHANGED_UPDATE
    assert "Identity of volume item volume:a changed" in caplog.text


def test_container_uptime_string_is_ignored() -> None:
    previous = project_attributes(
        make_container(status="Up 3 minutes"), config=CONTAINER_TYPE, item_id="container:x"
    )
    current = project_attributes(
        make_container(status="Up 4 minutes"), config=CONTAINER_TYPE, item_id="container:x"
    )

    assert classify_change(previous, current, config=CONTAINER_TYPE) is (
        ChangeStatus.CHANGED_IGNORE
    )


def test_container_state_change_is_update() -> None:
    previous = project_attributes(
        make_container(state="running"), config=CONTAINER_TYPE, item_id="container:x"
    )
    current = project_attributes(
        make_container(state="exited"), config=CONTAINER_TYPE, item_id="container:x"
    )

    assert classify_change(previous, current, config=CONTAINER_TYPE) is (
        ChangeStatus.CHANGED_UPDATE
    )


def test_host_running_count_is_ignored() -> None:
    previous = project_attributes(
        make_host(containers_running=1), config=HOST_TYPE, item_id="host:x"
    )
    current = project_attributes(
        make_host(containers_running=4), config=HOST_TYPE, item_id="host:x"
    )

    assert classify_change(previous, current, config=HOST_TYPE) is ChangeStatus.CHANGED_IGNORE

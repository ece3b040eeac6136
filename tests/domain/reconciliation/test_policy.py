from __future__ import annotations

import pytest

from loomsync.domain.model import ResourceKind
from loomsync.domain.reconciliation import ResourceTypeConfig
from loomsync.domain.resource_types import VOLUME_TYPE, ordered_kinds


@pytest.mark.parametrize(
    ("overrides", "message"),
    [
        ({"identity_fields": ()}, "at least one identity field"),
        ({"identity_fields": ("uuid",)}, "identity fields must be projected"),
        ({"ignored_fields": frozenset({"uptime"})}, "ignored fields are not projected"),
        ({"ignored_fields": frozenset({"host_id"})}, "identity fields cannot be ignored"),
    ],
)
def test_invalid_policies_are_rejected(overrides: dict[str, object], message: str) -> None:
    values: dict[str, object] = {
        "kind": ResourceKind.HOST,
        "identity_fields": ("host_id",),
        "projected_fields": ("host_id", "name"),
        "name_field": "name",
        "description": "host",
    }
    values.update(overrides)

    with pytest.raises(ValueError, match=message):
        ResourceTypeConfig(**values)  # pyright: ignore[reportArgumentType]


def test_relevant_fields_exclude_ignored_ones() -> None:
    assert "size_bytes" not in VOLUME_TYPE.relevant_fields
    assert "mounted_by" in VOLUME_TYPE.relevant_fields


def test_kinds_are_ordered_hosts_first() -> None:
    kinds = [ResourceKind.VOLUME, ResourceKind.HOST, ResourceKind.VOLUME]

    assert ordered_kinds(kinds) == (ResourceKind.HOST, ResourceKind.VOLUME)

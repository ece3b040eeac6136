"""Change classification between the stored and the freshly projected record.

Verdicts, checked in this order:
- no previous record -> ``CHANGED_UPDATE`` (new item, full indexing)
- identity-bearing fields differ -> ``CHANGED_UPDATE`` (resolver defect, logged)
- name, description or any non-ignored field differs -> ``CHANGED_UPDATE``
- only ignored fields differ -> ``CHANGED_IGNORE``
- nothing differs -> ``UNCHANGED``
"""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING, Protocol

from loomsync.domain.model import ChangeStatus

if TYPE_CHECKING:
    from loomsync.domain.model import AttributeRecord

    from .policy import ResourceTypeConfig

log = getLogger(__name__)


class ClassifyChange(Protocol):
    """Classify the transition from ``previous`` to ``current``."""

    def __call__(
        self,
        previous: AttributeRecord | None,
        current: AttributeRecord,
        *,
        config: ResourceTypeConfig,
    ) -> ChangeStatus: ...


def classify_change(
    previous: AttributeRecord | None,
    current: AttributeRecord,
    *,
    config: ResourceTypeConfig,
) -> ChangeStatus:
    if previous is None:
        return ChangeStatus.CHANGED_UPDATE

    changed = previous.changed_fields(current)
    identity_changed = previous.item_id != current.item_id or any(
        name in changed for name in config.identity_fields
    )
    if identity_changed:
        log.warning(
            "Identity of %s item %s changed between cycles (now %s); forcing update",
            config.kind,
            previous.item_id,
            current.item_id,
        )
        return ChangeStatus.CHANGED_UPDATE

    if previous.name != current.name or previous.description != current.description:
        return ChangeStatus.CHANGED_UPDATE
    if not changed:
        return ChangeStatus.UNCHANGED
    if changed <= config.ignored_fields:
        return ChangeStatus.CHANGED_IGNORE
    return ChangeStatus.CHANGED_UPDATE

"""Attribute projection.

Responsibilities of this stage:
- convert one resource into the normalized ``AttributeRecord`` stored on its item
- stay a pure function of the resource (no cross-cycle state, no I/O)
- fail with ``ProjectionError`` on malformed input, never return partial records

Collections are normalized to sorted tuples of strings so that enumeration order of
associations (for example mounting containers) never shows up as a change.
"""

from __future__ import annotations

from collections.abc import Mapping, Set
from typing import TYPE_CHECKING, Protocol

from loomsync.domain.model import AttributeRecord

from .errors import ProjectionError
from .identity import raw_identity

if TYPE_CHECKING:
    from loomsync.domain.model import FieldValue, LogicalId, Resource

    from .policy import ResourceTypeConfig

_MISSING = object()


class ProjectAttributes(Protocol):
    """Project one resource into its attribute record."""

    def __call__(
        self,
        resource: Resource,
        *,
        config: ResourceTypeConfig,
        item_id: LogicalId,
    ) -> AttributeRecord: ...


def project_attributes(
    resource: Resource,
    *,
    config: ResourceTypeConfig,
    item_id: LogicalId,
) -> AttributeRecord:
    """Default projector driven by ``config.projected_fields``."""

    fields: dict[str, FieldValue] = {}
    for name in config.projected_fields:
        value = getattr(resource, name, _MISSING)
        if value is _MISSING:
            raise _projection_error(
                resource, config=config, item_id=item_id, reason=f"missing field {name!r}"
            )
        fields[name] = _normalize_value(
            value, resource=resource, config=config, item_id=item_id, name=name
        )

    display = getattr(resource, config.name_field, None)
    if display is None or (isinstance(display, str) and not display.strip()):
        display = "/".join(str(fields[name]) for name in config.identity_fields)

    return AttributeRecord(
        item_id=item_id,
        name=str(display),
        description=config.description,
        fields=fields,
    )


def _normalize_value(
    value: object,
    *,
    resource: Resource,
    config: ResourceTypeConfig,
    item_id: LogicalId,
    name: str,
) -> FieldValue:
    if value is None or isinstance(value, str | int | float | bool):
        return value
    if isinstance(value, Mapping):
        raise _projection_error(
            resource, config=config, item_id=item_id, reason=f"field {name!r} is a mapping"
        )
    if isinstance(value, list | tuple | Set):
        members: list[str] = []
        for member in value:
            if not isinstance(member, str | int):
                raise _projection_error(
                    resource,
                    config=config,
                    item_id=item_id,
                    reason=f"field {name!r} holds a non-scalar member {member!r}",
                )
            members.append(str(member))
        return tuple(sorted(members))
    raise _projection_error(
        resource,
        config=config,
        item_id=item_id,
        reason=f"field {name!r} has unsupported type {type(value).__name__}",
    )


def _projection_error(
    resource: Resource,
    *,
    config: ResourceTypeConfig,
    item_id: LogicalId,
    reason: str,
) -> ProjectionError:
    return ProjectionError(
        f"Cannot project {config.kind} {item_id}: {reason}",
        kind=config.kind,
        identity=raw_identity(resource, config=config),
        logical_id=item_id,
    )

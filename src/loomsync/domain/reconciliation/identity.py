"""Identity resolution for observed resources.

Responsibilities of this stage:
- read the identity-bearing fields named by the resource type's policy
- reject resources whose identity fields are missing or blank
- derive a logical id that is stable across cycles and across processes

The logical id is ``"<kind>:<digest>"`` where the digest is a truncated SHA-256 of
the canonical JSON encoding of ``[kind, *identity values]``. JSON keeps the encoding
injective (no separator ambiguity between values), so two resources share an id only
when every identity field is equal.
"""

from __future__ import annotations

import hashlib
import json
from typing import TYPE_CHECKING, Protocol

from .errors import IdentityResolutionError

if TYPE_CHECKING:
    from loomsync.domain.model import IdentityKey, IdentityValue, LogicalId, Resource, ResourceKind

    from .policy import ResourceTypeConfig

_DIGEST_LENGTH = 32


class ResolveIdentity(Protocol):
    """Derive a logical id for one resource."""

    def __call__(self, resource: Resource, *, config: ResourceTypeConfig) -> LogicalId: ...


def identity_key(resource: Resource, *, config: ResourceTypeConfig) -> IdentityKey:
    """Return the identity-bearing values of ``resource`` in policy order."""

    values: list[IdentityValue] = []
    for name in config.identity_fields:
        value = getattr(resource, name, None)
        if isinstance(value, bool) or not isinstance(value, str | int):
            raise IdentityResolutionError(
                f"{config.kind} identity field {name!r} is missing or not a string/int",
                kind=config.kind,
                identity=raw_identity(resource, config=config),
            )
        if isinstance(value, str) and not value.strip():
            raise IdentityResolutionError(
                f"{config.kind} identity field {name!r} is blank",
                kind=config.kind,
                identity=raw_identity(resource, config=config),
            )
        values.append(value)
    return tuple(values)


def logical_id_for(kind: ResourceKind, key: IdentityKey) -> LogicalId:
    """Compute the logical id for an identity key of the given resource kind."""

    payload = json.dumps([str(kind), *key], separators=(",", ":"), ensure_ascii=False)
    digest = hashlib.sha256(payload.encode("utf-8")).hexdigest()[:_DIGEST_LENGTH]
    return f"{kind}:{digest}"


def resolve_identity(resource: Resource, *, config: ResourceTypeConfig) -> LogicalId:
    """Default resolver: logical id from the policy's identity fields."""

    if resource.kind is not config.kind:
        raise IdentityResolutionError(
            f"Resource of kind {resource.kind} handed to the {config.kind} resolver",
            kind=config.kind,
            identity=raw_identity(resource, config=config),
        )
    return logical_id_for(config.kind, identity_key(resource, config=config))


def raw_identity(resource: Resource, *, config: ResourceTypeConfig) -> dict[str, object]:
    """Best-effort identity fields for log records; never raises."""

    return {name: getattr(resource, name, None) for name in config.identity_fields}

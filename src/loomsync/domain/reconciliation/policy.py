"""Per-resource-type reconciliation policy.

One generic engine is instantiated per ``ResourceTypeConfig`` instead of one
subclass per resource type. The config names:
- the identity-bearing fields (resolver input, never volatile state)
- the projected attribute fields and which of them are ignored by the classifier
- the relationship specs the linker evaluates against the cycle's universe
- the associations this resource contributes to the universe snapshot

Which fields are ignored is a policy decision per resource type: an ignored field is
refreshed in storage but never invalidates derived caches, so it must not influence
queries, derived attributes or relationships.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from loomsync.domain.model import IdentityKey, RelationshipType, Resource, ResourceKind

    from .snapshot import UniverseSnapshot


type RelatedLookup = Callable[[Resource, UniverseSnapshot], Iterable[IdentityKey]]
type AssociationHook = Callable[[Resource], Iterable[Association]]


@dataclass(frozen=True, slots=True)
class Association:
    """One owner -> related pair a resource contributes to the universe snapshot."""

    name: str
    owner_key: IdentityKey
    related_key: IdentityKey


@dataclass(frozen=True, slots=True, kw_only=True)
class RelationshipSpec:
    """Edges of one type from a resource to items of ``target_kind``.

    ``lookup`` returns the identity keys of the related resources. It raises
    ``RelationshipLookupInconsistency`` when the owning context itself is missing
    from the universe (for example a host that was not enumerated this cycle).
    """

    relationship_type: RelationshipType
    target_kind: ResourceKind
    lookup: RelatedLookup


@dataclass(frozen=True, slots=True, kw_only=True)
class ResourceTypeConfig:
    kind: ResourceKind
    identity_fields: tuple[str, ...]
    projected_fields: tuple[str, ...]
    name_field: str
    description: str
    ignored_fields: frozenset[str] = frozenset()
    relationships: tuple[RelationshipSpec, ...] = ()
    associations: AssociationHook | None = field(default=None, repr=False)

    def __post_init__(self) -> None:
        if not self.identity_fields:
            raise ValueError(f"{self.kind}: at least one identity field is required")
        projected = set(self.projected_fields)
        missing_identity = set(self.identity_fields) - projected
        if missing_identity:
            raise ValueError(
                f"{self.kind}: identity fields must be projected: {sorted(missing_identity)}"
            )
        unknown_ignored = self.ignored_fields - projected
        if unknown_ignored:
            raise ValueError(
                f"{self.kind}: ignored fields are not projected: {sorted(unknown_ignored)}"
            )
        ignored_identity = self.ignored_fields & set(self.identity_fields)
        if ignored_identity:
            raise ValueError(
                f"{self.kind}: identity fields cannot be ignored: {sorted(ignored_identity)}"
            )

    @property
    def relevant_fields(self) -> tuple[str, ...]:
        """Projected fields whose change invalidates derived caches."""

        return tuple(name for name in self.projected_fields if name not in self.ignored_fields)

    def associations_for(self, resource: Resource) -> tuple[Association, ...]:
        if self.associations is None:
            return ()
        return tuple(self.associations(resource))

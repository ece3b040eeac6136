"""Reconciliation core: identity, change classification and relationship linking.

Layered flow of one cycle:
1) enumerate the live resources of one kind and snapshot the universe
2) resolve a stable logical id per resource
3) project each resource into its attribute record
4) classify the change against the previously published record
5) link typed edges against the universe snapshot
6) publish the item set, statuses and removals to the aggregation store
"""

from __future__ import annotations

from .classify import classify_change
from .contracts import CycleResult, ItemUpdate, Publication, ResourceFailure
from .engine import ReconciliationCycle
from .errors import (
    CycleInProgressError,
    EnumerationFailure,
    IdentityResolutionError,
    ProjectionError,
    ReconciliationError,
    RelationshipLookupInconsistency,
    ResourceError,
)
from .identity import identity_key, logical_id_for, resolve_identity
from .link import link_relationships
from .policy import Association, RelationshipSpec, ResourceTypeConfig
from .project import project_attributes
from .snapshot import UniverseSnapshot

__all__ = [
    "Association",
    "CycleInProgressError",
    "CycleResult",
    "EnumerationFailure",
    "IdentityResolutionError",
    "ItemUpdate",
    "ProjectionError",
    "Publication",
    "ReconciliationCycle",
    "ReconciliationError",
    "RelationshipLookupInconsistency",
    "RelationshipSpec",
    "ResourceError",
    "ResourceFailure",
    "ResourceTypeConfig",
    "UniverseSnapshot",
    "classify_change",
    "identity_key",
    "link_relationships",
    "logical_id_for",
    "project_attributes",
    "resolve_identity",
]

"""Ports for observing the external resource universe."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Sequence

    from loomsync.domain.model import Resource, ResourceKind
    from loomsync.domain.reconciliation.snapshot import UniverseSnapshot


@runtime_checkable
class ResourceSource(Protocol):
    """Enumerate the complete current set of live resources of one kind.

    Every call returns a fresh snapshot. Failures are reported by raising
    ``EnumerationFailure``; timeouts are the source's responsibility.
    """

    def enumerate(self) -> Sequence[Resource]: ...


@runtime_checkable
class UniverseLookup(Protocol):
    """Lookup structure over the universe at the same instant as enumeration."""

    def snapshot(self) -> UniverseSnapshot: ...


@runtime_checkable
class Inventory(UniverseLookup, Protocol):
    """Observation of a whole environment, refreshed once per collection round."""

    def refresh(self) -> None: ...

    def source(self, kind: ResourceKind) -> ResourceSource: ...


__all__ = ["Inventory", "ResourceSource", "UniverseLookup"]

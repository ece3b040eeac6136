"""Collector loop defaults."""

from __future__ import annotations

from dataclasses import dataclass, field

from loomsync.domain.model import ResourceKind

from .env import env_float, env_int, optional_env_var
from .errors import ConfigurationError

DEFAULT_INTERVAL_SECONDS = 30.0
DEFAULT_MAX_WORKERS = 1


@dataclass(frozen=True, slots=True)
class CollectorConfig:
    interval_seconds: float = DEFAULT_INTERVAL_SECONDS
    max_workers: int = DEFAULT_MAX_WORKERS
    max_cycles: int | None = None
    kinds: tuple[ResourceKind, ...] = field(default_factory=lambda: tuple(ResourceKind))


def parse_kinds(value: str) -> tuple[ResourceKind, ...]:
    kinds: list[ResourceKind] = []
    for raw in value.split(","):
        name = raw.strip().lower()
        if not name:
            continue
        try:
            kinds.append(ResourceKind(name))
        except ValueError as exc:
            raise ConfigurationError(f"Unknown resource kind: {name!r}") from exc
    if not kinds:
        raise ConfigurationError("At least one resource kind is required")
    return tuple(kinds)


def get_collector_config() -> CollectorConfig:
    raw_kinds = optional_env_var("LOOMSYNC_KINDS")
    max_cycles = env_int("LOOMSYNC_MAX_CYCLES", 0, minimum=0)
    return CollectorConfig(
        interval_seconds=env_float(
            "LOOMSYNC_INTERVAL_SECONDS", DEFAULT_INTERVAL_SECONDS, minimum=0.0
        ),
        max_workers=env_int("LOOMSYNC_MAX_WORKERS", DEFAULT_MAX_WORKERS, minimum=1),
        max_cycles=max_cycles or None,
        kinds=parse_kinds(raw_kinds) if raw_kinds else tuple(ResourceKind),
    )

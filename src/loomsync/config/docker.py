"""Docker Engine endpoints observed by the collector."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Final
from urllib.parse import urlsplit

from .env import env_float, optional_env_var
from .errors import ConfigurationError
from .http_resilience import RateLimit, ResilienceConfig, RetryPolicy

DEFAULT_DOCKER_HOST: Final[str] = "unix:///var/run/docker.sock"
DEFAULT_API_VERSION: Final[str] = "v1.43"
# base url for requests tunnelled through a unix socket; the host part is ignored
_UDS_BASE_URL: Final[str] = "http://docker"


@dataclass(frozen=True, slots=True)
class DockerHost:
    """One Docker Engine endpoint.

    ``name`` is the fallback host identity when the daemon does not report an ID.
    """

    name: str
    url: str
    api_version: str = DEFAULT_API_VERSION

    @property
    def uds_path(self) -> str | None:
        parts = urlsplit(self.url)
        if parts.scheme != "unix":
            return None
        return parts.path

    def resilience(
        self,
        *,
        timeout_seconds: float,
        ratelimit: RateLimit | None,
    ) -> ResilienceConfig:
        uds_path = self.uds_path
        base = _UDS_BASE_URL if uds_path is not None else self.url.rstrip("/")
        return ResilienceConfig(
            name=f"docker:{self.name}",
            base_url=f"{base}/{self.api_version}/",
            uds_path=uds_path,
            timeout_seconds=timeout_seconds,
            retry=RetryPolicy(),
            ratelimit=ratelimit,
        )


@dataclass(frozen=True, slots=True)
class DockerConfig:
    hosts: tuple[DockerHost, ...]
    timeout_seconds: float = 10.0
    ratelimit: RateLimit | None = field(default=None)

    def __post_init__(self) -> None:
        if not self.hosts:
            raise ConfigurationError("At least one Docker host is required")
        names = [host.name for host in self.hosts]
        duplicates = sorted({name for name in names if names.count(name) > 1})
        if duplicates:
            raise ConfigurationError(f"Duplicate Docker host names: {', '.join(duplicates)}")


def parse_docker_hosts(value: str) -> tuple[DockerHost, ...]:
    """Parse ``name=url`` or bare ``url`` entries separated by commas."""

    hosts: list[DockerHost] = []
    for index, raw_entry in enumerate(value.split(",")):
        entry = raw_entry.strip()
        if not entry:
            continue
        name, separator, url = entry.partition("=")
        if not separator:
            name, url = f"host{index}", entry
        name, url = name.strip(), url.strip()
        if not name or not url:
            raise ConfigurationError(f"Invalid Docker host entry: {entry!r}")
        if urlsplit(url).scheme not in {"unix", "http", "https", "tcp"}:
            raise ConfigurationError(f"Unsupported Docker host URL: {url!r}")
        if url.startswith("tcp://"):
            url = "http://" + url.removeprefix("tcp://")
        hosts.append(DockerHost(name=name, url=url))
    return tuple(hosts)


def get_docker_config() -> DockerConfig:
    raw_hosts = optional_env_var("LOOMSYNC_DOCKER_HOSTS") or optional_env_var("DOCKER_HOST")
    hosts = parse_docker_hosts(raw_hosts or DEFAULT_DOCKER_HOST)
    return DockerConfig(
        hosts=hosts,
        timeout_seconds=env_float("LOOMSYNC_DOCKER_TIMEOUT_SECONDS", 10.0, minimum=0.1),
    )

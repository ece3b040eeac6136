from __future__ import annotations

import logging
from pathlib import Path

import pytest

from loomsync.config import (
    ConfigurationError,
    DockerConfig,
    DockerHost,
    MissingConfigurationError,
    configure_logging,
    get_collector_config,
    get_database_config,
    get_docker_config,
    get_storage_config,
    parse_docker_hosts,
    require_env_vars,
)
from loomsync.domain.model import ResourceKind


def test_require_env_vars_returns_values(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("EXAMPLE_VAR", "value")

    result = require_env_vars(["EXAMPLE_VAR"])

    assert result["EXAMPLE_VAR"] == "value"


def test_require_env_vars_lists_missing_and_blank(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("MISSING_VAR", raising=False)
    monkeypatch.setenv("BLANK_VAR", "   ")

    with pytest.raises(MissingConfigurationError) as exc:
        require_env_vars(["MISSING_VAR", "BLANK_VAR"])

    assert "BLANK_VAR, MISSING_VAR" in str(exc.value)


def test_collector_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in (
        "LOOMSYNC_INTERVAL_SECONDS",
        "LOOMSYNC_MAX_WORKERS",
        "LOOMSYNC_MAX_CYCLES",
        "LOOMSYNC_KINDS",
    ):
        monkeypatch.delenv(name, raising=False)

    config = get_collector_config()

    assert config.interval_seconds == 30.0
    assert config.max_workers == 1
    assert config.max_cycles is None
    assert config.kinds == tuple(ResourceKind)


def test_collector_reads_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("LOOMSYNC_INTERVAL_SECONDS", "2.5")
    monkeypatch.setenv("LOOMSYNC_MAX_WORKERS", "4")
    monkeypatch.setenv("LOOMSYNC_MAX_CYCLES", "3")
    monkeypatch.setenv("LOOMSYNC_KINDS", "volume, host")

    config = get_collector_config()

    assert config.interval_seconds == 2.5
    assert config.max_workers == 4
    assert config.max_cycles == 3
    assert config.kinds == (ResourceKind.VOLUME, ResourceKind.HOST)


@pytest.mark.parametrize(
    ("name", "value"),
    [
        ("LOOMSYNC_MAX_WORKERS", "many"),
        ("LOOMSYNC_MAX_WORKERS", "0"),
        ("LOOMSYNC_INTERVAL_SECONDS", "-1"),
        ("LOOMSYNC_KINDS", "network"),
    ],
)
def test_invalid_collector_values_raise(
    monkeypatch: pytest.MonkeyPatch,
    name: str,
    value: str,
) -> None:
    monkeypatch.setenv(name, value)

    with pytest.raises(ConfigurationError):
        get_collector_config()


def test_parse_docker_hosts_accepts_named_and_bare_entries() -> None:
    hosts = parse_docker_hosts("edge=tcp://10.0.0.5:2375, unix:///var/run/docker.sock,")

    assert hosts == (
        DockerHost(name="edge", url="http://10.0.0.5:2375"),
        DockerHost(name="host1", url="unix:///var/run/docker.sock"),
    )
    assert hosts[0].uds_path is None
    assert hosts[1].uds_path == "/var/run/docker.sock"


def test_unix_host_tunnels_through_socket() -> None:
    resilience = DockerHost(name="local", url="unix:///var/run/docker.sock").resilience(
        timeout_seconds=5.0, ratelimit=None
    )

    assert resilience.uds_path == "/var/run/docker.sock"
    assert resilience.base_url == "http://docker/v1.43/"
    assert resilience.retry.allowed_methods == frozenset({"GET", "HEAD"})


@pytest.mark.parametrize("value", ["ftp://example", "=http://x", "dup=http://a,dup=http://b"])
def test_invalid_docker_hosts_raise(value: str) -> None:
    with pytest.raises(ConfigurationError):
        DockerConfig(hosts=parse_docker_hosts(value))


def test_docker_config_defaults_to_local_socket(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("LOOMSYNC_DOCKER_HOSTS", raising=False)
    monkeypatch.delenv("DOCKER_HOST", raising=False)

    config = get_docker_config()

    assert config.hosts[0].uds_path == "/var/run/docker.sock"


def test_storage_and_database_config(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("LOOMSYNC_DATA_DIR", str(tmp_path))
    monkeypatch.delenv("DATABASE_URI", raising=False)

    storage = get_storage_config()
    database = get_database_config(storage=storage)

    assert storage.resolve_data_dir() == tmp_path.resolve()
    assert database.uri.endswith("loomsync.db")

    monkeypatch.setenv("DATABASE_URI", "sqlite+pysqlite:///:memory:")
    assert get_database_config().uri == "sqlite+pysqlite:///:memory:"


def test_configure_logging_forwards_options(monkeypatch: pytest.MonkeyPatch) -> None:
    captured: dict[str, object] = {}

    def fake_basic_config(**kwargs: object) -> None:
        captured.update(kwargs)

    monkeypatch.setattr(logging, "basicConfig", fake_basic_config)

    configure_logging(level=logging.DEBUG, force=True)

    assert captured["level"] == logging.DEBUG
    assert captured["force"] is True
    assert captured["format"] == "%(asctime)s %(levelname)s [%(name)s] %(message)s"

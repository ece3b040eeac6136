"""Public interface for the Docker Engine adapter."""

from __future__ import annotations

from .client import DockerEngineClient, DockerEngineError
from .inventory import DockerInventory, DockerResourceSource
from .schema import ContainerPayload, InfoPayload, VolumePayload
from .translator import parse_container, parse_host, parse_volume

__all__ = [
    "ContainerPayload",
    "DockerEngineClient",
    "DockerEngineError",
    "DockerInventory",
    "DockerResourceSource",
    "InfoPayload",
    "VolumePayload",
    "parse_container",
    "parse_host",
    "parse_volume",
]

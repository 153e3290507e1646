"""Client configuration loading.

Configuration is plain data read from a YAML file:

    homeserver_url: https://matrix.example.com
    verify_ssl: true
    request_timeout: 60
    sync_timeout_ms: 30000
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml
from yarl import URL

from .transport.http import DEFAULT_REQUEST_TIMEOUT


class ConfigLoadError(Exception):
    """Raised when a client configuration cannot be loaded."""


@dataclass(frozen=True)
class ClientConfig:
    """Settings for building a ``Client``.

    Attributes:
        homeserver_url: Homeserver origin (scheme, host and optional port).
        verify_ssl: Verify TLS certificates of an https homeserver.
        request_timeout: Total per-request timeout in seconds; must exceed
            the sync long-poll timeout.
        sync_timeout_ms: Default long-poll timeout applied to sync streams.
    """

    homeserver_url: str
    verify_ssl: bool = True
    request_timeout: float = DEFAULT_REQUEST_TIMEOUT
    sync_timeout_ms: int | None = None

    @property
    def uses_tls(self) -> bool:
        return URL(self.homeserver_url).scheme == "https"


def _load_yaml(path: Path) -> dict[str, Any]:
    """Load a YAML file, returning an empty dict for empty files."""
    if not path.exists():
        raise ConfigLoadError(f"File not found: {path}")
    with open(path, encoding="utf-8") as f:
        try:
            data = yaml.safe_load(f) or {}
        except yaml.YAMLError as err:
            raise ConfigLoadError(f"Invalid YAML in {path}: {err}") from err
    if not isinstance(data, dict):
        raise ConfigLoadError(f"Expected a mapping in {path}")
    return data


def parse_config(data: dict[str, Any]) -> ClientConfig:
    """Validate raw configuration data.

    Raises:
        ConfigLoadError: If a key is missing or has the wrong type.
    """
    homeserver_url = data.get("homeserver_url")
    if not isinstance(homeserver_url, str) or not homeserver_url:
        raise ConfigLoadError("'homeserver_url' is required")
    try:
        url = URL(homeserver_url)
        valid = url.scheme in ("http", "https") and bool(url.host)
    except ValueError as err:
        raise ConfigLoadError(
            f"'homeserver_url' is not a valid URL: {homeserver_url}"
        ) from err
    if not valid:
        raise ConfigLoadError(f"'homeserver_url' is not an http(s) URL: {homeserver_url}")

    verify_ssl = data.get("verify_ssl", True)
    if not isinstance(verify_ssl, bool):
        raise ConfigLoadError("'verify_ssl' must be a boolean")

    request_timeout = data.get("request_timeout", DEFAULT_REQUEST_TIMEOUT)
    if (
        isinstance(request_timeout, bool)
        or not isinstance(request_timeout, (int, float))
        or request_timeout <= 0
    ):
        raise ConfigLoadError("'request_timeout' must be a positive number")

    sync_timeout_ms = data.get("sync_timeout_ms")
    if sync_timeout_ms is not None and (
        isinstance(sync_timeout_ms, bool)
        or not isinstance(sync_timeout_ms, int)
        or sync_timeout_ms < 0
    ):
        raise ConfigLoadError("'sync_timeout_ms' must be a non-negative integer")
    if sync_timeout_ms is not None and sync_timeout_ms / 1000 >= request_timeout:
        raise ConfigLoadError("'request_timeout' must exceed 'sync_timeout_ms'")

    return ClientConfig(
        homeserver_url=homeserver_url,
        verify_ssl=verify_ssl,
        request_timeout=float(request_timeout),
        sync_timeout_ms=sync_timeout_ms,
    )


def load_config(path: Path) -> ClientConfig:
    """Load a client configuration from a YAML file.

    Raises:
        ConfigLoadError: If the file is missing or invalid.
    """
    return parse_config(_load_yaml(path))

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import requests

from vaultpreview.app.core.paths import resolve_repo_path

from .grant_config import DEFAULT_GRANT_BASE_URL, DEFAULT_GRANT_DOWNLOAD_PATH, load_grant_config
from .grant_http_client import GrantHttpClient, GrantHttpClientConfig


@dataclass(frozen=True)
class GrantConnection:
    config_path: Path
    config: dict[str, Any]
    client: GrantHttpClient


def create_grant_connection(
    *,
    base_url: str | None = None,
    download_path: str | None = None,
    timeout_s: float | None = None,
    config_path: str | Path | None = None,
    session: requests.Session | None = None,
    logger: logging.Logger | None = None,
) -> GrantConnection:
    """
    Build the grant client. Values in the JSON config file win over the keyword defaults,
    so an operator can repoint the gateway without touching the environment.
    """
    log = logger or logging.getLogger(__name__)
    path = resolve_repo_path(config_path) if config_path is not None else resolve_repo_path("grant_config.json")
    config = load_grant_config(path, logger=log)

    resolved_base_url = str(config.get("base_url") or base_url or DEFAULT_GRANT_BASE_URL)
    resolved_path = str(config.get("download_path") or download_path or DEFAULT_GRANT_DOWNLOAD_PATH)
    resolved_timeout = float(config.get("timeout") or timeout_s or 10)
    config.update(base_url=resolved_base_url, download_path=resolved_path, timeout=resolved_timeout)

    log.info("Grant service config: path=%s base_url=%s timeout=%ss", str(path), resolved_base_url, resolved_timeout)

    client = GrantHttpClient(
        GrantHttpClientConfig(base_url=resolved_base_url, download_path=resolved_path, timeout_s=resolved_timeout),
        session=session,
        logger=log,
    )
    return GrantConnection(config_path=path, config=config, client=client)

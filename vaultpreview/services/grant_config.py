from __future__ import annotations

import json
import logging
import os
import urllib.parse
from pathlib import Path
from typing import Any

DEFAULT_GRANT_BASE_URL = "http://localhost:8000"
DEFAULT_GRANT_DOWNLOAD_PATH = "/files/{document_id}/download"


def mask_signed_url(url: str) -> str:
    """
    Reduce a signed URL to `scheme://host/…` so it can be logged.

    The path and query of a grant URL are the capability itself.
    """
    v = (url or "").strip()
    if not v:
        return "(empty)"
    try:
        parts = urllib.parse.urlsplit(v)
    except ValueError:
        return "***"
    if not parts.scheme or not parts.netloc:
        return "***"
    return f"{parts.scheme}://{parts.hostname or ''}/…"


def format_signed_url_for_log(url: str) -> str:
    """
    Never print grant URLs by default.

    For local debugging against a fake storage backend set:
      VAULTPREVIEW_LOG_SECRETS=1
    """
    if os.environ.get("VAULTPREVIEW_LOG_SECRETS", "").strip() == "1":
        return (url or "").strip() or "(empty)"
    return mask_signed_url(url)


def load_grant_config(path: Path, *, logger: logging.Logger | None = None) -> dict[str, Any]:
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
            if not isinstance(data, dict):
                return {}
            return data
    except FileNotFoundError:
        return {}
    except Exception as exc:  # JSONDecodeError, permission errors, etc.
        if logger:
            logger.warning("Failed to load grant config from %s: %s", path, exc)
        return {}

from __future__ import annotations

from pathlib import Path


def package_root() -> Path:
    # vaultpreview/app/core/paths.py -> vaultpreview
    return Path(__file__).resolve().parents[2]


def repo_root() -> Path:
    return package_root().parent


def resolve_repo_path(path: str | Path) -> Path:
    """
    Resolve a path relative to the repository root (the parent of `vaultpreview/`).

    Used for runtime configuration files such as `grant_config.json`.
    """
    p = Path(path)
    if p.is_absolute():
        return p
    return repo_root() / p

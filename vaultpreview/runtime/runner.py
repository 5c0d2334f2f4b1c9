from __future__ import annotations

import argparse
import logging
import sys

from vaultpreview.app.core.config import settings
from vaultpreview.app.core.logging_setup import configure_logging
from vaultpreview.app.core.paths import resolve_repo_path

logger = logging.getLogger(__name__)


def print_config() -> None:
    print(f"[OK] grant_config: {resolve_repo_path(settings.GRANT_CONFIG_PATH)}")
    for name, value in settings.model_dump().items():
        print(f"  {name} = {value}")


def run_server(*, host: str | None = None, port: int | None = None, reload: bool = False) -> None:
    try:
        import uvicorn
    except Exception as exc:  # pragma: no cover
        raise SystemExit(f"uvicorn is not installed, cannot start the server: {exc}")

    configure_logging(settings.LOG_LEVEL)
    logger.info("Starting %s %s", settings.APP_NAME, settings.APP_VERSION)
    uvicorn.run(
        "vaultpreview.app.main:app",
        host=host or settings.HOST,
        port=port or settings.PORT,
        reload=reload,
        log_level=settings.LOG_LEVEL.lower(),
    )


def main(argv: list[str] | None = None) -> None:
    # `python -m vaultpreview` with no arguments starts the server.
    if argv is None and len(sys.argv) == 1:
        run_server()
        return

    parser = argparse.ArgumentParser(description="vaultpreview content proxy")
    sub = parser.add_subparsers(dest="cmd", required=True)

    p_run = sub.add_parser("run", help="start the HTTP server")
    p_run.add_argument("--host", default=None)
    p_run.add_argument("--port", type=int, default=None)
    p_run.add_argument("--reload", action="store_true", help="development mode: auto-reload")

    sub.add_parser("config", help="print the effective settings (for troubleshooting)")

    args = parser.parse_args(argv)

    if args.cmd == "run":
        run_server(host=args.host, port=args.port, reload=args.reload)
        return

    if args.cmd == "config":
        print_config()
        return

    raise SystemExit(2)

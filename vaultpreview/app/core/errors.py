from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from vaultpreview.services.content_proxy.errors import ContentProxyError

logger = logging.getLogger(__name__)


async def content_proxy_error_handler(request: Request, exc: ContentProxyError) -> JSONResponse:
    # Only the fixed public message leaves the server; `str(exc)` may describe upstream internals.
    if exc.status_code >= 500:
        logger.error("%s %s -> %s: %s", request.method, request.url.path, exc.status_code, exc)
    else:
        logger.info("%s %s -> %s: %s", request.method, request.url.path, exc.status_code, exc)
    return JSONResponse({"error": exc.public_message}, status_code=exc.status_code)


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error("Unhandled error on %s %s", request.method, request.url.path, exc_info=exc)
    return JSONResponse({"error": "Internal server error"}, status_code=500)


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ContentProxyError, content_proxy_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)

from __future__ import annotations

import logging

from fastapi import APIRouter
from fastapi.responses import StreamingResponse

from vaultpreview.app.core.auth import CallerCredentialsDep, DepsDep
from vaultpreview.services.content_proxy.errors import InvalidRequest

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("/content")
@router.get("/content/")
def content_missing_id():
    raise InvalidRequest("document id is missing from the path")


@router.get("/content/{document_id:path}")
def content_proxy(document_id: str, credentials: CallerCredentialsDep, deps: DepsDep):
    """
    Stream a document for inline preview.

    The response carries the document bytes only. The signed storage URL used to fetch
    them stays on the server:
      - 200: raw bytes, inline Content-Disposition, private Cache-Control
      - 400/401/upstream status: `{"error": "..."}`
    """
    content = deps.content_gateway.handle(document_id, credentials)
    return StreamingResponse(content.body, media_type=content.media_type, headers=content.headers)

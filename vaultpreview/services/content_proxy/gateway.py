from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterator

import requests

from vaultpreview.services.content_proxy.errors import ContentFetchError, InvalidRequest, Unauthorized, UpstreamError
from vaultpreview.services.content_proxy.headers import (
    inline_content_disposition,
    private_cache_control,
    sanitize_filename,
)
from vaultpreview.services.content_proxy.models import CallerCredentials, ProxiedContent, SignedURLGrant
from vaultpreview.services.error_normalizer import normalize_error
from vaultpreview.services.grant_config import format_signed_url_for_log
from vaultpreview.services.grant_http_client import GrantHttpClient, GrantRequestError

logger = logging.getLogger(__name__)

DEFAULT_CONTENT_TYPE = "application/octet-stream"


@dataclass(frozen=True)
class GatewayOptions:
    preview_expires_minutes: int = 5
    cache_max_age_s: int = 300
    content_timeout_s: float = 30.0
    chunk_size: int = 64 * 1024


def _iter_body(resp, chunk_size: int) -> Iterator[bytes]:
    try:
        for chunk in resp.iter_content(chunk_size=chunk_size):
            if chunk:
                yield chunk
    finally:
        resp.close()


class ContentProxyGateway:
    """
    Serve document bytes to the browser without handing it the signed storage URL.

    Per request: one grant exchange (caller's session forwarded), then one streamed fetch
    from the grant URL. Either failing aborts before any byte is sent; nothing is retried.
    """

    def __init__(
        self,
        grant_client: GrantHttpClient,
        *,
        options: GatewayOptions | None = None,
        session: requests.Session | None = None,
    ):
        self._grant_client = grant_client
        self._options = options or GatewayOptions()
        self._session = session or requests.Session()

    @property
    def options(self) -> GatewayOptions:
        return self._options

    def handle(self, document_id: str, credentials: CallerCredentials) -> ProxiedContent:
        doc_id = (document_id or "").strip()
        if not doc_id:
            raise InvalidRequest("document id is empty")

        grant = self._exchange(doc_id, credentials)
        resp = self._fetch(doc_id, grant)

        media_type = grant.content_type or resp.headers.get("Content-Type") or DEFAULT_CONTENT_TYPE
        headers = {
            "Content-Disposition": inline_content_disposition(sanitize_filename(grant.filename, document_id=doc_id)),
            "Cache-Control": private_cache_control(self._options.cache_max_age_s, grant.expires_in_seconds),
        }
        # Decoded chunks no longer match an encoded length.
        length = resp.headers.get("Content-Length")
        if length and not resp.headers.get("Content-Encoding"):
            headers["Content-Length"] = str(length)

        logger.info("Proxying document %s (%s)", doc_id, media_type)
        return ProxiedContent(body=_iter_body(resp, self._options.chunk_size), media_type=media_type, headers=headers)

    def _exchange(self, doc_id: str, credentials: CallerCredentials) -> SignedURLGrant:
        try:
            return self._grant_client.request_grant(
                doc_id,
                credentials,
                expires_minutes=self._options.preview_expires_minutes,
                disposition="inline",
            )
        except GrantRequestError as exc:
            status = exc.status_code
            if exc.body is not None:
                logger.warning("Grant service error for %s: %s", doc_id, normalize_error(exc.body).message)
            if status in (401, 403):
                raise Unauthorized(f"grant service returned HTTP {status}") from exc
            raise UpstreamError(str(exc), status_code=status or 502) from exc

    def _fetch(self, doc_id: str, grant: SignedURLGrant):
        try:
            resp = self._session.get(grant.url, stream=True, timeout=self._options.content_timeout_s)
        except requests.RequestException as exc:
            logger.error("Content fetch for %s from %s failed: %s", doc_id, format_signed_url_for_log(grant.url), type(exc).__name__)
            raise ContentFetchError("content fetch failed") from exc

        if not 200 <= resp.status_code < 300:
            status = resp.status_code
            resp.close()
            logger.warning("Content fetch for %s from %s failed: HTTP %s", doc_id, format_signed_url_for_log(grant.url), status)
            raise ContentFetchError(f"storage returned HTTP {status}", status_code=status)
        return resp

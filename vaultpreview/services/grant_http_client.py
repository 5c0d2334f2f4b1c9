from __future__ import annotations

import logging
import urllib.parse
from dataclasses import dataclass
from typing import Any

import requests

from vaultpreview.services.content_proxy.models import CallerCredentials, Disposition, SignedURLGrant
from vaultpreview.services.grant_config import DEFAULT_GRANT_DOWNLOAD_PATH


@dataclass(frozen=True)
class GrantHttpClientConfig:
    base_url: str
    download_path: str = DEFAULT_GRANT_DOWNLOAD_PATH
    timeout_s: float = 10.0


class GrantRequestError(Exception):
    """
    The grant service did not hand out a usable grant.

    `status_code` is the upstream HTTP status (None for transport failures or unusable bodies);
    `body` is the decoded JSON error body when there was one. Neither is meant for the caller.
    """

    def __init__(self, message: str, *, status_code: int | None = None, body: Any = None):
        super().__init__(message)
        self.status_code = status_code
        self.body = body


def _as_int(value: Any, default: int | None = None) -> int | None:
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


def _decode_json(resp) -> Any:
    try:
        return resp.json()
    except ValueError:
        return None


class GrantHttpClient:
    def __init__(
        self,
        config: GrantHttpClientConfig,
        *,
        session: requests.Session | None = None,
        logger: logging.Logger | None = None,
    ):
        self._config = config
        self._session = session or requests.Session()
        self._logger = logger or logging.getLogger(__name__)

    @property
    def config(self) -> GrantHttpClientConfig:
        return self._config

    def download_url(self, document_id: str) -> str:
        path = self._config.download_path.format(document_id=urllib.parse.quote(document_id, safe=""))
        return f"{self._config.base_url.rstrip('/')}{path}"

    def request_grant(
        self,
        document_id: str,
        credentials: CallerCredentials,
        *,
        expires_minutes: int,
        disposition: Disposition = "inline",
    ) -> SignedURLGrant:
        """
        Exchange the caller's session for a short-lived signed URL.

        Exactly one GET is issued; failures are never retried.
        """
        url = self.download_url(document_id)
        params = {"expires": int(expires_minutes), "disposition": disposition}
        try:
            resp = self._session.get(
                url,
                headers={"Accept": "application/json", **credentials.forward_headers()},
                params=params,
                timeout=self._config.timeout_s,
            )
        except requests.RequestException as exc:
            self._logger.error("Grant GET %s failed: %s", url, exc)
            raise GrantRequestError(f"grant request failed: {exc}") from exc

        try:
            if not 200 <= resp.status_code < 300:
                body = _decode_json(resp)
                self._logger.warning("Grant GET %s failed: HTTP %s", url, resp.status_code)
                raise GrantRequestError(f"HTTP {resp.status_code}", status_code=resp.status_code, body=body)

            data = _decode_json(resp)
        finally:
            resp.close()

        if not isinstance(data, dict):
            self._logger.error("Grant GET %s returned invalid JSON", url)
            raise GrantRequestError("invalid grant payload")

        signed_url = str(data.get("url") or "").strip()
        if not signed_url:
            self._logger.error("Grant GET %s returned no url", url)
            raise GrantRequestError("grant payload missing url")

        return SignedURLGrant(
            url=signed_url,
            filename=str(data.get("filename") or ""),
            content_type=(str(data["content_type"]) if data.get("content_type") else None),
            byte_size=_as_int(data.get("size")),
            expires_in_seconds=max(0, _as_int(data.get("expires_in_seconds"), 0) or 0),
        )

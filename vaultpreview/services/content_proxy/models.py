from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterator, Literal

from vaultpreview.services.grant_config import mask_signed_url

Disposition = Literal["inline", "attachment"]


@dataclass(frozen=True)
class CallerCredentials:
    cookie: str = ""
    authorization: str = ""

    def forward_headers(self) -> dict[str, str]:
        headers: dict[str, str] = {}
        if self.cookie:
            headers["Cookie"] = self.cookie
        if self.authorization:
            headers["Authorization"] = self.authorization
        return headers

    def __repr__(self) -> str:
        cookie = "***" if self.cookie else ""
        authorization = "***" if self.authorization else ""
        return f"CallerCredentials(cookie={cookie!r}, authorization={authorization!r})"


@dataclass(frozen=True)
class SignedURLGrant:
    url: str
    filename: str
    content_type: str | None = None
    byte_size: int | None = None
    expires_in_seconds: int = 0

    def __repr__(self) -> str:
        return (
            f"SignedURLGrant(url={mask_signed_url(self.url)!r}, filename={self.filename!r}, "
            f"content_type={self.content_type!r}, byte_size={self.byte_size!r}, "
            f"expires_in_seconds={self.expires_in_seconds!r})"
        )


@dataclass
class ProxiedContent:
    body: Iterator[bytes]
    media_type: str
    headers: dict[str, str] = field(default_factory=dict)

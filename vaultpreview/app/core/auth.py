from __future__ import annotations

from typing import Annotated

from fastapi import Depends, Request

from vaultpreview.app.dependencies import AppDependencies
from vaultpreview.services.content_proxy.models import CallerCredentials


def get_deps(request: Request) -> AppDependencies:
    return request.app.state.deps


def get_caller_credentials(request: Request) -> CallerCredentials:
    """
    Capture the caller's session as-is so it can be forwarded to the grant service.

    The session is not validated here: the grant service is the authority and answers
    401/403 for missing or expired sessions.
    """
    return CallerCredentials(
        cookie=request.headers.get("Cookie") or "",
        authorization=request.headers.get("Authorization") or "",
    )


CallerCredentialsDep = Annotated[CallerCredentials, Depends(get_caller_credentials)]
DepsDep = Annotated[AppDependencies, Depends(get_deps)]

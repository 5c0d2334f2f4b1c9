class ContentProxyError(Exception):
    """Base class for content proxy errors. `public_message` is safe to send to the caller."""

    status_code = 500
    public_message = "Internal server error"

    def __init__(self, detail: str = "", *, status_code: int | None = None):
        super().__init__(detail or self.public_message)
        if status_code is not None:
            self.status_code = status_code


class InvalidRequest(ContentProxyError):
    status_code = 400
    public_message = "Document ID is required"


class Unauthorized(ContentProxyError):
    status_code = 401
    public_message = "Unauthorized"


class UpstreamError(ContentProxyError):
    status_code = 502
    public_message = "Failed to get file URL"


class ContentFetchError(ContentProxyError):
    status_code = 502
    public_message = "Failed to fetch file content"

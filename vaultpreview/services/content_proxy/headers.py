from __future__ import annotations

import re
import urllib.parse

_UNSAFE_FILENAME_CHARS = re.compile(r'[\x00-\x1f\x7f"\\]')


def sanitize_filename(filename: str | None, *, document_id: str = "") -> str:
    name = (filename or "").replace("\\", "/").rsplit("/", 1)[-1]
    name = _UNSAFE_FILENAME_CHARS.sub("", name).strip()
    if name in {"", ".", ".."}:
        return f"document_{document_id}" if document_id else "document"
    return name


def inline_content_disposition(filename: str) -> str:
    try:
        filename.encode("ascii")
        return f'inline; filename="{filename}"'
    except UnicodeEncodeError:
        ascii_filename = filename.encode("ascii", "replace").decode("ascii")
        encoded_filename = urllib.parse.quote(filename)
        return f"inline; filename=\"{ascii_filename}\"; filename*=UTF-8''{encoded_filename}"


def private_cache_control(max_age_s: int, grant_expires_in_s: int) -> str:
    # Cached bytes must not outlive the grant that authorized them.
    max_age = max(0, min(int(max_age_s), int(grant_expires_in_s)))
    return f"private, max-age={max_age}"

from __future__ import annotations

import re

UPLOADS_PREFIX = "/uploads/"

_UPLOADS_PATH = re.compile(r"(/uploads/.*)$", re.IGNORECASE)


def absolute_media_url(url: str | None, site_base: str) -> str | None:
    """Resolve a storage-relative ``/uploads/...`` path against ``site_base``.

    Anything that does not contain an uploads path is returned unchanged.
    Absolute URLs pointing at a previous host are re-based as well.
    """
    if not url:
        return url
    match = _UPLOADS_PATH.search(url)
    if not match:
        return url
    return f"{site_base.rstrip('/')}{match.group(1)}"


def relative_media_path(url: str | None) -> str | None:
    """Strip the host from an uploads URL so it can be stored host-independently.

    ``https://any-host/uploads/a.jpg`` becomes ``/uploads/a.jpg``; other URLs
    are returned unchanged.
    """
    if not url:
        return url
    match = _UPLOADS_PATH.search(url)
    return match.group(1) if match else url

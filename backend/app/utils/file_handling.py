from __future__ import annotations

import os
import uuid
from collections.abc import Iterable

from fastapi import UploadFile

from app.config import Settings
from app.utils.exceptions import UploadRejectedError
from app.utils.media import UPLOADS_PREFIX

# Field name -> files in the order they were submitted.
UploadedFiles = dict[str, list[UploadFile]]


def group_uploads(items: Iterable[tuple[str, UploadFile]]) -> UploadedFiles:
    """Group multipart file parts by field name.

    Array-style names (``imageFiles[]``) are folded into their bare form and
    empty file inputs (no filename) are dropped.
    """
    grouped: UploadedFiles = {}
    for field, file in items:
        if not file.filename:
            continue
        key = field[:-2] if field.endswith("[]") else field
        grouped.setdefault(key, []).append(file)
    return grouped


def validate_file(file: UploadFile, allowed_extensions: set[str]) -> str:
    ext = os.path.splitext(file.filename or "")[1].lower()
    if ext not in allowed_extensions:
        raise UploadRejectedError(
            f"File type '{ext}' not allowed. Allowed: {sorted(allowed_extensions)}"
        )
    return ext


async def save_upload_file(file: UploadFile, settings: Settings) -> str:
    """Store ``file`` under a server-assigned name and return its relative path."""
    ext = validate_file(file, settings.allowed_extension_set)

    content = await file.read()
    max_bytes = settings.max_file_size_mb * 1024 * 1024
    if len(content) > max_bytes:
        raise UploadRejectedError(
            f"File '{file.filename}' exceeds {settings.max_file_size_mb} MB"
        )

    os.makedirs(settings.upload_dir, exist_ok=True)
    filename = f"{uuid.uuid4().hex}{ext}"
    with open(os.path.join(settings.upload_dir, filename), "wb") as f:
        f.write(content)

    await file.seek(0)
    return f"{UPLOADS_PREFIX}{filename}"

"""Domain errors raised by services and mapped to HTTP statuses by routers."""

from __future__ import annotations

from typing import Any


class InvalidIdError(ValueError):
    """Malformed record identifier."""


class InvalidTokenError(Exception):
    """Bearer token is malformed, badly signed, or expired."""


# ── Admins ────────────────────────────────────────────────────────────────


class InvalidAdminInputError(ValueError):
    pass


class InvalidCredentialsError(Exception):
    pass


class EmailConflictError(Exception):
    pass


class AdminNotFoundError(Exception):
    pass


class SelfDeleteError(Exception):
    pass


class LastAdminError(Exception):
    pass


# ── Listings ──────────────────────────────────────────────────────────────


class ListingNotFoundError(Exception):
    pass


class ListingValidationError(ValueError):
    """Listing fields failed validation; ``errors`` holds one dict per field."""

    def __init__(self, errors: list[dict[str, Any]]) -> None:
        super().__init__("Invalid listing")
        self.errors = errors


class UploadRejectedError(ValueError):
    """Uploaded file has a disallowed type or is too large."""

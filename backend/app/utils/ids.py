import uuid

from app.utils.exceptions import InvalidIdError


def new_id() -> str:
    return uuid.uuid4().hex


def parse_id(value: str, label: str = "id") -> str:
    """Normalize a record id to its 32-char hex form.

    Raises InvalidIdError for anything that is not a UUID.
    """
    try:
        return uuid.UUID(value).hex
    except (TypeError, ValueError) as e:
        raise InvalidIdError(f"Invalid {label}") from e

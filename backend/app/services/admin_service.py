"""Admin accounts: signup, login, lookup, update and guarded deletion."""

from __future__ import annotations

import logging
import re

from sqlalchemy import Select, delete, func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.models.admin import Admin
from app.utils.exceptions import (
    AdminNotFoundError,
    EmailConflictError,
    InvalidAdminInputError,
    InvalidCredentialsError,
    LastAdminError,
    SelfDeleteError,
)
from app.utils.ids import parse_id
from app.utils.security import hash_password, verify_password

logger = logging.getLogger(__name__)

EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
MIN_PASSWORD_LENGTH = 6
# bcrypt only looks at the first 72 bytes of its input.
MAX_PASSWORD_BYTES = 72


def normalize_email(email: str) -> str:
    email = (email or "").strip()
    if not EMAIL_PATTERN.match(email):
        raise InvalidAdminInputError("Invalid email")
    return email.lower()


def validate_password(password: str) -> str:
    if not isinstance(password, str) or len(password) < MIN_PASSWORD_LENGTH:
        raise InvalidAdminInputError(
            f"Password must be at least {MIN_PASSWORD_LENGTH} characters"
        )
    if len(password.encode()) > MAX_PASSWORD_BYTES:
        raise InvalidAdminInputError(
            f"Password must be at most {MAX_PASSWORD_BYTES} bytes"
        )
    return password


def create_admin(
    db: Session, email: str, password: str, name: str | None = None
) -> Admin:
    email = normalize_email(email)
    validate_password(password)

    admin = Admin(email=email, password_hash=hash_password(password), name=name or "")
    db.add(admin)
    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        raise EmailConflictError("User already exists") from e
    db.refresh(admin)
    logger.info("Created admin id=%s", admin.id)
    return admin


def authenticate(db: Session, email: str, password: str) -> Admin:
    """Return the admin matching the credentials.

    Unknown emails and wrong passwords fail identically so callers cannot
    probe which accounts exist.
    """
    admin = db.scalar(select(Admin).where(Admin.email == normalize_email(email)))
    if admin is None or not verify_password(password, admin.password_hash):
        logger.warning("Failed admin login")
        raise InvalidCredentialsError("Invalid credentials")
    return admin


def get_admin(db: Session, admin_id: str) -> Admin:
    admin = db.get(Admin, admin_id)
    if admin is None:
        raise AdminNotFoundError("Admin not found")
    return admin


def list_admins(db: Session) -> list[Admin]:
    return list(db.scalars(select(Admin).order_by(Admin.created_at.desc())))


def update_admin(
    db: Session,
    admin_id: str,
    email: str | None = None,
    name: str | None = None,
    password: str | None = None,
) -> Admin:
    """Apply a partial update; fields left as None are untouched."""
    admin_id = parse_id(admin_id, "admin id")

    changes: dict[str, str] = {}
    if email is not None:
        changes["email"] = normalize_email(email)
    if name is not None:
        changes["name"] = name
    if password is not None:
        changes["password_hash"] = hash_password(validate_password(password))

    admin = get_admin(db, admin_id)
    for field, value in changes.items():
        setattr(admin, field, value)
    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        raise EmailConflictError("Email already in use") from e
    db.refresh(admin)
    logger.info("Updated admin id=%s fields=%s", admin.id, sorted(changes))
    return admin


def delete_admin(db: Session, admin_id: str, requested_by: str) -> None:
    """Delete an admin other than the caller, never the last one remaining.

    Admin rows are locked first (FOR UPDATE; SQLite serializes writers and
    renders no lock), then the count check and the delete run as one statement.
    """
    admin_id = parse_id(admin_id, "admin id")
    logger.info("Delete admin requested id=%s by=%s", admin_id, requested_by)
    if admin_id == requested_by:
        raise SelfDeleteError("Cannot delete own account")

    db.execute(lock_admins_statement())
    remaining = (
        select(func.count())
        .select_from(Admin)
        .correlate(None)
        .scalar_subquery()
    )
    result = db.execute(
        delete(Admin)
        .where(Admin.id == admin_id, remaining > 1)
        .execution_options(synchronize_session="fetch")
    )
    db.commit()
    if result.rowcount:
        return

    if count_admins(db) <= 1:
        raise LastAdminError("Cannot delete the last admin account")
    raise AdminNotFoundError("Admin not found")


def count_admins(db: Session) -> int:
    return db.scalar(select(func.count()).select_from(Admin)) or 0


def lock_admins_statement() -> Select:
    """Row lock taken before a delete re-counts the remaining admins."""
    return select(Admin.id).with_for_update()

# File: app/services/validation.py

"""
Explicit validators, one per entity.

Each returns a ``ValidationResult`` holding either the cleaned values or
the list of field errors. Services call them before any store mutation.
"""

from datetime import datetime, timezone
from typing import Any, Dict, Optional

from email_validator import EmailNotValidError, validate_email

from app.core.errors import ValidationResult

PASSWORD_MIN_LENGTH = 6
# bcrypt only looks at the first 72 bytes and refuses anything longer
PASSWORD_MAX_BYTES = 72
TITLE_MAX_LENGTH = 255
TAGS_MAX_LENGTH = 255
EMAIL_MAX_LENGTH = 320


def _clean_optional(value: Optional[str]) -> Optional[str]:
    return value.strip() if isinstance(value, str) else value


def _clean_due_date(value: Optional[datetime]) -> Optional[datetime]:
    # Stored as UTC; naive values are taken to already be UTC
    if isinstance(value, datetime):
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)
    return value


def validate_credentials(email: Any, password: Any) -> ValidationResult:
    """Registration input: a well-formed email and a password of at least six characters."""
    result = ValidationResult()

    if not isinstance(email, str) or not email.strip():
        result.add("email", "Email is required")
    else:
        email = email.strip()
        if len(email) > EMAIL_MAX_LENGTH:
            result.add("email", "Email is too long")
        else:
            try:
                validate_email(email, check_deliverability=False)
            except EmailNotValidError:
                result.add("email", f"{email} is not a valid email")

    if not isinstance(password, str) or not password:
        result.add("password", "Password is required")
    elif len(password) < PASSWORD_MIN_LENGTH:
        result.add("password", f"Password must be at least {PASSWORD_MIN_LENGTH} characters")
    elif len(password.encode("utf-8")) > PASSWORD_MAX_BYTES:
        result.add("password", f"Password must be at most {PASSWORD_MAX_BYTES} bytes")

    if result.ok:
        result.data = {"email": email, "password": password}
    return result


def _check_title(result: ValidationResult, title: Any) -> Optional[str]:
    if not isinstance(title, str) or not title.strip():
        result.add("title", "Title is required")
        return None
    title = title.strip()
    if len(title) > TITLE_MAX_LENGTH:
        result.add("title", f"Title must be at most {TITLE_MAX_LENGTH} characters")
    return title


def _check_tags(result: ValidationResult, tags: Optional[str]) -> Optional[str]:
    tags = _clean_optional(tags)
    if tags is not None and len(tags) > TAGS_MAX_LENGTH:
        result.add("tags", f"Tags must be at most {TAGS_MAX_LENGTH} characters")
    return tags


def validate_task_create(fields: Dict[str, Any]) -> ValidationResult:
    result = ValidationResult()
    title = _check_title(result, fields.get("title"))
    tags = _check_tags(result, fields.get("tags"))

    if result.ok:
        result.data = {
            "title": title,
            "text": _clean_optional(fields.get("text")),
            "tags": tags,
            "due_date": _clean_due_date(fields.get("due_date")),
        }
    return result


def validate_task_patch(patch: Dict[str, Any]) -> ValidationResult:
    """
    Validate the fields a client actually sent. ``completed`` is passed through
    untouched; the store decides what it means.
    """
    result = ValidationResult()
    cleaned: Dict[str, Any] = {}

    if "title" in patch:
        cleaned["title"] = _check_title(result, patch["title"])
    if "text" in patch:
        cleaned["text"] = _clean_optional(patch["text"])
    if "tags" in patch:
        cleaned["tags"] = _check_tags(result, patch["tags"])
    if "due_date" in patch:
        cleaned["due_date"] = _clean_due_date(patch["due_date"])
    if "completed" in patch:
        cleaned["completed"] = patch["completed"]

    if result.ok:
        result.data = cleaned
    return result

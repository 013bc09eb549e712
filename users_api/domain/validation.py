"""Field rules shared by the API and the console."""

import re
from typing import Any, Dict

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")

NAME_MIN_LENGTH = 2
NAME_MAX_LENGTH = 100
EMAIL_MAX_LENGTH = 100

NAME_TOO_SHORT = f"Name must have at least {NAME_MIN_LENGTH} characters"
NAME_TOO_LONG = f"Name must have at most {NAME_MAX_LENGTH} characters"
EMAIL_REQUIRED = "Email is required"
EMAIL_INVALID = "Email must be valid"
EMAIL_TOO_LONG = f"Email must have at most {EMAIL_MAX_LENGTH} characters"


def normalize_name(name: Any) -> str:
    return name.strip() if isinstance(name, str) else ""


def normalize_email(email: Any) -> str:
    return email.strip().lower() if isinstance(email, str) else ""


def is_valid_email(email: str) -> bool:
    return bool(EMAIL_PATTERN.match(email))


def validate_user_fields(name: Any, email: Any) -> Dict[str, str]:
    """Check name and email, returning every violation keyed by field.

    Values are normalized before checking, so surrounding whitespace never
    makes an otherwise valid email fail. An empty dict means the input is
    acceptable.
    """
    errors: Dict[str, str] = {}

    clean_name = normalize_name(name)
    if len(clean_name) < NAME_MIN_LENGTH:
        errors["name"] = NAME_TOO_SHORT
    elif len(clean_name) > NAME_MAX_LENGTH:
        errors["name"] = NAME_TOO_LONG

    clean_email = normalize_email(email)
    if not clean_email:
        errors["email"] = EMAIL_REQUIRED
    elif not is_valid_email(clean_email):
        errors["email"] = EMAIL_INVALID
    elif len(clean_email) > EMAIL_MAX_LENGTH:
        errors["email"] = EMAIL_TOO_LONG

    return errors

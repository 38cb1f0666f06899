"""Input validation helpers for resource payloads."""
from __future__ import annotations
from typing import Any, Mapping, Optional, Sequence


def require_id(value: Optional[str], field: str) -> str:
    """Validate an identifier used as a path segment.

    Args:
        value: Identifier (UUID, name, alias)
        field: Field name for error messages (e.g., "User ID")

    Returns:
        Trimmed identifier

    Raises:
        ValueError: If missing, blank, or containing a path separator
    """
    if value is None or not str(value).strip():
        raise ValueError(f"{field} is required")
    value = str(value).strip()
    if "/" in value:
        raise ValueError(f"{field} must not contain '/'")
    return value


def require_payload(payload: Optional[Mapping[str, Any]], name: str, fields: Sequence[str] = ()) -> Mapping[str, Any]:
    """Validate that a representation is present and carries required fields.

    Args:
        payload: Representation dict
        name: Resource name for error messages (e.g., "Client")
        fields: Keys that must be present and non-empty

    Raises:
        ValueError: If the payload or a required field is missing
    """
    if not payload:
        raise ValueError(f"{name} data is required")
    for field in fields:
        if not payload.get(field):
            raise ValueError(f"{name} {field} is required")
    return payload


def validate_email(email: str) -> str:
    """Validate email address.

    Args:
        email: Email address to validate

    Returns:
        Normalized email address

    Raises:
        ValueError: If email is invalid
    """
    email = email.strip().lower()
    if not email or "@" not in email:
        raise ValueError("Invalid email format")

    local, domain = email.rsplit("@", 1)
    if not local or not domain or "." not in domain:
        raise ValueError("Invalid email format")
    if len(email) > 254:
        raise ValueError("Email exceeds maximum length")

    return email


def validate_actions(actions: Sequence[str]) -> list[str]:
    """Validate a list of required-action aliases (e.g. UPDATE_PASSWORD)."""
    if not actions:
        raise ValueError("At least one action is required")
    cleaned = [action.strip() for action in actions if action and action.strip()]
    if len(cleaned) != len(actions):
        raise ValueError("Actions must be non-empty strings")
    return cleaned

import math
import re
from typing import Any, List, Optional

from src.exceptions import TicketValidationError
from src.tickets.schemas import (
    TicketSubmission, TicketType, ALLOWED_TICKET_TYPES,
    NAME_MAX_LENGTH, EMAIL_MAX_LENGTH, NOTES_MAX_LENGTH, QUANTITY_MIN, QUANTITY_MAX
)

# One "@", no whitespace, and a dot somewhere in the domain part
EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")

def _clean_text(value: Any) -> Optional[str]:
    """Trimmed string, or None when the value is missing, blank or not text"""
    if not isinstance(value, str):
        return None
    value = value.strip()
    return value or None

def _parse_quantity(value: Any) -> Optional[int]:
    """Whole number from an int, an integral float or a numeric string"""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        value = value.strip()
        try:
            return int(value)
        except ValueError:
            try:
                value = float(value)
            except ValueError:
                return None
    if isinstance(value, float):
        if math.isfinite(value) and value.is_integer():
            return int(value)
    return None

def _check_name(field: str, value: Any, errors: List[str]) -> Optional[str]:
    text = _clean_text(value)
    if text is None:
        errors.append(f"{field} is required")
    elif len(text) > NAME_MAX_LENGTH:
        errors.append(f"{field} must be at most {NAME_MAX_LENGTH} characters")
    return text

def validate_ticket_submission(payload: Any) -> TicketSubmission:
    """Check a raw submission and return it normalized.

    Errors are collected in field order (firstName, lastName, email,
    ticketType, quantity, notes), at most one per field, and raised together
    as a TicketValidationError. Nothing is returned alongside errors.
    """
    if not isinstance(payload, dict):
        payload = {}

    errors: List[str] = []

    first_name = _check_name("firstName", payload.get("firstName"), errors)
    last_name = _check_name("lastName", payload.get("lastName"), errors)

    email = _clean_text(payload.get("email"))
    if email is None or not EMAIL_PATTERN.match(email):
        errors.append("valid email is required")
    elif len(email) > EMAIL_MAX_LENGTH:
        errors.append(f"email must be at most {EMAIL_MAX_LENGTH} characters")
    else:
        email = email.lower()

    ticket_type = _clean_text(payload.get("ticketType"))
    if ticket_type not in ALLOWED_TICKET_TYPES:
        errors.append("invalid ticketType")

    quantity = _parse_quantity(payload.get("quantity"))
    if quantity is None or not QUANTITY_MIN <= quantity <= QUANTITY_MAX:
        errors.append(f"quantity must be an integer between {QUANTITY_MIN} and {QUANTITY_MAX}")

    raw_notes = payload.get("notes")
    notes = ""
    if raw_notes is not None:
        if not isinstance(raw_notes, str):
            errors.append("notes must be text")
        else:
            notes = raw_notes.strip()
            if len(notes) > NOTES_MAX_LENGTH:
                errors.append(f"notes must be at most {NOTES_MAX_LENGTH} characters")

    if errors:
        raise TicketValidationError(errors)

    return TicketSubmission(
        first_name=first_name,
        last_name=last_name,
        email=email,
        ticket_type=TicketType(ticket_type),
        quantity=quantity,
        notes=notes,
    )

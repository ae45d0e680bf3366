"""Field format predicates for passenger details."""
from __future__ import annotations

from typing import List

from .models import PassengerDraft

MAX_NAME_LENGTH = 20
MAX_PASSPORT_LENGTH = 10
MAX_ID_LENGTH = 10
MAX_PHONE_LENGTH = 15


def validate_name(name: str) -> bool:
    return 0 < len(name) <= MAX_NAME_LENGTH


def validate_passport(passport: str) -> bool:
    return 0 < len(passport) <= MAX_PASSPORT_LENGTH and passport.isalnum()


def validate_id(government_id: str) -> bool:
    return 0 < len(government_id) <= MAX_ID_LENGTH and government_id.isdigit()


def validate_phone(phone: str) -> bool:
    return 0 < len(phone) <= MAX_PHONE_LENGTH and phone.isdigit()


def draft_problems(draft: PassengerDraft) -> List[str]:
    """Return a human readable list of the fields that fail validation."""

    problems = []
    if not validate_name(draft.name):
        problems.append(f"name must be 1-{MAX_NAME_LENGTH} characters")
    if not validate_passport(draft.passport):
        problems.append(f"passport must be up to {MAX_PASSPORT_LENGTH} letters or digits")
    if not validate_id(draft.government_id):
        problems.append(f"ID must be up to {MAX_ID_LENGTH} digits")
    if not validate_phone(draft.contact):
        problems.append(f"phone must be up to {MAX_PHONE_LENGTH} digits")
    return problems

"""Shared validation utilities"""

import re
import uuid
from typing import Optional

from .constants import EDUCATION_LEVELS, MOROCCAN_CITIES

MOROCCAN_PHONE_RE = re.compile(r"^(\+212|0)[0-9]{9}$")


def validate_uuid(value: str) -> bool:
    """Validate UUID format"""
    try:
        uuid.UUID(value)
        return True
    except (ValueError, AttributeError, TypeError):
        return False


def validate_uuid_field(value: str) -> str:
    """Pydantic-friendly variant of validate_uuid that raises on bad input"""
    if not validate_uuid(value):
        raise ValueError("Must be a valid UUID")
    return value


def validate_moroccan_phone(phone: Optional[str]) -> Optional[str]:
    """
    Validate a Moroccan phone number.

    Accepts the international (+212XXXXXXXXX) and national (0XXXXXXXXX)
    forms. Spaces and dashes are stripped before matching.

    Raises:
        ValueError: If phone number is invalid
    """
    if not phone:
        return phone

    normalized = re.sub(r"[\s-]", "", phone)
    if not MOROCCAN_PHONE_RE.match(normalized):
        raise ValueError(
            "Phone must be a valid Moroccan number (e.g., +212612345678 or 0612345678)"
        )
    return normalized


def validate_city(city: Optional[str]) -> Optional[str]:
    if city is not None and city not in MOROCCAN_CITIES:
        raise ValueError("City must be a valid Moroccan city")
    return city


def validate_cities(cities: Optional[list[str]]) -> Optional[list[str]]:
    if cities:
        for city in cities:
            validate_city(city)
    return cities


def validate_education_level(level: Optional[str]) -> Optional[str]:
    if level is not None and level not in EDUCATION_LEVELS:
        raise ValueError("Level must be a valid education level")
    return level


def validate_string_list(values: Optional[list[str]], max_items: int = 50) -> Optional[list[str]]:
    """Strip entries, drop blanks and duplicates while keeping order"""
    if values is None:
        return values
    cleaned: list[str] = []
    for value in values:
        value = value.strip()
        if value and value not in cleaned:
            cleaned.append(value)
    if len(cleaned) > max_items:
        raise ValueError(f"At most {max_items} entries are allowed")
    return cleaned


def split_csv(value: Optional[str]) -> list[str]:
    """Split a comma separated query parameter ("React,Node.js")"""
    if not value:
        return []
    return [part.strip() for part in value.split(",") if part.strip()]

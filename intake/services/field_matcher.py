# intake/services/field_matcher.py
"""
Pure filters that match a full client/vehicle collection against one field/value pair.
Text fields match case-insensitively as substrings; identifiers (tax id, phone)
match by containment after spaces and dashes are stripped on both sides.
Order of the input collection is preserved.
"""

import re
from typing import Callable, Optional, Union

from intake.schemas.client import Client
from intake.schemas.search import ClientCriteria, SearchField, VehicleCriteria
from intake.schemas.vehicle import Vehicle

_SEPARATORS = re.compile(r"[\s\-]+")


def _normalise_text(value: str) -> str:
    return value.strip().casefold()


def _normalise_identifier(value: str) -> str:
    return _SEPARATORS.sub("", value).casefold()


def _contains(haystack: Optional[str], needle: str, normalise: Callable[[str], str]) -> bool:
    needle = normalise(needle)
    if not haystack or not needle:
        return False
    return needle in normalise(haystack)


_CLIENT_ACCESSORS: dict[SearchField, tuple[Callable[[Client], Optional[str]], Callable[[str], str]]] = {
    SearchField.OWNER_NAME: (lambda c: f"{c.first_name} {c.last_name}", _normalise_text),
    SearchField.COMPANY_NAME: (lambda c: c.company, _normalise_text),
    SearchField.TAX_ID: (lambda c: c.tax_id, _normalise_identifier),
    SearchField.EMAIL: (lambda c: c.email, _normalise_text),
    SearchField.PHONE: (lambda c: c.phone, _normalise_identifier),
}


def _require_value(value: str):
    if not value or not value.strip():
        raise ValueError("Field matcher called with a blank value")


def match_vehicles(criteria: VehicleCriteria, vehicles: list[Vehicle]) -> list[Vehicle]:
    _require_value(criteria.value)
    return [v for v in vehicles if _contains(v.license_plate, criteria.value, _normalise_text)]


def match_clients(criteria: ClientCriteria, clients: list[Client]) -> list[Client]:
    _require_value(criteria.value)
    accessor, normalise = _CLIENT_ACCESSORS[SearchField(criteria.field)]
    return [c for c in clients if _contains(accessor(c), criteria.value, normalise)]


def match(criteria: Union[VehicleCriteria, ClientCriteria], collection: list) -> list:
    """Dispatch on the criteria variant."""
    if isinstance(criteria, VehicleCriteria):
        return match_vehicles(criteria, collection)
    return match_clients(criteria, collection)

# intake/services/form_mapper.py
"""
Projects resolved clients and vehicles onto intake-form field patches.
Both mappers are total: missing optional values become "" so that merging a
patch always overwrites whatever the previous entity left in the form.
"""

from typing import Any

from intake.schemas.client import Client, ClientFormData
from intake.schemas.vehicle import Vehicle, VehicleFormData

FormPatch = dict[str, Any]


def _owner_name(client: Client) -> str:
    first = (client.first_name or "").strip()
    last = (client.last_name or "").strip()
    return f"{first} {last}".strip()


def map_client_to_form_data(client: Client) -> FormPatch:
    return ClientFormData(
        owner_name=_owner_name(client),
        company_name=client.company or "",
        tax_id=client.tax_id or "",
        email=client.email or "",
        phone=client.phone or "",
    ).model_dump(by_alias=True)


def map_vehicle_to_form_data(vehicle: Vehicle) -> FormPatch:
    return VehicleFormData(
        license_plate=vehicle.license_plate or "",
        make=vehicle.make or "",
        model=vehicle.model or "",
        production_year=vehicle.year,
        vin=vehicle.vin or "",
        color=vehicle.color or "",
    ).model_dump(by_alias=True)

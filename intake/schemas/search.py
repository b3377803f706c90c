# intake/schemas/search.py
"""
Search criteria and results.
A criterion is a tagged variant: vehicle criteria can only carry licensePlate,
client criteria only the owner-side fields, so the field/entity pairing is
fixed by the type instead of by convention.
"""

from enum import Enum
from typing import Annotated, Literal, Union

from pydantic import BaseModel, Field

from intake.schemas.client import Client
from intake.schemas.vehicle import Vehicle


class SearchField(str, Enum):
    # Values are the intake-form field names the search reads from
    LICENSE_PLATE = "licensePlate"
    OWNER_NAME = "ownerName"
    COMPANY_NAME = "companyName"
    TAX_ID = "taxId"
    EMAIL = "email"
    PHONE = "phone"


CLIENT_FIELDS = (
    SearchField.OWNER_NAME,
    SearchField.COMPANY_NAME,
    SearchField.TAX_ID,
    SearchField.EMAIL,
    SearchField.PHONE,
)


class VehicleCriteria(BaseModel):
    kind: Literal["vehicle"] = "vehicle"
    field: Literal[SearchField.LICENSE_PLATE] = SearchField.LICENSE_PLATE
    value: str


class ClientCriteria(BaseModel):
    kind: Literal["client"] = "client"
    field: Literal[
        SearchField.OWNER_NAME,
        SearchField.COMPANY_NAME,
        SearchField.TAX_ID,
        SearchField.EMAIL,
        SearchField.PHONE,
    ]
    value: str


SearchCriteria = Annotated[Union[VehicleCriteria, ClientCriteria], Field(discriminator="kind")]


def criteria_for(field, value: str) -> Union[VehicleCriteria, ClientCriteria]:
    """Build the criteria variant matching a field name (enum member or its string value)."""
    field = SearchField(field)
    if field == SearchField.LICENSE_PLATE:
        return VehicleCriteria(value=value)
    return ClientCriteria(field=field, value=value)


class SearchRequest(BaseModel):
    field: SearchField
    value: str = ""


class SearchResults(BaseModel):
    vehicles: list[Vehicle] = []
    clients: list[Client] = []

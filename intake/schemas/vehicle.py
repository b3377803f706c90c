# intake/schemas/vehicle.py
from pydantic import BaseModel
from pydantic.alias_generators import to_camel
from typing import Optional


class Vehicle(BaseModel):
    """A vehicle as seen by the search engine. owner_ids may reference missing clients."""
    id: str
    make: str
    model: str
    year: int
    license_plate: str
    vin: Optional[str] = None
    color: Optional[str] = None
    owner_ids: list[str] = []

    class Config:
        alias_generator = to_camel
        populate_by_name = True
        from_attributes = True

    @classmethod
    def from_record(cls, row) -> "Vehicle":
        return cls(
            id=row.id,
            make=row.make,
            model=row.model,
            year=row.year,
            license_plate=row.license_plate,
            vin=row.vin,
            color=row.color,
            owner_ids=row.owner_ids,
        )


class VehicleFormData(BaseModel):
    license_plate: str
    make: str
    model: str
    production_year: int
    vin: str = ""
    color: str = ""

    class Config:
        alias_generator = to_camel
        populate_by_name = True


class VehicleLookupOut(BaseModel):
    plate: str
    status: str              # known | unknown
    registered: bool
    matches: list[Vehicle] = []

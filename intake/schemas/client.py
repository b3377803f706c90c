# intake/schemas/client.py
from pydantic import BaseModel
from pydantic.alias_generators import to_camel
from typing import Optional


class Client(BaseModel):
    """A client as seen by the search engine. vehicles holds vehicle ids."""
    id: str
    first_name: str
    last_name: str
    email: str = ""
    phone: str = ""
    address: Optional[str] = None
    company: Optional[str] = None
    tax_id: Optional[str] = None
    notes: Optional[str] = None
    vehicles: list[str] = []

    class Config:
        alias_generator = to_camel
        populate_by_name = True
        from_attributes = True

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    @classmethod
    def from_record(cls, row) -> "Client":
        return cls(
            id=row.id,
            first_name=row.first_name,
            last_name=row.last_name,
            email=row.email or "",
            phone=row.phone or "",
            address=row.address,
            company=row.company,
            tax_id=row.tax_id,
            notes=row.notes,
            vehicles=row.vehicle_ids,
        )


class ClientFormData(BaseModel):
    owner_name: str
    company_name: str = ""
    tax_id: str = ""
    email: str = ""
    phone: str = ""

    class Config:
        alias_generator = to_camel
        populate_by_name = True

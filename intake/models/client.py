# intake/models/client.py
"""
Clients table: owners of vehicles brought in for detailing.
Linked to vehicles through the vehicle_owners association table.
"""

from sqlalchemy import Column, String, Text
from sqlalchemy.orm import relationship
from intake.database import Base
from intake.models.vehicle import vehicle_owners


class Client(Base):
    __tablename__ = "clients"

    id = Column(String(64), primary_key=True)
    first_name = Column(String(100), nullable=False)
    last_name = Column(String(100), nullable=False)
    email = Column(String(200), nullable=False, default="")
    phone = Column(String(50), nullable=False, default="")
    address = Column(String(300))
    company = Column(String(200))
    tax_id = Column(String(50), index=True)
    notes = Column(Text)

    vehicles = relationship("Vehicle", secondary=vehicle_owners, back_populates="owners",
                            order_by="Vehicle.id")

    @property
    def vehicle_ids(self) -> list[str]:
        return [vehicle.id for vehicle in self.vehicles]

    def __repr__(self):
        return f"<Client {self.id} {self.first_name} {self.last_name}>"

# intake/models/vehicle.py
"""
Vehicles table plus the vehicle_owners association (many-to-many with clients).
license_plate is unique in practice but not enforced; the search engine
treats it as a plain indexed text column.
"""

from sqlalchemy import Column, Integer, String, Table, ForeignKey
from sqlalchemy.orm import relationship
from intake.database import Base


vehicle_owners = Table(
    "vehicle_owners",
    Base.metadata,
    Column("vehicle_id", String(64), ForeignKey("vehicles.id"), primary_key=True),
    Column("client_id", String(64), ForeignKey("clients.id"), primary_key=True),
)


class Vehicle(Base):
    __tablename__ = "vehicles"

    id = Column(String(64), primary_key=True)
    make = Column(String(100), nullable=False)
    model = Column(String(100), nullable=False)
    year = Column(Integer, nullable=False)
    license_plate = Column(String(20), nullable=False, index=True)
    vin = Column(String(17))
    color = Column(String(50))

    owners = relationship("Client", secondary=vehicle_owners, back_populates="vehicles",
                          order_by="Client.id")

    @property
    def owner_ids(self) -> list[str]:
        return [owner.id for owner in self.owners]

    def __repr__(self):
        return f"<Vehicle {self.id} plate={self.license_plate} {self.make} {self.model}>"

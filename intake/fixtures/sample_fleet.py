# intake/fixtures/sample_fleet.py
"""
Sample fleet: five clients and seven vehicles.
Used by the in-memory store, by the test suite and by `init_db.py --seed`.
"""

from sqlalchemy.orm import Session

from intake.schemas.client import Client
from intake.schemas.vehicle import Vehicle
from intake.utils.logger import get_logger

logger = get_logger(__name__)


SAMPLE_CLIENTS = [
    Client(id="client1", first_name="Jan", last_name="Kowalski",
           email="jan.kowalski@example.com", phone="+48 123 456 789",
           address="ul. Warszawska 10, 00-001 Warszawa", company="Kowalski & Sons",
           tax_id="1234567890", notes="Prefers phone contact. Interested in ceramic coating.",
           vehicles=["veh1", "veh2"]),
    Client(id="client2", first_name="Anna", last_name="Nowak",
           email="anna.nowak@example.com", phone="+48 987 654 321",
           address="ul. Krakowska 25, 30-001 Kraków",
           vehicles=["veh3"]),
    Client(id="client3", first_name="Tomasz", last_name="Wiśniewski",
           email="tomasz.wisniewski@example.com", phone="+48 111 222 333",
           address="ul. Wrocławska 5, 50-001 Wrocław", company="Wisniewski Transport Sp. z o.o.",
           tax_id="9876543210", notes="Runs a vehicle fleet, potential for larger orders.",
           vehicles=["veh4", "veh5", "veh6"]),
    Client(id="client4", first_name="Magdalena", last_name="Lewandowska",
           email="magdalena.lewandowska@example.com", phone="+48 444 555 666",
           vehicles=[]),
    Client(id="client5", first_name="Piotr", last_name="Dąbrowski",
           email="piotr.dabrowski@example.com", phone="+48 777 888 999",
           address="ul. Gdańska 15, 80-001 Gdańsk",
           vehicles=["veh7"]),
]

SAMPLE_VEHICLES = [
    Vehicle(id="veh1", make="Audi", model="A6", year=2019, license_plate="WA12345",
            color="Black", vin="WAUZZZ4G1JN123456", owner_ids=["client1"]),
    Vehicle(id="veh2", make="BMW", model="X5", year=2020, license_plate="WA54321",
            color="White", vin="WBAKJ4C50KL123456", owner_ids=["client1"]),
    Vehicle(id="veh3", make="Toyota", model="Corolla", year=2018, license_plate="KR98765",
            color="Silver", owner_ids=["client2"]),
    Vehicle(id="veh4", make="Mercedes-Benz", model="Sprinter", year=2021, license_plate="WR11111",
            color="White", vin="WDB9066571S123456", owner_ids=["client3"]),
    Vehicle(id="veh5", make="Mercedes-Benz", model="Actros", year=2020, license_plate="WR22222",
            color="Red", owner_ids=["client3"]),
    Vehicle(id="veh6", make="Volkswagen", model="Caddy", year=2019, license_plate="WR33333",
            color="White", owner_ids=["client3"]),
    Vehicle(id="veh7", make="Volvo", model="XC60", year=2022, license_plate="GD22222",
            color="Graphite", vin="YV1DZ8256L1234567", owner_ids=["client5"]),
]


def seed_sample_fleet(db: Session) -> int:
    """Insert the sample fleet into an empty database. Returns the number of vehicles added."""
    from intake.models.client import Client as ClientRecord
    from intake.models.vehicle import Vehicle as VehicleRecord

    if db.query(ClientRecord).first() is not None:
        logger.info("[SEED] Clients already present, skipping sample fleet")
        return 0

    clients = {}
    for c in SAMPLE_CLIENTS:
        clients[c.id] = ClientRecord(
            id=c.id, first_name=c.first_name, last_name=c.last_name, email=c.email,
            phone=c.phone, address=c.address, company=c.company, tax_id=c.tax_id, notes=c.notes,
        )
        db.add(clients[c.id])

    for v in SAMPLE_VEHICLES:
        record = VehicleRecord(id=v.id, make=v.make, model=v.model, year=v.year,
                               license_plate=v.license_plate, vin=v.vin, color=v.color)
        record.owners = [clients[owner_id] for owner_id in v.owner_ids if owner_id in clients]
        db.add(record)

    db.commit()
    logger.info(f"[SEED] Sample fleet stored: {len(SAMPLE_CLIENTS)} clients, {len(SAMPLE_VEHICLES)} vehicles")
    return len(SAMPLE_VEHICLES)

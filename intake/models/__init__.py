# Detailing Intake: database models
# Import all models here for SQLAlchemy discovery

from intake.models.vehicle import Vehicle, vehicle_owners  # noqa
from intake.models.client import Client                    # noqa

"""Database models."""

from sqlalchemy import MetaData

from app.models.appointments import appointments
from app.models.doctors import doctors
from app.models.patients import patients
from app.models.users import users

# Combined metadata for create_all and Alembic autogenerate
metadata = MetaData()
for table in (users, patients, doctors, appointments):
    table.to_metadata(metadata)

__all__ = [
    "appointments",
    "doctors",
    "metadata",
    "patients",
    "users",
]

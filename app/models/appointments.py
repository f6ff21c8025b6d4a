"""Appointments table model using SQLAlchemy Core."""

from sqlalchemy import (
    CheckConstraint,
    Column,
    Index,
    MetaData,
    Table,
    Text,
    text,
)
from sqlalchemy.dialects.postgresql import TIMESTAMP, UUID

# Metadata for all tables
metadata = MetaData()

# Name of the exclusion constraint created by migration 002; the SQL store
# recognises it when an insert or update loses a booking race.
NO_OVERLAP_CONSTRAINT = "appointments_no_overlap"

appointments = Table(
    "appointments",
    metadata,
    Column(
        "id",
        UUID(as_uuid=True),
        primary_key=True,
        server_default=text("gen_random_uuid()"),
    ),
    # Weak references, not cross-checked against patients/doctors
    Column("patient_id", UUID(as_uuid=True), nullable=False, index=True),
    Column("doctor_id", UUID(as_uuid=True), nullable=False),
    # Half-open interval [start_time, end_time)
    Column("start_time", TIMESTAMP(timezone=True), nullable=False),
    Column("end_time", TIMESTAMP(timezone=True), nullable=False),
    Column("reason", Text, nullable=True),
    Column("notes", Text, nullable=True),
    Column(
        "status",
        Text,
        nullable=False,
        server_default="scheduled",
    ),
    # Audit fields
    Column("created_at", TIMESTAMP(timezone=True), nullable=False, server_default=text("NOW()")),
    Column("updated_at", TIMESTAMP(timezone=True), nullable=False, server_default=text("NOW()")),
    # Constraints
    CheckConstraint(
        "status IN ('scheduled', 'completed', 'cancelled')",
        name="appointments_status_check",
    ),
    CheckConstraint(
        "end_time > start_time",
        name="appointments_interval_check",
    ),
    Index("ix_appointments_doctor_id_start_time", "doctor_id", "start_time"),
)

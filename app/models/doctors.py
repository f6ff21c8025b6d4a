"""Doctor model definition using SQLAlchemy Core."""

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    MetaData,
    String,
    Table,
    Text,
    text,
)
from sqlalchemy.dialects.postgresql import UUID

metadata = MetaData()

doctors = Table(
    "doctors",
    metadata,
    Column("id", UUID(as_uuid=True), primary_key=True, server_default=text("gen_random_uuid()")),
    # Optional login account for the doctor
    Column("user_id", UUID(as_uuid=True), nullable=True, index=True),
    Column("first_name", Text, nullable=False),
    Column("last_name", Text, nullable=False),
    Column("email", Text, nullable=False, unique=True, index=True),
    # Stored lower-cased so list filters match regardless of input casing
    Column("specialty", String(200), nullable=False, index=True),
    Column("phone_number", String(20)),
    Column("clinic_name", Text),
    Column("notes", Text),
    # Doctors that are not active are hidden from booking lists
    Column("is_active", Boolean, nullable=False, server_default=text("true"), index=True),
    # Metadata
    Column("created_at", DateTime(timezone=True), nullable=False, server_default=text("NOW()")),
    Column("updated_at", DateTime(timezone=True), nullable=False, server_default=text("NOW()")),
)

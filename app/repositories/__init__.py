"""Record stores used by the services."""

from dataclasses import dataclass, field

from app.repositories.appointments import (
    AppointmentRepository,
    InMemoryAppointmentRepository,
    SQLAppointmentRepository,
)
from app.repositories.doctors import (
    DoctorRepository,
    InMemoryDoctorRepository,
    SQLDoctorRepository,
)
from app.repositories.patients import (
    InMemoryPatientRepository,
    PatientRepository,
    SQLPatientRepository,
)
from app.repositories.users import (
    InMemoryUserRepository,
    SQLUserRepository,
    UserRepository,
)


@dataclass
class InMemoryStores:
    """One in-process store per entity."""

    users: InMemoryUserRepository = field(default_factory=InMemoryUserRepository)
    patients: InMemoryPatientRepository = field(default_factory=InMemoryPatientRepository)
    doctors: InMemoryDoctorRepository = field(default_factory=InMemoryDoctorRepository)
    appointments: InMemoryAppointmentRepository = field(
        default_factory=InMemoryAppointmentRepository
    )


__all__ = [
    "AppointmentRepository",
    "DoctorRepository",
    "InMemoryAppointmentRepository",
    "InMemoryDoctorRepository",
    "InMemoryPatientRepository",
    "InMemoryStores",
    "InMemoryUserRepository",
    "PatientRepository",
    "SQLAppointmentRepository",
    "SQLDoctorRepository",
    "SQLPatientRepository",
    "SQLUserRepository",
    "UserRepository",
]

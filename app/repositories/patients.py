"""Patient record stores."""

from abc import ABC, abstractmethod
from uuid import UUID

from app.models.patients import patients
from app.repositories.base import InMemoryTable, Record, SQLRepository

DUPLICATE_EMAIL = "Email already exists"


class PatientRepository(ABC):
    """Persistence interface for patients."""

    @abstractmethod
    async def create(self, values: Record) -> Record: ...

    @abstractmethod
    async def get(self, patient_id: UUID) -> Record | None: ...

    @abstractmethod
    async def get_by_email(self, email: str) -> Record | None: ...

    @abstractmethod
    async def find_all(self, is_active: bool | None = None) -> list[Record]:
        """Find patients, newest first."""

    @abstractmethod
    async def update(self, patient_id: UUID, values: Record) -> Record | None: ...


class SQLPatientRepository(SQLRepository, PatientRepository):
    """PostgreSQL patient store."""

    table = patients
    duplicate_message = DUPLICATE_EMAIL

    async def create(self, values: Record) -> Record:
        return await self._insert(values)

    async def get(self, patient_id: UUID) -> Record | None:
        return await self._get(patient_id)

    async def get_by_email(self, email: str) -> Record | None:
        return await self._first(patients.c.email == email)

    async def find_all(self, is_active: bool | None = None) -> list[Record]:
        conditions = []
        if is_active is not None:
            conditions.append(patients.c.is_active == is_active)
        return await self._select(*conditions, order_by=patients.c.created_at.desc())

    async def update(self, patient_id: UUID, values: Record) -> Record | None:
        return await self._update(patient_id, values)


class InMemoryPatientRepository(PatientRepository):
    """In-process patient store."""

    def __init__(self) -> None:
        self.table = InMemoryTable(
            defaults={"notes": None, "is_active": True},
            unique=("email",),
            duplicate_message=DUPLICATE_EMAIL,
        )

    async def create(self, values: Record) -> Record:
        return await self.table.insert(values)

    async def get(self, patient_id: UUID) -> Record | None:
        return await self.table.get(patient_id)

    async def get_by_email(self, email: str) -> Record | None:
        return await self.table.first(lambda row: row["email"] == email)

    async def find_all(self, is_active: bool | None = None) -> list[Record]:
        return await self.table.select(
            lambda row: is_active is None or row["is_active"] == is_active,
            key=lambda row: row["created_at"],
            reverse=True,
        )

    async def update(self, patient_id: UUID, values: Record) -> Record | None:
        return await self.table.update(patient_id, values)

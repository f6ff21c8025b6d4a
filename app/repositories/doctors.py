"""Doctor record stores."""

from abc import ABC, abstractmethod
from uuid import UUID

from app.models.doctors import doctors
from app.repositories.base import InMemoryTable, Record, SQLRepository

DUPLICATE_EMAIL = "Email already exists"


class DoctorRepository(ABC):
    """Persistence interface for doctors."""

    @abstractmethod
    async def create(self, values: Record) -> Record: ...

    @abstractmethod
    async def get(self, doctor_id: UUID) -> Record | None: ...

    @abstractmethod
    async def get_by_email(self, email: str) -> Record | None: ...

    @abstractmethod
    async def find_all(
        self,
        is_active: bool | None = None,
        specialty: str | None = None,
    ) -> list[Record]:
        """Find doctors, newest first."""

    @abstractmethod
    async def update(self, doctor_id: UUID, values: Record) -> Record | None: ...


class SQLDoctorRepository(SQLRepository, DoctorRepository):
    """PostgreSQL doctor store."""

    table = doctors
    duplicate_message = DUPLICATE_EMAIL

    async def create(self, values: Record) -> Record:
        return await self._insert(values)

    async def get(self, doctor_id: UUID) -> Record | None:
        return await self._get(doctor_id)

    async def get_by_email(self, email: str) -> Record | None:
        return await self._first(doctors.c.email == email)

    async def find_all(
        self,
        is_active: bool | None = None,
        specialty: str | None = None,
    ) -> list[Record]:
        conditions = []
        if is_active is not None:
            conditions.append(doctors.c.is_active == is_active)
        if specialty:
            conditions.append(doctors.c.specialty == specialty)
        return await self._select(*conditions, order_by=doctors.c.created_at.desc())

    async def update(self, doctor_id: UUID, values: Record) -> Record | None:
        return await self._update(doctor_id, values)


class InMemoryDoctorRepository(DoctorRepository):
    """In-process doctor store."""

    def __init__(self) -> None:
        self.table = InMemoryTable(
            defaults={
                "user_id": None,
                "phone_number": None,
                "clinic_name": None,
                "notes": None,
                "is_active": True,
            },
            unique=("email",),
            duplicate_message=DUPLICATE_EMAIL,
        )

    async def create(self, values: Record) -> Record:
        return await self.table.insert(values)

    async def get(self, doctor_id: UUID) -> Record | None:
        return await self.table.get(doctor_id)

    async def get_by_email(self, email: str) -> Record | None:
        return await self.table.first(lambda row: row["email"] == email)

    async def find_all(
        self,
        is_active: bool | None = None,
        specialty: str | None = None,
    ) -> list[Record]:
        def matches(row: dict) -> bool:
            if is_active is not None and row["is_active"] != is_active:
                return False
            return not specialty or row["specialty"] == specialty

        return await self.table.select(matches, key=lambda row: row["created_at"], reverse=True)

    async def update(self, doctor_id: UUID, values: Record) -> Record | None:
        return await self.table.update(doctor_id, values)

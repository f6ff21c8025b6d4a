"""User record stores."""

from abc import ABC, abstractmethod
from uuid import UUID

from app.models.users import users
from app.repositories.base import InMemoryTable, Record, SQLRepository

DUPLICATE_EMAIL = "Email already exists"


class UserRepository(ABC):
    """Persistence interface for user accounts."""

    @abstractmethod
    async def create(self, values: Record) -> Record: ...

    @abstractmethod
    async def get(self, user_id: UUID) -> Record | None: ...

    @abstractmethod
    async def get_by_email(self, email: str) -> Record | None: ...

    @abstractmethod
    async def update(self, user_id: UUID, values: Record) -> Record | None: ...


class SQLUserRepository(SQLRepository, UserRepository):
    """PostgreSQL user store."""

    table = users
    duplicate_message = DUPLICATE_EMAIL

    async def create(self, values: Record) -> Record:
        return await self._insert(values)

    async def get(self, user_id: UUID) -> Record | None:
        return await self._get(user_id)

    async def get_by_email(self, email: str) -> Record | None:
        return await self._first(users.c.email == email)

    async def update(self, user_id: UUID, values: Record) -> Record | None:
        return await self._update(user_id, values)


class InMemoryUserRepository(UserRepository):
    """In-process user store."""

    def __init__(self) -> None:
        self.table = InMemoryTable(
            defaults={"role": "patient", "is_active": True},
            unique=("email",),
            duplicate_message=DUPLICATE_EMAIL,
        )

    async def create(self, values: Record) -> Record:
        return await self.table.insert(values)

    async def get(self, user_id: UUID) -> Record | None:
        return await self.table.get(user_id)

    async def get_by_email(self, email: str) -> Record | None:
        return await self.table.first(lambda row: row["email"] == email)

    async def update(self, user_id: UUID, values: Record) -> Record | None:
        return await self.table.update(user_id, values)

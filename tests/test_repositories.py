"""Tests for the PostgreSQL appointment store against a mocked session."""

from datetime import UTC, datetime, timedelta
from unittest.mock import AsyncMock, MagicMock
from uuid import uuid4

import pytest
from sqlalchemy.exc import IntegrityError

from app.core.exceptions import ConflictException, SchedulingConflict
from app.core.locks import KeyedLock
from app.repositories import SQLAppointmentRepository
from app.schemas.appointments import AppointmentCreate, AppointmentFilters, AppointmentStatus
from app.services.appointment_service import AppointmentService

NINE = datetime(2026, 3, 2, 9, 0, tzinfo=UTC)
HALF_NINE = NINE + timedelta(minutes=30)


def result_with(row):
    """Execute result whose ``mappings().first()`` returns ``row``."""
    result = MagicMock()
    result.mappings.return_value.first.return_value = row
    result.mappings.return_value.all.return_value = [row] if row else []
    return result


def integrity_error(message: str) -> IntegrityError:
    return IntegrityError("INSERT INTO appointments ...", {}, Exception(message))


@pytest.fixture
def mock_db() -> MagicMock:
    db = MagicMock()
    db.execute = AsyncMock(return_value=result_with(None))
    db.commit = AsyncMock()
    db.rollback = AsyncMock()
    return db


@pytest.fixture
def repository(mock_db: MagicMock) -> SQLAppointmentRepository:
    return SQLAppointmentRepository(mock_db)


def executed_sql(mock_db: MagicMock, index: int) -> str:
    return str(mock_db.execute.call_args_list[index].args[0])


@pytest.mark.asyncio
async def test_exclusion_violation_becomes_scheduling_conflict(
    repository: SQLAppointmentRepository,
    mock_db: MagicMock,
):
    mock_db.execute.side_effect = integrity_error(
        'conflicting key value violates exclusion constraint "appointments_no_overlap"'
    )

    with pytest.raises(SchedulingConflict):
        await repository.create({"doctor_id": uuid4(), "start_time": NINE, "end_time": HALF_NINE})

    mock_db.rollback.assert_awaited_once()
    mock_db.commit.assert_not_awaited()


@pytest.mark.asyncio
async def test_unique_violation_becomes_conflict(
    repository: SQLAppointmentRepository,
    mock_db: MagicMock,
):
    mock_db.execute.side_effect = integrity_error(
        'duplicate key value violates unique constraint "appointments_pkey"'
    )

    with pytest.raises(ConflictException) as exc_info:
        await repository.update(uuid4(), {"notes": "Moved"})
    assert not isinstance(exc_info.value, SchedulingConflict)
    assert exc_info.value.status_code == 409
    mock_db.rollback.assert_awaited_once()


@pytest.mark.asyncio
async def test_other_integrity_errors_propagate(
    repository: SQLAppointmentRepository,
    mock_db: MagicMock,
):
    mock_db.execute.side_effect = integrity_error(
        'new row violates check constraint "appointments_interval_check"'
    )

    with pytest.raises(IntegrityError):
        await repository.create({"doctor_id": uuid4(), "start_time": HALF_NINE, "end_time": NINE})


@pytest.mark.asyncio
async def test_find_overlapping_conditions(
    repository: SQLAppointmentRepository,
    mock_db: MagicMock,
):
    assert await repository.find_overlapping(uuid4(), NINE, HALF_NINE, exclude_id=uuid4()) is None

    sql = executed_sql(mock_db, 0)
    assert "appointments.doctor_id = :doctor_id_1" in sql
    assert "appointments.start_time < :start_time_1" in sql
    assert "appointments.end_time > :end_time_1" in sql
    assert "appointments.status != :status_1" in sql
    assert "appointments.id != :id_1" in sql


@pytest.mark.asyncio
async def test_find_all_conditions_and_order(
    repository: SQLAppointmentRepository,
    mock_db: MagicMock,
):
    filters = AppointmentFilters(
        doctor_id=uuid4(),
        status=AppointmentStatus.SCHEDULED,
        from_time=NINE,
        to_time=HALF_NINE,
    )
    assert await repository.find_all(filters) == []

    sql = executed_sql(mock_db, 0)
    assert "appointments.doctor_id = :doctor_id_1" in sql
    assert "appointments.status = :status_1" in sql
    assert "appointments.start_time >= :start_time_1" in sql
    assert "appointments.start_time <= :start_time_2" in sql
    assert "appointments.patient_id" not in sql.split("WHERE", 1)[1]
    assert sql.endswith("ORDER BY appointments.start_time ASC")


@pytest.mark.asyncio
async def test_unfiltered_find_all_has_no_where(
    repository: SQLAppointmentRepository,
    mock_db: MagicMock,
):
    await repository.find_all(AppointmentFilters())
    assert "WHERE" not in executed_sql(mock_db, 0)


@pytest.mark.asyncio
async def test_create_takes_advisory_lock_before_overlap_check(mock_db: MagicMock):
    doctor_id = uuid4()
    stored = {
        "id": uuid4(),
        "patient_id": uuid4(),
        "doctor_id": doctor_id,
        "start_time": NINE,
        "end_time": HALF_NINE,
        "reason": None,
        "notes": None,
        "status": AppointmentStatus.SCHEDULED.value,
    }
    mock_db.execute.side_effect = [result_with(None), result_with(None), result_with(stored)]

    service = AppointmentService(
        SQLAppointmentRepository(mock_db), locks=KeyedLock(), strict_status=False
    )
    appointment = await service.create_appointment(
        AppointmentCreate(
            patient_id=stored["patient_id"],
            doctor_id=doctor_id,
            start_time=NINE,
            end_time=HALF_NINE,
        )
    )

    assert appointment == stored
    assert mock_db.execute.await_count == 3
    assert "pg_advisory_xact_lock(hashtext(" in executed_sql(mock_db, 0)
    assert mock_db.execute.call_args_list[1].args[0].is_select
    assert "appointments.end_time > :end_time_1" in executed_sql(mock_db, 1)
    assert mock_db.execute.call_args_list[2].args[0].is_insert
    mock_db.commit.assert_awaited_once()


@pytest.mark.asyncio
async def test_create_stops_at_existing_overlap(mock_db: MagicMock):
    existing = {"id": uuid4()}
    mock_db.execute.side_effect = [result_with(None), result_with(existing)]

    service = AppointmentService(
        SQLAppointmentRepository(mock_db), locks=KeyedLock(), strict_status=False
    )
    with pytest.raises(SchedulingConflict):
        await service.create_appointment(
            AppointmentCreate(
                patient_id=uuid4(),
                doctor_id=uuid4(),
                start_time=NINE,
                end_time=HALF_NINE,
            )
        )

    assert mock_db.execute.await_count == 2
    mock_db.commit.assert_not_awaited()

"""Tests for appointment endpoints."""

import asyncio

import pytest
from httpx import AsyncClient

from app.repositories import InMemoryStores


async def book(client: AsyncClient, headers: dict, data: dict, **changes) -> dict:
    response = await client.post("/api/appointments", json={**data, **changes}, headers=headers)
    return {"status_code": response.status_code, "body": response.json()}


@pytest.mark.asyncio
async def test_health_check(client: AsyncClient) -> None:
    """Test health check endpoint."""
    response = await client.get("/api/health")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "healthy"
    assert "version" in data


@pytest.mark.asyncio
async def test_create_appointment(
    client: AsyncClient,
    auth_headers: dict,
    sample_appointment_data: dict,
) -> None:
    """A free slot is booked with status scheduled."""
    response = await client.post(
        "/api/appointments",
        json=sample_appointment_data,
        headers=auth_headers,
    )
    assert response.status_code == 201
    data = response.json()
    assert data["message"] == "Appointment created successfully"

    appointment = data["appointment"]
    assert appointment["status"] == "scheduled"
    assert appointment["doctorId"] == sample_appointment_data["doctorId"]
    assert appointment["patientId"] == sample_appointment_data["patientId"]
    assert appointment["reason"] == "Regular checkup"
    assert appointment["startTime"].startswith("2026-03-02T09:00:00")
    assert "id" in appointment
    assert "createdAt" in appointment


@pytest.mark.asyncio
async def test_create_ignores_client_status(
    client: AsyncClient,
    auth_headers: dict,
    sample_appointment_data: dict,
) -> None:
    result = await book(client, auth_headers, sample_appointment_data, status="completed")
    assert result["status_code"] == 201
    assert result["body"]["appointment"]["status"] == "scheduled"


@pytest.mark.asyncio
async def test_overlapping_appointment_rejected(
    client: AsyncClient,
    auth_headers: dict,
    sample_appointment_data: dict,
    stores: InMemoryStores,
) -> None:
    """D1 09:15-09:45 conflicts with an active 09:00-09:30 booking."""
    await book(client, auth_headers, sample_appointment_data)

    result = await book(
        client,
        auth_headers,
        sample_appointment_data,
        startTime="2026-03-02T09:15:00Z",
        endTime="2026-03-02T09:45:00Z",
    )
    assert result["status_code"] == 409
    assert result["body"]["error"] == "SchedulingConflict"
    assert result["body"]["message"] == "Appointment has time conflict"
    assert len(stores.appointments.table) == 1


@pytest.mark.asyncio
async def test_overlap_detected_across_timezone_offsets(
    client: AsyncClient,
    auth_headers: dict,
    sample_appointment_data: dict,
) -> None:
    """Instants are compared, not wall-clock strings."""
    await book(client, auth_headers, sample_appointment_data)

    result = await book(
        client,
        auth_headers,
        sample_appointment_data,
        startTime="2026-03-02T11:15:00+02:00",
        endTime="2026-03-02T11:45:00+02:00",
    )
    assert result["status_code"] == 409


@pytest.mark.asyncio
async def test_other_doctor_not_blocked(
    client: AsyncClient,
    auth_headers: dict,
    sample_appointment_data: dict,
) -> None:
    await book(client, auth_headers, sample_appointment_data)

    result = await book(
        client,
        auth_headers,
        sample_appointment_data,
        doctorId="0d6f9a10-7e3b-4c1d-9b2a-5f4e3d2c1b03",
    )
    assert result["status_code"] == 201


@pytest.mark.asyncio
async def test_slot_reusable_after_cancel(
    client: AsyncClient,
    auth_headers: dict,
    sample_appointment_data: dict,
) -> None:
    """Cancelling the first booking frees its time for the same doctor."""
    first = await book(client, auth_headers, sample_appointment_data)
    appointment_id = first["body"]["appointment"]["id"]

    response = await client.post(
        f"/api/appointments/{appointment_id}/cancel",
        headers=auth_headers,
    )
    assert response.status_code == 200
    assert response.json()["appointment"]["status"] == "cancelled"

    result = await book(
        client,
        auth_headers,
        sample_appointment_data,
        startTime="2026-03-02T09:15:00Z",
        endTime="2026-03-02T09:45:00Z",
    )
    assert result["status_code"] == 201


@pytest.mark.asyncio
async def test_back_to_back_appointments_allowed(
    client: AsyncClient,
    auth_headers: dict,
    sample_appointment_data: dict,
) -> None:
    await book(client, auth_headers, sample_appointment_data)

    result = await book(
        client,
        auth_headers,
        sample_appointment_data,
        startTime="2026-03-02T09:30:00Z",
        endTime="2026-03-02T10:00:00Z",
    )
    assert result["status_code"] == 201


@pytest.mark.asyncio
@pytest.mark.parametrize(
    ("start", "end"),
    [
        ("2026-03-02T10:00:00Z", "2026-03-02T09:00:00Z"),
        ("2026-03-02T10:00:00Z", "2026-03-02T10:00:00Z"),
    ],
)
async def test_invalid_interval_rejected(
    client: AsyncClient,
    auth_headers: dict,
    sample_appointment_data: dict,
    stores: InMemoryStores,
    start: str,
    end: str,
) -> None:
    result = await book(client, auth_headers, sample_appointment_data, startTime=start, endTime=end)
    assert result["status_code"] == 400
    assert result["body"]["error"] == "InvalidInterval"
    assert len(stores.appointments.table) == 0


@pytest.mark.asyncio
async def test_unparseable_time_rejected(
    client: AsyncClient,
    auth_headers: dict,
    sample_appointment_data: dict,
) -> None:
    result = await book(client, auth_headers, sample_appointment_data, startTime="next tuesday")
    assert result["status_code"] == 400
    assert result["body"]["error"] == "ValidationError"
    assert result["body"]["details"]


@pytest.mark.asyncio
async def test_reason_too_long_rejected(
    client: AsyncClient,
    auth_headers: dict,
    sample_appointment_data: dict,
) -> None:
    result = await book(client, auth_headers, sample_appointment_data, reason="x" * 251)
    assert result["status_code"] == 400


@pytest.mark.asyncio
async def test_concurrent_overlapping_creates(
    client: AsyncClient,
    auth_headers: dict,
    sample_appointment_data: dict,
    stores: InMemoryStores,
) -> None:
    """Only one of several simultaneous bookings for the same slot succeeds."""
    results = await asyncio.gather(
        *[
            book(
                client,
                auth_headers,
                sample_appointment_data,
                startTime=f"2026-03-02T09:{minute:02d}:00Z",
                endTime=f"2026-03-02T09:{minute + 30:02d}:00Z",
            )
            for minute in (0, 5, 10, 15, 25)
        ]
    )

    status_codes = sorted(result["status_code"] for result in results)
    assert status_codes.count(201) == 1
    assert status_codes.count(409) == 4
    assert len(stores.appointments.table) == 1


@pytest.mark.asyncio
async def test_list_appointments_by_doctor(
    client: AsyncClient,
    auth_headers: dict,
    sample_appointment_data: dict,
    doctor_id: str,
) -> None:
    """Only the doctor's appointments are returned, earliest first."""
    await book(
        client,
        auth_headers,
        sample_appointment_data,
        startTime="2026-03-02T11:00:00Z",
        endTime="2026-03-02T11:30:00Z",
    )
    await book(client, auth_headers, sample_appointment_data)
    await book(
        client,
        auth_headers,
        sample_appointment_data,
        doctorId="0d6f9a10-7e3b-4c1d-9b2a-5f4e3d2c1b03",
    )

    response = await client.get(
        "/api/appointments",
        params={"doctorId": doctor_id},
        headers=auth_headers,
    )
    assert response.status_code == 200
    data = response.json()
    assert data["count"] == 2
    assert [a["doctorId"] for a in data["appointments"]] == [doctor_id, doctor_id]
    starts = [a["startTime"] for a in data["appointments"]]
    assert starts[0].startswith("2026-03-02T09:00")
    assert starts[1].startswith("2026-03-02T11:00")


@pytest.mark.asyncio
async def test_list_appointments_filters(
    client: AsyncClient,
    auth_headers: dict,
    sample_appointment_data: dict,
) -> None:
    first = await book(client, auth_headers, sample_appointment_data)
    await book(
        client,
        auth_headers,
        sample_appointment_data,
        startTime="2026-03-03T09:00:00Z",
        endTime="2026-03-03T09:30:00Z",
    )
    await client.post(
        f"/api/appointments/{first['body']['appointment']['id']}/complete",
        headers=auth_headers,
    )

    response = await client.get(
        "/api/appointments",
        params={"status": "scheduled"},
        headers=auth_headers,
    )
    assert response.json()["count"] == 1

    response = await client.get(
        "/api/appointments",
        params={"from": "2026-03-03T00:00:00Z"},
        headers=auth_headers,
    )
    assert response.json()["count"] == 1

    # ``to`` bounds the start time inclusively
    response = await client.get(
        "/api/appointments",
        params={"to": "2026-03-02T09:00:00Z"},
        headers=auth_headers,
    )
    assert response.json()["count"] == 1

    response = await client.get(
        "/api/appointments",
        params={"patientId": "0d6f9a10-7e3b-4c1d-9b2a-5f4e3d2c1b03"},
        headers=auth_headers,
    )
    assert response.json() == {"count": 0, "appointments": []}


@pytest.mark.asyncio
async def test_list_appointments_invalid_status(client: AsyncClient, auth_headers: dict) -> None:
    response = await client.get(
        "/api/appointments",
        params={"status": "no_show"},
        headers=auth_headers,
    )
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_get_appointment(
    client: AsyncClient,
    auth_headers: dict,
    sample_appointment_data: dict,
) -> None:
    """Test getting a specific appointment."""
    created = await book(client, auth_headers, sample_appointment_data)
    appointment_id = created["body"]["appointment"]["id"]

    response = await client.get(f"/api/appointments/{appointment_id}", headers=auth_headers)
    assert response.status_code == 200
    assert response.json()["appointment"]["id"] == appointment_id


@pytest.mark.asyncio
@pytest.mark.parametrize(
    ("method", "suffix"),
    [("get", ""), ("patch", ""), ("post", "/cancel"), ("post", "/complete")],
)
async def test_unknown_appointment_not_found(
    client: AsyncClient,
    auth_headers: dict,
    method: str,
    suffix: str,
) -> None:
    url = f"/api/appointments/9f1c2d3e-4b5a-4c6d-8e7f-0a1b2c3d4e5f{suffix}"
    kwargs = {"json": {"reason": "x"}} if method == "patch" else {}
    response = await client.request(method.upper(), url, headers=auth_headers, **kwargs)
    assert response.status_code == 404
    assert response.json()["error"] == "NotFoundException"


@pytest.mark.asyncio
async def test_cancel_is_idempotent(
    client: AsyncClient,
    auth_headers: dict,
    sample_appointment_data: dict,
) -> None:
    created = await book(client, auth_headers, sample_appointment_data)
    appointment_id = created["body"]["appointment"]["id"]

    first = await client.post(f"/api/appointments/{appointment_id}/cancel", headers=auth_headers)
    second = await client.post(f"/api/appointments/{appointment_id}/cancel", headers=auth_headers)

    assert first.status_code == second.status_code == 200
    assert second.json()["appointment"]["status"] == "cancelled"
    assert second.json()["appointment"]["updatedAt"] == first.json()["appointment"]["updatedAt"]


@pytest.mark.asyncio
async def test_update_notes_and_clear_reason(
    client: AsyncClient,
    auth_headers: dict,
    sample_appointment_data: dict,
) -> None:
    created = await book(client, auth_headers, sample_appointment_data)
    appointment_id = created["body"]["appointment"]["id"]

    response = await client.patch(
        f"/api/appointments/{appointment_id}",
        json={"notes": "  Bring previous lab results  ", "reason": None},
        headers=auth_headers,
    )
    assert response.status_code == 200
    appointment = response.json()["appointment"]
    assert appointment["notes"] == "Bring previous lab results"
    assert appointment["reason"] is None
    assert appointment["startTime"] == created["body"]["appointment"]["startTime"]


@pytest.mark.asyncio
async def test_update_empty_patch_rejected(
    client: AsyncClient,
    auth_headers: dict,
    sample_appointment_data: dict,
) -> None:
    created = await book(client, auth_headers, sample_appointment_data)
    appointment_id = created["body"]["appointment"]["id"]

    response = await client.patch(
        f"/api/appointments/{appointment_id}", json={}, headers=auth_headers
    )
    assert response.status_code == 400
    assert response.json()["error"] == "NoUpdatableFields"


@pytest.mark.asyncio
async def test_update_null_status_rejected(
    client: AsyncClient,
    auth_headers: dict,
    sample_appointment_data: dict,
) -> None:
    created = await book(client, auth_headers, sample_appointment_data)
    appointment_id = created["body"]["appointment"]["id"]

    response = await client.patch(
        f"/api/appointments/{appointment_id}", json={"status": None}, headers=auth_headers
    )
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_update_moving_into_overlap_rejected(
    client: AsyncClient,
    auth_headers: dict,
    sample_appointment_data: dict,
) -> None:
    """Moving only the end time into the next booking is a conflict."""
    first = await book(client, auth_headers, sample_appointment_data)
    await book(
        client,
        auth_headers,
        sample_appointment_data,
        startTime="2026-03-02T09:30:00Z",
        endTime="2026-03-02T10:00:00Z",
    )

    response = await client.patch(
        f"/api/appointments/{first['body']['appointment']['id']}",
        json={"endTime": "2026-03-02T09:45:00Z"},
        headers=auth_headers,
    )
    assert response.status_code == 409
    assert response.json()["error"] == "SchedulingConflict"


@pytest.mark.asyncio
async def test_update_does_not_conflict_with_itself(
    client: AsyncClient,
    auth_headers: dict,
    sample_appointment_data: dict,
) -> None:
    created = await book(client, auth_headers, sample_appointment_data)

    response = await client.patch(
        f"/api/appointments/{created['body']['appointment']['id']}",
        json={"endTime": "2026-03-02T09:45:00Z"},
        headers=auth_headers,
    )
    assert response.status_code == 200
    assert response.json()["appointment"]["endTime"].startswith("2026-03-02T09:45:00")


@pytest.mark.asyncio
async def test_update_inverting_interval_rejected(
    client: AsyncClient,
    auth_headers: dict,
    sample_appointment_data: dict,
) -> None:
    """A start time after the stored end time is rejected."""
    created = await book(client, auth_headers, sample_appointment_data)

    response = await client.patch(
        f"/api/appointments/{created['body']['appointment']['id']}",
        json={"startTime": "2026-03-02T10:00:00Z"},
        headers=auth_headers,
    )
    assert response.status_code == 400
    assert response.json()["error"] == "InvalidInterval"


@pytest.mark.asyncio
async def test_reopening_into_taken_slot_rejected(
    client: AsyncClient,
    auth_headers: dict,
    sample_appointment_data: dict,
) -> None:
    """A cancelled appointment cannot be reopened once its slot is rebooked."""
    first = await book(client, auth_headers, sample_appointment_data)
    first_id = first["body"]["appointment"]["id"]
    await client.post(f"/api/appointments/{first_id}/cancel", headers=auth_headers)
    await book(client, auth_headers, sample_appointment_data)

    response = await client.patch(
        f"/api/appointments/{first_id}",
        json={"status": "scheduled"},
        headers=auth_headers,
    )
    assert response.status_code == 409
    assert response.json()["error"] == "SchedulingConflict"


@pytest.mark.asyncio
async def test_complete_then_reschedule_allowed_by_default(
    client: AsyncClient,
    auth_headers: dict,
    sample_appointment_data: dict,
) -> None:
    created = await book(client, auth_headers, sample_appointment_data)
    appointment_id = created["body"]["appointment"]["id"]

    response = await client.post(
        f"/api/appointments/{appointment_id}/complete", headers=auth_headers
    )
    assert response.json()["appointment"]["status"] == "completed"

    response = await client.patch(
        f"/api/appointments/{appointment_id}",
        json={"status": "scheduled"},
        headers=auth_headers,
    )
    assert response.status_code == 200
    assert response.json()["appointment"]["status"] == "scheduled"


@pytest.mark.asyncio
async def test_appointments_require_authentication(
    client: AsyncClient,
    sample_appointment_data: dict,
) -> None:
    response = await client.post("/api/appointments", json=sample_appointment_data)
    assert response.status_code == 401

    response = await client.get("/api/appointments")
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_expired_token_rejected(client: AsyncClient, expired_headers: dict) -> None:
    response = await client.get("/api/appointments", headers=expired_headers)
    assert response.status_code == 401

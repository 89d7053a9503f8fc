"""Tests for reservation creation and its conflict handling."""

import datetime as dt

import pytest
from fastapi import status
from fastapi.testclient import TestClient
from sqlmodel import select

from catalog import ResourceCatalog
from errors import ConflictError, StorageError, ValidationError
from models import Reservation
from reservations import SLOT_TAKEN_MESSAGE, UNKNOWN_RESOURCE_MESSAGE, ReservationManager


def reservation_body(resource_id: int, **overrides) -> dict:
    body = {
        "professor": "Smith",
        "class_group": "10B",
        "reservation_date": "2024-05-01",
        "reservation_time_slot": "09:00",
        "resource_id": resource_id,
    }
    body.update(overrides)
    return body


class TestCreateReservation:
    def test_create_returns_reservation(self, client: TestClient, projector: dict):
        response = client.post("/agendamentos", json=reservation_body(projector["id"]))
        assert response.status_code == status.HTTP_201_CREATED
        data = response.json()
        assert isinstance(data["id"], int)
        assert data["professor"] == "Smith"
        assert data["class_group"] == "10B"
        assert data["reservation_date"] == "2024-05-01"
        assert data["reservation_time_slot"] == "09:00"
        assert data["resource_id"] == projector["id"]
        assert data["created_at"]

    def test_created_at_is_not_client_supplied(self, client: TestClient, projector: dict):
        body = reservation_body(projector["id"], created_at="1999-01-01T00:00:00")
        response = client.post("/agendamentos", json=body)
        assert response.status_code == status.HTTP_201_CREATED
        assert not response.json()["created_at"].startswith("1999")

    def test_same_slot_is_conflict(self, client: TestClient, projector: dict):
        client.post("/agendamentos", json=reservation_body(projector["id"]))

        response = client.post(
            "/agendamentos",
            json=reservation_body(projector["id"], professor="Jones", class_group="11A"),
        )
        assert response.status_code == status.HTTP_409_CONFLICT
        assert response.json() == {"error": SLOT_TAKEN_MESSAGE}

    def test_other_slot_or_date_is_free(self, client: TestClient, projector: dict):
        client.post("/agendamentos", json=reservation_body(projector["id"]))

        other_slot = client.post(
            "/agendamentos", json=reservation_body(projector["id"], reservation_time_slot="10:00")
        )
        other_date = client.post(
            "/agendamentos", json=reservation_body(projector["id"], reservation_date="2024-05-02")
        )
        assert other_slot.status_code == status.HTTP_201_CREATED
        assert other_date.status_code == status.HTTP_201_CREATED

    def test_same_slot_on_other_resource_is_free(self, client: TestClient, projector: dict):
        room = client.post("/recursos", json={"name": "Room 7", "description": "x"}).json()
        client.post("/agendamentos", json=reservation_body(projector["id"]))

        response = client.post("/agendamentos", json=reservation_body(room["id"]))
        assert response.status_code == status.HTTP_201_CREATED

    def test_overlapping_slot_tokens_are_not_compared(self, client: TestClient, projector: dict):
        first = client.post(
            "/agendamentos",
            json=reservation_body(projector["id"], reservation_time_slot="09:00-10:00"),
        )
        second = client.post(
            "/agendamentos",
            json=reservation_body(projector["id"], reservation_time_slot="09:30-10:30"),
        )
        assert first.status_code == status.HTTP_201_CREATED
        assert second.status_code == status.HTTP_201_CREATED

    def test_unknown_resource_is_conflict(self, client: TestClient):
        response = client.post("/agendamentos", json=reservation_body(999))
        assert response.status_code == status.HTTP_409_CONFLICT
        assert response.json() == {"error": UNKNOWN_RESOURCE_MESSAGE}

    def test_zero_resource_id_reaches_store(self, client: TestClient):
        # 0 is a present value; it fails as a dangling reference, not as missing input
        response = client.post("/agendamentos", json=reservation_body(0))
        assert response.status_code == status.HTTP_409_CONFLICT
        assert response.json() == {"error": UNKNOWN_RESOURCE_MESSAGE}

    @pytest.mark.parametrize(
        "missing", ["professor", "class_group", "reservation_date", "reservation_time_slot", "resource_id"]
    )
    def test_missing_field_rejected(self, client: TestClient, projector: dict, missing: str):
        body = reservation_body(projector["id"])
        del body[missing]

        response = client.post("/agendamentos", json=body)
        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json() == {"error": "All fields are required."}

        # nothing was persisted: the full reservation still fits in that slot
        response = client.post("/agendamentos", json=reservation_body(projector["id"]))
        assert response.status_code == status.HTTP_201_CREATED

    def test_empty_professor_rejected(self, client: TestClient, projector: dict):
        response = client.post("/agendamentos", json=reservation_body(projector["id"], professor=""))
        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_unparseable_date_rejected(self, client: TestClient, projector: dict):
        response = client.post(
            "/agendamentos", json=reservation_body(projector["id"], reservation_date="tomorrow")
        )
        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert "error" in response.json()


class TestBookingScenario:
    def test_front_end_scenario(self, client: TestClient):
        response = client.post(
            "/recursos", json={"name": "Projector A", "description": "Ceiling-mounted projector"}
        )
        assert response.status_code == 201
        assert response.json()["id"] == 1

        booking = {
            "professor": "Smith",
            "turma": "10B",
            "reservation_date": "2024-05-01",
            "horario": "09:00",
            "id_recurso": 1,
        }
        assert client.post("/agendamentos", json=booking).status_code == 201
        assert client.post("/agendamentos", json=booking).status_code == 409
        assert client.post("/agendamentos", json={**booking, "id_recurso": 999}).status_code == 409
        assert client.delete("/recursos/1").status_code == 409


class TestReservationManager:
    @pytest.mark.asyncio
    async def test_created_at_is_stamped(self, catalog: ResourceCatalog, reservations: ReservationManager):
        resource = await catalog.create("Room 1", "Ground floor")
        before = dt.datetime.now(dt.timezone.utc).replace(tzinfo=None)

        reservation = await reservations.create(
            "Smith", "10B", dt.date(2024, 5, 1), "09:00", resource.id
        )
        assert reservation.id is not None
        assert reservation.created_at.replace(tzinfo=None) >= before.replace(microsecond=0)

    @pytest.mark.asyncio
    async def test_explicit_created_at_is_stored(self, catalog: ResourceCatalog, reservations: ReservationManager):
        resource = await catalog.create("Room 1", "Ground floor")
        stamp = dt.datetime(2024, 4, 30, 12, 0, tzinfo=dt.timezone.utc)

        reservation = await reservations.create(
            "Smith", "10B", dt.date(2024, 5, 1), "09:00", resource.id, created_at=stamp
        )
        assert reservation.created_at.replace(tzinfo=None) == stamp.replace(tzinfo=None)

    @pytest.mark.asyncio
    async def test_duplicate_triple_conflicts(self, catalog: ResourceCatalog, reservations: ReservationManager):
        resource = await catalog.create("Room 1", "Ground floor")
        await reservations.create("Smith", "10B", dt.date(2024, 5, 1), "09:00", resource.id)

        with pytest.raises(ConflictError) as exc_info:
            await reservations.create("Jones", "9A", dt.date(2024, 5, 1), "09:00", resource.id)
        assert exc_info.value.message == SLOT_TAKEN_MESSAGE

    @pytest.mark.asyncio
    async def test_dangling_resource_conflicts(self, reservations: ReservationManager):
        with pytest.raises(ConflictError) as exc_info:
            await reservations.create("Smith", "10B", dt.date(2024, 5, 1), "09:00", 999)
        assert exc_info.value.message == UNKNOWN_RESOURCE_MESSAGE

    @pytest.mark.asyncio
    async def test_zero_resource_id_is_conflict(self, reservations: ReservationManager):
        with pytest.raises(ConflictError) as exc_info:
            await reservations.create("Smith", "10B", dt.date(2024, 5, 1), "09:00", 0)
        assert exc_info.value.message == UNKNOWN_RESOURCE_MESSAGE

    @pytest.mark.asyncio
    async def test_validation_persists_nothing(self, store, catalog: ResourceCatalog, reservations: ReservationManager):
        resource = await catalog.create("Room 1", "Ground floor")

        with pytest.raises(ValidationError):
            await reservations.create("Smith", "  ", dt.date(2024, 5, 1), "09:00", resource.id)
        assert await store.fetch_all(select(Reservation)) == []

    @pytest.mark.asyncio
    async def test_store_failure_is_storage_error(self, store_without_tables):
        reservations = ReservationManager(store_without_tables)
        with pytest.raises(StorageError):
            await reservations.create("Smith", "10B", dt.date(2024, 5, 1), "09:00", 1)

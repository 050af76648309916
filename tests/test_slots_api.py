"""Slot endpoint tests."""

from httpx import AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from clinic_booking.models.booking import BookingStatus
from clinic_booking.models.slot import Slot
from clinic_booking.models.user import User
from tests.factories import make_booking, make_slot, utc


class TestListSlots:
    """GET /slots and /slots/all."""

    async def test_requires_token(self, client: AsyncClient) -> None:
        response = await client.get("/api/v1/slots", params={"from": "2025-08-25", "to": "2025-08-26"})

        assert response.status_code == 401
        assert response.json() == {
            "error": {"code": "TOKEN_MISSING", "message": "Access token is required"}
        }

    async def test_rejects_garbage_token(self, client: AsyncClient) -> None:
        response = await client.get(
            "/api/v1/slots",
            params={"from": "2025-08-25", "to": "2025-08-26"},
            headers={"Authorization": "Bearer not.a.jwt"},
        )

        assert response.status_code == 401
        assert response.json()["error"]["code"] == "INVALID_TOKEN"

    async def test_lists_free_slots_grouped_by_date(
        self,
        client: AsyncClient,
        async_session: AsyncSession,
        patient_headers: dict,
    ) -> None:
        slot = await make_slot(async_session, utc(2025, 8, 25, 9, 0))
        await make_slot(async_session, utc(2025, 8, 25, 9, 30), is_booked=True)

        response = await client.get(
            "/api/v1/slots",
            params={"from": "2025-08-25", "to": "2025-08-26"},
            headers=patient_headers,
        )

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["totalSlots"] == 1
        assert list(data["slots"]) == ["2025-08-25"]
        listed = data["slots"]["2025-08-25"][0]
        assert listed["id"] == slot.id
        assert listed["startAt"] == "2025-08-25T09:00:00Z"
        assert listed["endAt"] == "2025-08-25T09:30:00Z"
        assert listed["durationMinutes"] == 30
        assert listed["isBooked"] is False
        assert data["dateRange"] == {
            "from": "2025-08-25T00:00:00Z",
            "to": "2025-08-26T23:59:59Z",
        }

    async def test_include_booked(
        self,
        client: AsyncClient,
        async_session: AsyncSession,
        patient_headers: dict,
    ) -> None:
        await make_slot(async_session, utc(2025, 8, 25, 9, 0))
        await make_slot(async_session, utc(2025, 8, 25, 9, 30), is_booked=True)

        response = await client.get(
            "/api/v1/slots",
            params={"from": "2025-08-25", "to": "2025-08-25", "includeBooked": "true"},
            headers=patient_headers,
        )

        assert response.json()["data"]["totalSlots"] == 2

    async def test_listing_errors(self, client: AsyncClient, patient_headers: dict) -> None:
        cases = [
            ({"to": "2025-08-25"}, "MISSING_DATES"),
            ({"from": "yesterday", "to": "2025-08-25"}, "INVALID_DATE_FORMAT"),
            ({"from": "2025-08-19", "to": "2025-08-21"}, "PAST_DATE"),
            ({"from": "2025-08-21", "to": "2025-08-28"}, "DATE_RANGE_TOO_LARGE"),
        ]
        for params, code in cases:
            response = await client.get("/api/v1/slots", params=params, headers=patient_headers)

            assert response.status_code == 400, code
            assert response.json()["error"]["code"] == code

    async def test_admin_listing(
        self,
        client: AsyncClient,
        async_session: AsyncSession,
        admin_headers: dict,
    ) -> None:
        await make_slot(async_session, utc(2025, 8, 1, 9, 0), is_booked=True)
        await make_slot(async_session, utc(2025, 9, 15, 9, 0))

        response = await client.get(
            "/api/v1/slots/all",
            params={"from": "2025-08-01", "to": "2025-09-30"},
            headers=admin_headers,
        )

        assert response.status_code == 200
        assert response.json()["data"]["totalSlots"] == 2

    async def test_admin_listing_forbidden_for_patient(
        self,
        client: AsyncClient,
        patient_headers: dict,
    ) -> None:
        response = await client.get(
            "/api/v1/slots/all",
            params={"from": "2025-08-25", "to": "2025-08-26"},
            headers=patient_headers,
        )

        assert response.status_code == 403
        assert response.json()["error"]["code"] == "INSUFFICIENT_PERMISSIONS"


class TestGenerateSlots:
    """POST /slots/generate."""

    async def test_generates_weekdays_from_tomorrow(
        self,
        client: AsyncClient,
        admin_headers: dict,
    ) -> None:
        # Clock is Wednesday 2025-08-20; seven days from Thursday hold five weekdays
        response = await client.post(
            "/api/v1/slots/generate", json={"days": 7}, headers=admin_headers
        )

        assert response.status_code == 200
        body = response.json()
        assert body["message"] == "Slots generated successfully"
        assert body["data"]["slotsGenerated"] == 5 * 16
        assert body["data"]["dateRange"] == {
            "from": "2025-08-21T00:00:00Z",
            "to": "2025-08-27T00:00:00Z",
        }

    async def test_generation_is_idempotent(self, client: AsyncClient, admin_headers: dict) -> None:
        first = await client.post("/api/v1/slots/generate", json={"days": 3}, headers=admin_headers)
        second = await client.post("/api/v1/slots/generate", json={"days": 3}, headers=admin_headers)

        # Thursday and Friday only
        assert first.json()["data"]["slotsGenerated"] == 32
        assert second.json()["data"]["slotsGenerated"] == 0

    async def test_default_days(self, client: AsyncClient, admin_headers: dict) -> None:
        response = await client.post("/api/v1/slots/generate", headers=admin_headers)

        assert response.status_code == 200
        assert response.json()["data"]["slotsGenerated"] == 5 * 16

    async def test_days_out_of_range(self, client: AsyncClient, admin_headers: dict) -> None:
        for days in (0, 31):
            response = await client.post(
                "/api/v1/slots/generate", json={"days": days}, headers=admin_headers
            )

            assert response.status_code == 400
            assert response.json()["error"] == {
                "code": "INVALID_DAYS",
                "message": "Days must be between 1 and 30",
            }

    async def test_patient_cannot_generate(self, client: AsyncClient, patient_headers: dict) -> None:
        response = await client.post("/api/v1/slots/generate", json={"days": 1}, headers=patient_headers)

        assert response.status_code == 403


class TestAddSlot:
    """POST /slots."""

    async def test_add_slot(self, client: AsyncClient, admin_headers: dict) -> None:
        response = await client.post(
            "/api/v1/slots",
            json={"startAt": "2025-08-25T13:00:00Z", "endAt": "2025-08-25T13:45:00Z"},
            headers=admin_headers,
        )

        assert response.status_code == 201
        slot = response.json()["data"]["slot"]
        assert slot["startAt"] == "2025-08-25T13:00:00Z"
        assert slot["durationMinutes"] == 45
        assert slot["isBooked"] is False

    async def test_add_slot_errors(
        self,
        client: AsyncClient,
        async_session: AsyncSession,
        admin_headers: dict,
    ) -> None:
        await make_slot(async_session, utc(2025, 8, 25, 9, 0))
        cases = [
            ({"startAt": "2025-08-25T10:00:00Z"}, 400, "MISSING_DATES"),
            ({"startAt": "tomorrow", "endAt": "2025-08-25T10:00:00Z"}, 400, "INVALID_DATE_FORMAT"),
            ({"startAt": "2025-08-25T10:00:00Z", "endAt": "2025-08-25T10:00:00Z"}, 400, "INVALID_TIME_RANGE"),
            ({"startAt": "2025-08-25T09:00:00Z", "endAt": "2025-08-25T09:30:00Z"}, 409, "SLOT_EXISTS"),
        ]
        for payload, status_code, code in cases:
            response = await client.post("/api/v1/slots", json=payload, headers=admin_headers)

            assert response.status_code == status_code, code
            assert response.json()["error"]["code"] == code


class TestRemoveSlot:
    """DELETE /slots/{slotId}."""

    async def test_remove_free_slot(
        self,
        client: AsyncClient,
        future_slot: Slot,
        admin_headers: dict,
    ) -> None:
        response = await client.delete(f"/api/v1/slots/{future_slot.id}", headers=admin_headers)

        assert response.status_code == 200
        assert response.json() == {"message": "Slot removed successfully"}

    async def test_remove_unknown_slot(self, client: AsyncClient, admin_headers: dict) -> None:
        for slot_id in ("00000000-0000-4000-8000-000000000000", "garbage"):
            response = await client.delete(f"/api/v1/slots/{slot_id}", headers=admin_headers)

            assert response.status_code == 404
            assert response.json()["error"]["code"] == "SLOT_NOT_FOUND"

    async def test_remove_booked_slot(
        self,
        client: AsyncClient,
        async_session: AsyncSession,
        future_slot: Slot,
        patient_user: User,
        admin_headers: dict,
    ) -> None:
        await make_booking(async_session, patient_user, future_slot)

        response = await client.delete(f"/api/v1/slots/{future_slot.id}", headers=admin_headers)

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "SLOT_BOOKED"

    async def test_remove_slot_with_cancelled_booking(
        self,
        client: AsyncClient,
        async_session: AsyncSession,
        future_slot: Slot,
        patient_user: User,
        admin_headers: dict,
        patient_headers: dict,
    ) -> None:
        booking = await make_booking(
            async_session, patient_user, future_slot, status=BookingStatus.CANCELLED
        )
        booking_id = booking.id

        response = await client.delete(f"/api/v1/slots/{future_slot.id}", headers=admin_headers)

        assert response.status_code == 200
        async_session.expunge_all()
        mine = await client.get("/api/v1/my-bookings", headers=patient_headers)
        bookings = mine.json()["data"]["bookings"]
        assert [(b["id"], b["status"], b["slot"]) for b in bookings] == [
            (booking_id, "cancelled", None)
        ]

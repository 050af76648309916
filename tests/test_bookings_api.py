"""Booking endpoint tests."""

from httpx import AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from clinic_booking.models.slot import Slot
from clinic_booking.models.user import User
from tests.factories import make_booking, make_slot, utc


class TestBookingScenario:
    """Two patients competing for one Monday-morning slot."""

    async def test_book_conflict_cancel_rebook(
        self,
        client: AsyncClient,
        future_slot: Slot,
        patient_headers: dict,
        other_patient_headers: dict,
    ) -> None:
        booked = await client.post(
            "/api/v1/book", json={"slotId": future_slot.id}, headers=patient_headers
        )
        assert booked.status_code == 201
        body = booked.json()
        assert body["message"] == "Slot booked successfully"
        booking = body["data"]["booking"]
        assert booking["status"] == "confirmed"
        assert booking["slot"] == {
            "id": future_slot.id,
            "startAt": "2025-08-25T09:00:00Z",
            "endAt": "2025-08-25T09:30:00Z",
            "durationMinutes": 30,
        }

        conflict = await client.post(
            "/api/v1/book", json={"slotId": future_slot.id}, headers=other_patient_headers
        )
        assert conflict.status_code == 409
        assert conflict.json()["error"]["code"] == "SLOT_ALREADY_BOOKED"

        cancelled = await client.patch(
            f"/api/v1/bookings/{booking['id']}/cancel", headers=patient_headers
        )
        assert cancelled.status_code == 200
        assert cancelled.json()["data"]["booking"] == {"id": booking["id"], "status": "cancelled"}

        listing = await client.get(
            "/api/v1/slots",
            params={"from": "2025-08-25", "to": "2025-08-25"},
            headers=other_patient_headers,
        )
        assert [s["id"] for s in listing.json()["data"]["slots"]["2025-08-25"]] == [future_slot.id]

        rebooked = await client.post(
            "/api/v1/book", json={"slotId": future_slot.id}, headers=other_patient_headers
        )
        assert rebooked.status_code == 201
        assert rebooked.json()["data"]["booking"]["status"] == "confirmed"


class TestBookSlot:
    """POST /book error paths."""

    async def test_admin_cannot_book(
        self,
        client: AsyncClient,
        future_slot: Slot,
        admin_headers: dict,
    ) -> None:
        response = await client.post(
            "/api/v1/book", json={"slotId": future_slot.id}, headers=admin_headers
        )

        assert response.status_code == 403

    async def test_input_errors(self, client: AsyncClient, patient_headers: dict) -> None:
        cases = [
            ({}, 400, "MISSING_SLOT_ID"),
            ({"slotId": "123"}, 400, "INVALID_SLOT_ID"),
            ({"slotId": "00000000-0000-4000-8000-000000000000"}, 404, "SLOT_NOT_FOUND"),
            ({"slotId": 123}, 400, "VALIDATION_ERROR"),
        ]
        for payload, status_code, code in cases:
            response = await client.post("/api/v1/book", json=payload, headers=patient_headers)

            assert response.status_code == status_code, code
            assert response.json()["error"]["code"] == code

    async def test_past_slot(
        self,
        client: AsyncClient,
        past_slot: Slot,
        patient_headers: dict,
    ) -> None:
        response = await client.post(
            "/api/v1/book", json={"slotId": past_slot.id}, headers=patient_headers
        )

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "PAST_SLOT"

    async def test_overlap(
        self,
        client: AsyncClient,
        async_session: AsyncSession,
        patient_user: User,
        patient_headers: dict,
    ) -> None:
        held = await make_slot(async_session, utc(2025, 8, 25, 10, 0))
        await make_booking(async_session, patient_user, held)
        shifted = await make_slot(async_session, utc(2025, 8, 25, 10, 15))

        response = await client.post(
            "/api/v1/book", json={"slotId": shifted.id}, headers=patient_headers
        )

        assert response.status_code == 409
        assert response.json()["error"]["code"] == "OVERLAPPING_BOOKING"


class TestListBookings:
    """GET /my-bookings and /all-bookings."""

    async def test_my_bookings(
        self,
        client: AsyncClient,
        async_session: AsyncSession,
        patient_user: User,
        other_patient: User,
        patient_headers: dict,
    ) -> None:
        mine = await make_booking(async_session, patient_user, await make_slot(async_session, utc(2025, 8, 25, 9, 0)))
        await make_booking(async_session, other_patient, await make_slot(async_session, utc(2025, 8, 26, 9, 0)))

        response = await client.get("/api/v1/my-bookings", headers=patient_headers)

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["total"] == 1
        assert data["bookings"][0]["id"] == mine.id
        assert data["bookings"][0]["slot"]["durationMinutes"] == 30
        assert "user" not in data["bookings"][0]

    async def test_all_bookings_joins_user(
        self,
        client: AsyncClient,
        async_session: AsyncSession,
        patient_user: User,
        other_patient: User,
        admin_headers: dict,
    ) -> None:
        await make_booking(async_session, patient_user, await make_slot(async_session, utc(2025, 8, 25, 9, 0)))
        await make_booking(async_session, other_patient, await make_slot(async_session, utc(2025, 8, 26, 9, 0)))

        response = await client.get("/api/v1/all-bookings", headers=admin_headers)

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["total"] == 2
        assert {b["user"]["email"] for b in data["bookings"]} == {
            "patient@example.com",
            "other@example.com",
        }
        assert set(data["bookings"][0]["user"]) == {"id", "name", "email"}

    async def test_all_bookings_forbidden_for_patient(
        self,
        client: AsyncClient,
        patient_headers: dict,
    ) -> None:
        response = await client.get("/api/v1/all-bookings", headers=patient_headers)

        assert response.status_code == 403

    async def test_my_bookings_forbidden_for_admin(
        self,
        client: AsyncClient,
        admin_headers: dict,
    ) -> None:
        response = await client.get("/api/v1/my-bookings", headers=admin_headers)

        assert response.status_code == 403


class TestCancelBooking:
    """PATCH /bookings/{bookingId}/cancel."""

    async def test_other_patient_forbidden(
        self,
        client: AsyncClient,
        async_session: AsyncSession,
        patient_user: User,
        future_slot: Slot,
        other_patient_headers: dict,
    ) -> None:
        booking = await make_booking(async_session, patient_user, future_slot)

        response = await client.patch(
            f"/api/v1/bookings/{booking.id}/cancel", headers=other_patient_headers
        )

        assert response.status_code == 403
        assert response.json()["error"]["message"] == "You can only cancel your own bookings"

    async def test_admin_may_cancel(
        self,
        client: AsyncClient,
        async_session: AsyncSession,
        patient_user: User,
        future_slot: Slot,
        admin_headers: dict,
    ) -> None:
        booking = await make_booking(async_session, patient_user, future_slot)

        response = await client.patch(f"/api/v1/bookings/{booking.id}/cancel", headers=admin_headers)

        assert response.status_code == 200
        assert response.json()["data"]["booking"]["status"] == "cancelled"

    async def test_cancel_errors(
        self,
        client: AsyncClient,
        async_session: AsyncSession,
        patient_user: User,
        past_slot: Slot,
        patient_headers: dict,
    ) -> None:
        past = await make_booking(async_session, patient_user, past_slot)
        cases = [
            ("bogus", 400, "INVALID_BOOKING_ID"),
            ("00000000-0000-4000-8000-000000000000", 404, "BOOKING_NOT_FOUND"),
            (past.id, 400, "PAST_BOOKING"),
        ]
        for booking_id, status_code, code in cases:
            response = await client.patch(
                f"/api/v1/bookings/{booking_id}/cancel", headers=patient_headers
            )

            assert response.status_code == status_code, code
            assert response.json()["error"]["code"] == code

    async def test_cancel_twice(
        self,
        client: AsyncClient,
        async_session: AsyncSession,
        patient_user: User,
        future_slot: Slot,
        patient_headers: dict,
    ) -> None:
        booking = await make_booking(async_session, patient_user, future_slot)
        first = await client.patch(f"/api/v1/bookings/{booking.id}/cancel", headers=patient_headers)

        second = await client.patch(f"/api/v1/bookings/{booking.id}/cancel", headers=patient_headers)

        assert first.status_code == 200
        assert second.status_code == 409
        assert second.json()["error"]["code"] == "BOOKING_NOT_ACTIVE"

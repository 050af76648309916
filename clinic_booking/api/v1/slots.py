"""Slot inventory endpoints.

Listing is open to any authenticated user under patient rules; ``/all``
and the write paths are admin-only.
"""

from typing import Annotated

from fastapi import APIRouter, Body, Query, status

from clinic_booking.api.deps import AdminUser, ClockDep, CurrentUser, DbSession
from clinic_booking.schemas.common import DateRange, Envelope, MessageResponse
from clinic_booking.schemas.slot import (
    CreateSlotRequest,
    GenerateSlotsData,
    GenerateSlotsRequest,
    SlotData,
    SlotListData,
    SlotRead,
)
from clinic_booking.services.availability import AvailabilityEngine, SlotListing
from clinic_booking.services.scheduling import SchedulingService
from clinic_booking.utils.time import start_of_day

router = APIRouter()


def _listing_data(listing: SlotListing) -> SlotListData:
    return SlotListData(
        slots={
            day: [SlotRead.model_validate(slot) for slot in slots]
            for day, slots in listing.slots_by_date.items()
        },
        total_slots=listing.total_slots,
        date_range=DateRange(from_=listing.range_start, to=listing.range_end),
    )


@router.get(
    "",
    response_model=Envelope[SlotListData],
    summary="List slots",
    description="Slots within a window of at most 7 days starting today or later",
)
async def list_slots(
    user: CurrentUser,
    session: DbSession,
    clock: ClockDep,
    from_: Annotated[str | None, Query(alias="from")] = None,
    to: Annotated[str | None, Query()] = None,
    include_booked: Annotated[bool, Query(alias="includeBooked")] = False,
) -> Envelope[SlotListData]:
    engine = AvailabilityEngine(session, clock=clock)
    listing = await engine.list_public_slots(from_, to, include_booked=include_booked)
    return Envelope[SlotListData](data=_listing_data(listing))


@router.get(
    "/all",
    response_model=Envelope[SlotListData],
    summary="List all slots (admin)",
    description="Every slot in the window, booked or not, without range limits",
)
async def list_all_slots(
    admin: AdminUser,
    session: DbSession,
    clock: ClockDep,
    from_: Annotated[str | None, Query(alias="from")] = None,
    to: Annotated[str | None, Query()] = None,
) -> Envelope[SlotListData]:
    engine = AvailabilityEngine(session, clock=clock)
    listing = await engine.list_slots(from_, to, include_booked=True)
    return Envelope[SlotListData](data=_listing_data(listing))


@router.post(
    "/generate",
    response_model=Envelope[GenerateSlotsData],
    summary="Generate slots (admin)",
    description="Create 30-minute weekday slots from 09:00 to 17:00 starting tomorrow",
)
async def generate_slots(
    admin: AdminUser,
    session: DbSession,
    clock: ClockDep,
    body: Annotated[GenerateSlotsRequest | None, Body()] = None,
) -> Envelope[GenerateSlotsData]:
    service = SchedulingService(session, clock=clock)
    result = await service.generate_slots(
        days=body.days if body else None,
        actor_id=admin.id,
    )

    return Envelope[GenerateSlotsData](
        message="Slots generated successfully",
        data=GenerateSlotsData(
            slots_generated=result.count,
            date_range=DateRange(
                from_=start_of_day(result.start_date),
                to=start_of_day(result.end_date),
            ),
        ),
    )


@router.post(
    "",
    response_model=Envelope[SlotData],
    status_code=status.HTTP_201_CREATED,
    summary="Add slot (admin)",
)
async def add_slot(
    body: CreateSlotRequest,
    admin: AdminUser,
    session: DbSession,
) -> Envelope[SlotData]:
    service = SchedulingService(session)
    slot = await service.add_slot(body.start_at, body.end_at, actor_id=admin.id)

    return Envelope[SlotData](
        message="Slot added successfully",
        data=SlotData(slot=SlotRead.model_validate(slot)),
    )


@router.delete(
    "/{slot_id}",
    response_model=MessageResponse,
    summary="Remove slot (admin)",
    description="Delete an unbooked slot with no booking history",
)
async def remove_slot(
    slot_id: str,
    admin: AdminUser,
    session: DbSession,
) -> MessageResponse:
    service = SchedulingService(session)
    await service.remove_slot(slot_id, actor_id=admin.id)
    return MessageResponse(message="Slot removed successfully")

"""
Booking endpoints.

Single bookings, recurring series, coach availability and coach blocks.
The coach or one of the coach's active clients may act on a booking.
"""

import datetime
from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlmodel import Session

from app.api.dependencies import get_current_coach, get_current_user
from app.db.session import get_db
from app.models.user import User
from app.schemas.booking import (AvailabilityCheckRequest, AvailabilityResponse, AvailabilitySlot, BookingCreate,
                                 BookingResponse, CancelBookingRequest, CancelSeriesRequest, CancelSeriesResponse,
                                 ClearAvailabilityResponse, CoachBlockCreate, CoachBlockResponse, CopyWeekRequest,
                                 DateAvailability, RecurringSeriesCreate, RecurringSeriesResponse,
                                 RescheduleBookingRequest, UpcomingBookingResponse, )
from app.schemas.result import ActionResult
from app.services.booking_service import BookingService

router = APIRouter()


# ----------------------------------------------------------------------
# Single bookings
# ----------------------------------------------------------------------

@router.post("", summary="Book a single slot.", response_model=ActionResult[BookingResponse],
             status_code=status.HTTP_201_CREATED, )
def create_booking(data: BookingCreate, db: Session = Depends(get_db), user: User = Depends(get_current_user), ):
    service = BookingService(db)
    service.ensure_access(user, data.coach_id, data.client_id)
    return ActionResult.ok(service.create_booking(data))


@router.get("", summary="Coach bookings in a date range.", response_model=ActionResult[list[BookingResponse]], )
def list_bookings(start: datetime.date = Query(..., description="Range start (inclusive)"),
                  end: datetime.date = Query(..., description="Range end (inclusive)"),
                  db: Session = Depends(get_db), coach: User = Depends(get_current_coach), ):
    return ActionResult.ok(BookingService(db).get_coach_bookings(coach.id, start, end))


@router.get("/mine", summary="Bookings of the current client.", response_model=ActionResult[list[BookingResponse]], )
def list_my_bookings(start: Optional[datetime.date] = Query(None), end: Optional[datetime.date] = Query(None),
                     db: Session = Depends(get_db), user: User = Depends(get_current_user), ):
    return ActionResult.ok(BookingService(db).get_client_bookings(user.id, start, end))


@router.get("/mine/upcoming", summary="Upcoming confirmed bookings of the current client.",
            response_model=ActionResult[list[UpcomingBookingResponse]], )
def list_my_upcoming(limit: int = Query(10, ge=1, le=100), db: Session = Depends(get_db),
                     user: User = Depends(get_current_user), ):
    return ActionResult.ok(BookingService(db).get_client_upcoming_bookings(user.id, limit=limit))


@router.post("/{booking_id}/cancel", summary="Cancel a booking.", response_model=ActionResult[BookingResponse], )
def cancel_booking(booking_id: int, data: CancelBookingRequest, db: Session = Depends(get_db),
                   user: User = Depends(get_current_user), ):
    service = BookingService(db)
    booking = service.get_booking(booking_id)
    service.ensure_access(user, booking.coach_id, booking.client_id)
    return ActionResult.ok(service.cancel_booking(booking_id, data.reason))


@router.post("/{booking_id}/complete", summary="Mark a booking completed.",
             response_model=ActionResult[BookingResponse], )
def complete_booking(booking_id: int, db: Session = Depends(get_db), coach: User = Depends(get_current_coach), ):
    service = BookingService(db)
    service.ensure_access(coach, service.get_booking(booking_id).coach_id)
    return ActionResult.ok(service.complete_booking(booking_id))


@router.post("/{booking_id}/no-show", summary="Mark a booking as no-show.",
             response_model=ActionResult[BookingResponse], )
def mark_no_show(booking_id: int, db: Session = Depends(get_db), coach: User = Depends(get_current_coach), ):
    service = BookingService(db)
    service.ensure_access(coach, service.get_booking(booking_id).coach_id)
    return ActionResult.ok(service.mark_no_show(booking_id))


@router.post("/{booking_id}/reschedule", summary="Move a booking to another slot.",
             response_model=ActionResult[BookingResponse], )
def reschedule_booking(booking_id: int, data: RescheduleBookingRequest, db: Session = Depends(get_db),
                       user: User = Depends(get_current_user), ):
    service = BookingService(db)
    booking = service.get_booking(booking_id)
    service.ensure_access(user, booking.coach_id, booking.client_id)
    return ActionResult.ok(service.reschedule_booking(booking_id, data.scheduled_date, data.start_time,
                                                      data.end_time))


# ----------------------------------------------------------------------
# Recurring series
# ----------------------------------------------------------------------

@router.post("/recurring", summary="Create a recurring booking series.",
             response_model=ActionResult[RecurringSeriesResponse], status_code=status.HTTP_201_CREATED, )
def create_series(data: RecurringSeriesCreate, db: Session = Depends(get_db),
                  user: User = Depends(get_current_user), ):
    service = BookingService(db)
    service.ensure_access(user, data.booking.coach_id, data.booking.client_id)
    result = service.create_recurring_series(data.booking, data.pattern, data.skip_conflicts)
    warnings = [f"{s.date.isoformat()}: {s.reason}" for s in result.skipped]
    return ActionResult.ok(result, warnings)


@router.post("/recurring/availability", summary="Preview availability for a set of dates.",
             response_model=ActionResult[list[DateAvailability]], )
def check_availability(data: AvailabilityCheckRequest, db: Session = Depends(get_db),
                       user: User = Depends(get_current_user), ):
    service = BookingService(db)
    service.ensure_access(user, data.coach_id)
    return ActionResult.ok(service.check_recurring_availability(data.coach_id, data.dates, data.start_time,
                                                                data.end_time, data.location_type))


@router.get("/recurring/{series_id}", summary="All occurrences of a series.",
            response_model=ActionResult[list[BookingResponse]], )
def get_series(series_id: str, db: Session = Depends(get_db), user: User = Depends(get_current_user), ):
    service = BookingService(db)
    bookings = service.get_series_bookings(series_id)
    service.ensure_access(user, bookings[0].coach_id, bookings[0].client_id)
    return ActionResult.ok(bookings)


@router.post("/recurring/{series_id}/cancel", summary="Cancel one, following or all occurrences.",
             response_model=ActionResult[CancelSeriesResponse], )
def cancel_series(series_id: str, data: CancelSeriesRequest, db: Session = Depends(get_db),
                  user: User = Depends(get_current_user), ):
    service = BookingService(db)
    bookings = service.get_series_bookings(series_id)
    service.ensure_access(user, bookings[0].coach_id, bookings[0].client_id)
    cancelled = service.cancel_series(series_id, data.scope, data.booking_id, data.reason)
    return ActionResult.ok(CancelSeriesResponse(cancelled=cancelled))


# ----------------------------------------------------------------------
# Availability & blocks
# ----------------------------------------------------------------------

@router.put("/availability", summary="Set availability slots of the current coach.",
            response_model=ActionResult[list[AvailabilityResponse]], )
def set_availability(slots: list[AvailabilitySlot], db: Session = Depends(get_db),
                     coach: User = Depends(get_current_coach), ):
    return ActionResult.ok(BookingService(db).set_availability(coach.id, slots))


@router.delete("/availability", summary="Clear availability of the current coach.",
               response_model=ActionResult[ClearAvailabilityResponse], )
def clear_availability(start: datetime.date = Query(...), end: Optional[datetime.date] = Query(None),
                       db: Session = Depends(get_db), coach: User = Depends(get_current_coach), ):
    return ActionResult.ok(ClearAvailabilityResponse(removed=BookingService(db).clear_availability(coach.id, start,
                                                                                                   end)))


@router.post("/availability/copy-last-week", summary="Copy last week's availability onto a week.",
             response_model=ActionResult[list[AvailabilityResponse]], )
def copy_last_week(data: CopyWeekRequest, db: Session = Depends(get_db), coach: User = Depends(get_current_coach), ):
    return ActionResult.ok(BookingService(db).copy_last_week_availability(coach.id, data.week_start))


@router.get("/availability/{coach_id}", summary="Availability of a coach in a date range.",
            response_model=ActionResult[list[AvailabilityResponse]], )
def get_availability(coach_id: int, start: datetime.date = Query(...), end: datetime.date = Query(...),
                     db: Session = Depends(get_db), user: User = Depends(get_current_user), ):
    service = BookingService(db)
    service.ensure_access(user, coach_id)
    return ActionResult.ok(service.get_coach_availability(coach_id, start, end))


@router.post("/blocks", summary="Block time in the current coach's calendar.",
             response_model=ActionResult[CoachBlockResponse], status_code=status.HTTP_201_CREATED, )
def create_block(data: CoachBlockCreate, db: Session = Depends(get_db), coach: User = Depends(get_current_coach), ):
    return ActionResult.ok(BookingService(db).create_block(coach.id, data))


@router.get("/blocks", summary="Blocks of the current coach overlapping a date range.",
            response_model=ActionResult[list[CoachBlockResponse]], )
def get_blocks(start: datetime.date = Query(...), end: datetime.date = Query(...), db: Session = Depends(get_db),
               coach: User = Depends(get_current_coach), ):
    return ActionResult.ok(BookingService(db).get_blocks(coach.id, start, end))


@router.delete("/blocks/{block_id}", summary="Remove a block.", response_model=ActionResult[None], )
def delete_block(block_id: int, db: Session = Depends(get_db), coach: User = Depends(get_current_coach), ):
    BookingService(db).delete_block(coach.id, block_id)
    return ActionResult.ok()

"""
Waitlist endpoints.

Clients join a coach's waitlist; the coach ranks candidates for a freed
slot and offers it to one of them; the client accepts or declines.
"""

from fastapi import APIRouter, Depends, status
from sqlmodel import Session

from app.api.dependencies import get_current_coach, get_current_user
from app.core.exceptions import AuthorizationError
from app.db.session import get_db
from app.models.user import User
from app.schemas.result import ActionResult
from app.schemas.waitlist import (OfferRequest, OfferResponseRequest, RankedCandidateResponse, SlotQuery,
                                  WaitlistEntryCreate, WaitlistEntryResponse, )
from app.services.booking_service import BookingService
from app.services.waitlist_service import WaitlistService

router = APIRouter()


@router.post("", summary="Join a coach's waitlist.", response_model=ActionResult[WaitlistEntryResponse],
             status_code=status.HTTP_201_CREATED, )
def join_waitlist(data: WaitlistEntryCreate, db: Session = Depends(get_db), user: User = Depends(get_current_user), ):
    BookingService(db).ensure_access(user, data.coach_id, user.id)
    return ActionResult.ok(WaitlistService(db).add_to_waitlist(user.id, data))


@router.post("/candidates", summary="Rank waitlisted clients for a freed slot.",
             response_model=ActionResult[list[RankedCandidateResponse]], )
def rank_candidates(slot: SlotQuery, db: Session = Depends(get_db), coach: User = Depends(get_current_coach), ):
    service = WaitlistService(db)
    return ActionResult.ok(service.rank_candidates_for_slot(coach.id, slot.date, slot.start_time, slot.end_time))


@router.get("/candidates/booking/{booking_id}", summary="Rank waitlisted clients for a cancelled booking's slot.",
            response_model=ActionResult[list[RankedCandidateResponse]], )
def rank_for_cancelled(booking_id: int, db: Session = Depends(get_db), coach: User = Depends(get_current_coach), ):
    if BookingService(db).get_booking(booking_id).coach_id != coach.id:
        raise AuthorizationError("Booking belongs to another coach")
    return ActionResult.ok(WaitlistService(db).get_candidates_for_cancelled_slot(booking_id))


@router.post("/offers", summary="Offer a slot to a waitlisted client.",
             response_model=ActionResult[WaitlistEntryResponse], )
def offer_slot(data: OfferRequest, db: Session = Depends(get_db), coach: User = Depends(get_current_coach), ):
    service = WaitlistService(db)
    if service.get_entry(data.entry_id).coach_id != coach.id:
        raise AuthorizationError("Entry belongs to another coach")
    return ActionResult.ok(service.notify_candidate(data.entry_id, data.date, data.start_time, data.end_time))


@router.post("/{entry_id}/respond", summary="Accept or decline a slot offer.",
             response_model=ActionResult[WaitlistEntryResponse], )
def respond_to_offer(entry_id: int, data: OfferResponseRequest, db: Session = Depends(get_db),
                     user: User = Depends(get_current_user), ):
    service = WaitlistService(db)
    if service.get_entry(entry_id).client_id != user.id:
        raise AuthorizationError("Entry belongs to another client")
    return ActionResult.ok(service.respond_to_offer(entry_id, data.accept))


@router.delete("/{entry_id}", summary="Leave the waitlist.", response_model=ActionResult[WaitlistEntryResponse], )
def leave_waitlist(entry_id: int, db: Session = Depends(get_db), user: User = Depends(get_current_user), ):
    service = WaitlistService(db)
    entry = service.get_entry(entry_id)
    if user.id not in (entry.client_id, entry.coach_id):
        raise AuthorizationError("Not your waitlist entry")
    return ActionResult.ok(service.cancel_entry(entry_id))

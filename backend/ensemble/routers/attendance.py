"""Attendance API routes — members answer PRESENT/ABSENT for open events."""
import logging
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ensemble.database import get_db
from ensemble.deps import get_active_principal
from ensemble.schemas.attendance import AttendanceOut, AttendanceSubmit
from ensemble.schemas.event import EventWithStatusOut
from ensemble.services import attendance_service
from ensemble.services.permissions import Principal

logger = logging.getLogger(__name__)
router = APIRouter()


@router.post("/", response_model=AttendanceOut)
def submit_attendance(
    payload: AttendanceSubmit,
    principal: Principal = Depends(get_active_principal),
    db: Session = Depends(get_db),
):
    """Set or update the caller's status for an event."""
    return attendance_service.submit_attendance(db, principal.id, payload.event_id, payload.status)


@router.get("/", response_model=list[EventWithStatusOut])
def list_my_attendance(
    principal: Principal = Depends(get_active_principal),
    db: Session = Depends(get_db),
):
    """Upcoming events with the caller's current answer."""
    return attendance_service.upcoming_events_for_user(db, principal.id)

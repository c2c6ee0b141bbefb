"""Attendance ledger — current status per (user, event) plus an append-only history.

Responsibilities:
- Reject submissions for unknown or closed events
- Upsert the current Attendance row and append an AttendanceHistory row in one commit
- Derive "no response" from the user list instead of storing it
"""
import logging
from datetime import datetime, timezone
from typing import Any

from fastapi import HTTPException, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ensemble.models.attendance import Attendance, AttendanceHistory, AttendanceStatus
from ensemble.models.event import Event
from ensemble.models.user import User

logger = logging.getLogger(__name__)

NO_RESPONSE = "NO_RESPONSE"


def _get_event_or_404(db: Session, event_id: str) -> Event:
    event = db.query(Event).filter(Event.id == event_id).first()
    if not event:
        raise HTTPException(status_code=404, detail="Event not found")
    return event


def _write_attendance(db: Session, user_id: str, event_id: str, new_status: AttendanceStatus) -> Attendance:
    attendance = (
        db.query(Attendance)
        .filter(Attendance.user_id == user_id, Attendance.event_id == event_id)
        .first()
    )
    if attendance:
        attendance.status = new_status
        attendance.updated_at = datetime.now(timezone.utc)
    else:
        attendance = Attendance(user_id=user_id, event_id=event_id, status=new_status)
        db.add(attendance)

    db.add(AttendanceHistory(user_id=user_id, event_id=event_id, status=new_status))
    db.commit()
    return attendance


def submit_attendance(db: Session, user_id: str, event_id: str, new_status: AttendanceStatus) -> Attendance:
    """Record ``user_id``'s status for an open event.

    The upsert and the history append commit together; if a concurrent first
    submission wins the unique key, the write is retried once as an update.
    """
    event = _get_event_or_404(db, event_id)
    if event.is_closed:
        logger.warning("User %s tried to answer closed event %s", user_id, event_id)
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Registration closed")

    try:
        attendance = _write_attendance(db, user_id, event_id, new_status)
    except IntegrityError:
        db.rollback()
        attendance = _write_attendance(db, user_id, event_id, new_status)

    db.refresh(attendance)
    logger.info("User %s marked %s for event %s", user_id, new_status.value, event_id)
    return attendance


def upcoming_events_for_user(db: Session, user_id: str) -> list[dict[str, Any]]:
    """Events dated now or later, each with the user's current status (None if unanswered)."""
    now = datetime.now(timezone.utc)
    events = db.query(Event).filter(Event.date >= now).order_by(Event.date).all()
    answers = {
        a.event_id: a.status.value
        for a in db.query(Attendance).filter(
            Attendance.user_id == user_id,
            Attendance.event_id.in_([e.id for e in events]),
        )
    }
    return [
        {
            "id": e.id,
            "title": e.title,
            "date": e.date,
            "location": e.location,
            "description": e.description,
            "is_closed": e.is_closed,
            "created_at": e.created_at,
            "updated_at": e.updated_at,
            "user_status": answers.get(e.id),
        }
        for e in events
    ]


def event_detail(db: Session, event_id: str) -> dict[str, Any]:
    """Attendances, history and counts for one event.

    present + absent + no_response always equals the total user count.
    """
    event = _get_event_or_404(db, event_id)
    users = db.query(User).order_by(User.name).all()
    attendances = event.attendances

    responded = {a.user_id for a in attendances}
    no_response_users = [u for u in users if u.id not in responded]
    present = sum(1 for a in attendances if a.status == AttendanceStatus.PRESENT)
    absent = sum(1 for a in attendances if a.status == AttendanceStatus.ABSENT)

    return {
        "event": event,
        "attendances": attendances,
        "history": event.attendance_history,
        "no_response_users": no_response_users,
        "present_count": present,
        "absent_count": absent,
        "no_response_count": len(no_response_users),
        "total_users": len(users),
    }


def user_history(db: Session, user: User) -> dict[str, Any]:
    """One entry per event (newest first) with the user's status and participation stats."""
    events = db.query(Event).order_by(Event.date.desc()).all()
    answers = {
        a.event_id: a.status.value
        for a in db.query(Attendance).filter(Attendance.user_id == user.id)
    }

    history = [
        {
            "event_id": e.id,
            "title": e.title,
            "date": e.date,
            "location": e.location,
            "status": answers.get(e.id, NO_RESPONSE),
        }
        for e in events
    ]
    total = len(history)
    present = sum(1 for h in history if h["status"] == AttendanceStatus.PRESENT.value)
    absent = sum(1 for h in history if h["status"] == AttendanceStatus.ABSENT.value)

    return {
        "user": user,
        "history": history,
        "stats": {
            "total_events": total,
            "present_count": present,
            "absent_count": absent,
            "no_response_count": total - present - absent,
            "participation_rate": round(present / total * 100) if total else 0,
        },
    }

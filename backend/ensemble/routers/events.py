"""Event API routes — registry CRUD and the open/closed registration switch."""
import logging
from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, status
from sqlalchemy.orm import Session

from ensemble.database import get_db
from ensemble.deps import get_active_principal, require_permission
from ensemble.models.event import Event
from ensemble.models.user import User
from ensemble.schemas.event import EventCreate, EventDetailOut, EventOut, EventUpdate
from ensemble.services import attendance_service, notification_service
from ensemble.services.permissions import Permission, Principal

logger = logging.getLogger(__name__)
router = APIRouter()


def _all_user_emails(db: Session) -> list[str]:
    return [email for (email,) in db.query(User.email).all()]


def _get_event_or_404(db: Session, event_id: str) -> Event:
    event = db.query(Event).filter(Event.id == event_id).first()
    if not event:
        raise HTTPException(status_code=404, detail="Event not found")
    return event


@router.get("/", response_model=list[EventOut])
def list_events(
    principal: Principal = Depends(get_active_principal),
    db: Session = Depends(get_db),
):
    """List all events by date."""
    return db.query(Event).order_by(Event.date).all()


@router.post("/", response_model=EventOut, status_code=status.HTTP_201_CREATED)
def create_event(
    payload: EventCreate,
    background_tasks: BackgroundTasks,
    principal: Principal = Depends(require_permission(Permission.MANAGE_EVENTS)),
    db: Session = Depends(get_db),
):
    """Create an event and announce it to every member."""
    event = Event(**payload.model_dump())
    db.add(event)
    db.commit()
    db.refresh(event)
    logger.info("Created event '%s' (%s) by user %s", event.title, event.id, principal.id)

    background_tasks.add_task(
        notification_service.broadcast_event_created,
        _all_user_emails(db), event.title, event.date, event.location,
    )
    return event


@router.get("/{event_id}", response_model=EventDetailOut)
def get_event(
    event_id: str,
    principal: Principal = Depends(require_permission(Permission.MANAGE_EVENTS, Permission.VIEW_ATTENDANCE)),
    db: Session = Depends(get_db),
):
    """Event with attendances, change history and response counts."""
    return attendance_service.event_detail(db, event_id)


@router.patch("/{event_id}", response_model=EventOut)
def update_event(
    event_id: str,
    payload: EventUpdate,
    background_tasks: BackgroundTasks,
    principal: Principal = Depends(require_permission(Permission.MANAGE_EVENTS)),
    db: Session = Depends(get_db),
):
    """Partial update. Closing registration notifies every member; reopening does not."""
    event = _get_event_or_404(db, event_id)
    was_closed = event.is_closed

    for field, value in payload.model_dump(exclude_unset=True).items():
        if field in ("title", "date", "is_closed") and value is None:
            continue
        setattr(event, field, value)
    db.commit()
    db.refresh(event)
    logger.info("Updated event %s (closed=%s)", event_id, event.is_closed)

    if event.is_closed and not was_closed:
        logger.info("Registration closed for event %s", event_id)
        background_tasks.add_task(
            notification_service.broadcast_event_closed,
            _all_user_emails(db), event.title, event.date,
        )
    return event


@router.delete("/{event_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_event(
    event_id: str,
    principal: Principal = Depends(require_permission(Permission.MANAGE_EVENTS)),
    db: Session = Depends(get_db),
):
    """Delete an event together with its attendances and history."""
    event = _get_event_or_404(db, event_id)
    db.delete(event)
    db.commit()
    logger.info("Deleted event %s", event_id)

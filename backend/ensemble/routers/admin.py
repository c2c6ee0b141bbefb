"""Admin dashboard routes. The whole router requires VIEW_ADMIN."""
import logging
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ensemble.database import get_db
from ensemble.deps import require_permission
from ensemble.models.attendance import Attendance
from ensemble.models.event import Event
from ensemble.models.profile_change_request import ProfileChangeRequest, RequestStatus
from ensemble.models.user import User
from ensemble.schemas.admin import AdminStatsOut
from ensemble.schemas.attendance import AdminAttendanceOut
from ensemble.services.permissions import Permission, Principal

logger = logging.getLogger(__name__)
router = APIRouter(dependencies=[Depends(require_permission(Permission.VIEW_ADMIN))])


@router.get("/stats", response_model=AdminStatsOut)
def dashboard_stats(db: Session = Depends(get_db)):
    return AdminStatsOut(
        user_count=db.query(User).count(),
        event_count=db.query(Event).count(),
        open_event_count=db.query(Event).filter(Event.is_closed.is_(False)).count(),
        pending_request_count=(
            db.query(ProfileChangeRequest)
            .filter(ProfileChangeRequest.status == RequestStatus.PENDING)
            .count()
        ),
    )


@router.get("/attendance", response_model=list[AdminAttendanceOut])
def list_attendance(
    principal: Principal = Depends(require_permission(Permission.VIEW_ATTENDANCE)),
    db: Session = Depends(get_db),
):
    """Every current attendance answer, most recently updated first."""
    return db.query(Attendance).order_by(Attendance.updated_at.desc()).all()

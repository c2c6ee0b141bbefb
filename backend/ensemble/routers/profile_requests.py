"""Profile change request routes — members propose, user managers decide."""
import logging
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from ensemble.database import get_db
from ensemble.deps import get_active_principal, require_permission
from ensemble.models.profile_change_request import ProfileChangeRequest, RequestStatus
from ensemble.schemas.profile_change_request import ProfileChangeRequestCreate, ProfileChangeRequestOut
from ensemble.services import profile_service
from ensemble.services.permissions import Permission, Principal

logger = logging.getLogger(__name__)
router = APIRouter()

can_manage_users = require_permission(Permission.MANAGE_USERS)


@router.post("/", response_model=ProfileChangeRequestOut, status_code=status.HTTP_201_CREATED)
def submit_request(
    payload: ProfileChangeRequestCreate,
    principal: Principal = Depends(get_active_principal),
    db: Session = Depends(get_db),
):
    """Propose new profile values for the caller; only one may be pending."""
    return profile_service.submit_request(db, principal.id, payload.model_dump())


@router.get("/", response_model=list[ProfileChangeRequestOut])
def list_pending_requests(principal: Principal = Depends(can_manage_users), db: Session = Depends(get_db)):
    """Pending requests, oldest first."""
    return (
        db.query(ProfileChangeRequest)
        .filter(ProfileChangeRequest.status == RequestStatus.PENDING)
        .order_by(ProfileChangeRequest.created_at)
        .all()
    )


@router.get("/mine", response_model=list[ProfileChangeRequestOut])
def list_my_requests(principal: Principal = Depends(get_active_principal), db: Session = Depends(get_db)):
    return (
        db.query(ProfileChangeRequest)
        .filter(ProfileChangeRequest.user_id == principal.id)
        .order_by(ProfileChangeRequest.created_at.desc())
        .all()
    )


@router.post("/{request_id}/approve", response_model=ProfileChangeRequestOut)
def approve_request(request_id: str, principal: Principal = Depends(can_manage_users), db: Session = Depends(get_db)):
    """Apply the proposed values to the member's profile."""
    return profile_service.approve_request(db, request_id)


@router.post("/{request_id}/reject", response_model=ProfileChangeRequestOut)
def reject_request(request_id: str, principal: Principal = Depends(can_manage_users), db: Session = Depends(get_db)):
    return profile_service.reject_request(db, request_id)

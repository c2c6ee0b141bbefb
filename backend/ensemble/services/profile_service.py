"""Profile change workflow — PENDING → APPROVED | REJECTED."""
import logging

from fastapi import HTTPException, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ensemble.models.profile_change_request import ProfileChangeRequest, RequestStatus
from ensemble.models.user import User

logger = logging.getLogger(__name__)

# request column -> user column
PROPOSED_FIELDS = {
    "new_name": "name",
    "new_email": "email",
    "new_instrument": "instrument",
    "new_image": "image",
}


def _has_pending(db: Session, user_id: str) -> bool:
    return (
        db.query(ProfileChangeRequest)
        .filter(ProfileChangeRequest.user_id == user_id, ProfileChangeRequest.status == RequestStatus.PENDING)
        .first()
        is not None
    )


def submit_request(db: Session, user_id: str, proposed: dict[str, str | None]) -> ProfileChangeRequest:
    """Queue a change request; a user may only have one PENDING request."""
    values = {k: v.strip() for k, v in proposed.items() if k in PROPOSED_FIELDS and v and v.strip()}
    if not values:
        raise HTTPException(status_code=400, detail="No changes proposed")

    if _has_pending(db, user_id):
        raise HTTPException(status_code=400, detail="A request is already pending")

    request = ProfileChangeRequest(user_id=user_id, status=RequestStatus.PENDING, **values)
    db.add(request)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        if _has_pending(db, user_id):
            # Lost the race against a concurrent submission
            raise HTTPException(status_code=400, detail="A request is already pending")
        raise
    db.refresh(request)
    logger.info("ProfileChangeRequest %s submitted by user %s (%s)", request.id, user_id, sorted(values))
    return request


def _get_pending_or_error(db: Session, request_id: str) -> ProfileChangeRequest:
    request = db.query(ProfileChangeRequest).filter(ProfileChangeRequest.id == request_id).first()
    if not request:
        raise HTTPException(status_code=404, detail="Request not found")
    if request.status != RequestStatus.PENDING:
        raise HTTPException(status_code=400, detail=f"Request is already {request.status.value.lower()}")
    return request


def approve_request(db: Session, request_id: str) -> ProfileChangeRequest:
    """Apply the non-empty proposed fields and mark APPROVED in one commit."""
    request = _get_pending_or_error(db, request_id)
    user = db.query(User).filter(User.id == request.user_id).first()
    if not user:
        raise HTTPException(status_code=404, detail="User not found")

    applied = []
    for request_field, user_field in PROPOSED_FIELDS.items():
        value = getattr(request, request_field)
        if value:
            setattr(user, user_field, value)
            applied.append(user_field)
    request.status = RequestStatus.APPROVED

    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Email already in use")
    db.refresh(request)
    logger.info("ProfileChangeRequest %s approved; updated %s on user %s", request_id, applied, user.id)
    return request


def reject_request(db: Session, request_id: str) -> ProfileChangeRequest:
    request = _get_pending_or_error(db, request_id)
    request.status = RequestStatus.REJECTED
    db.commit()
    db.refresh(request)
    logger.info("ProfileChangeRequest %s rejected", request_id)
    return request

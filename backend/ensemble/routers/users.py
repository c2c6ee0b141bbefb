"""User administration routes plus per-user attendance history."""
import logging
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ensemble.database import get_db
from ensemble.deps import get_active_principal, require_permission
from ensemble.models.role import Role
from ensemble.models.user import User
from ensemble.schemas.user import UserCreate, UserDetailOut, UserHistoryOut, UserOut, UserUpdate
from ensemble.services import attendance_service, auth_service
from ensemble.services.permissions import Permission, Principal

logger = logging.getLogger(__name__)
router = APIRouter()


def _get_user_or_404(db: Session, user_id: str) -> User:
    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    return user


def _resolve_roles(db: Session, role_ids: list[str]) -> list[Role]:
    wanted = set(role_ids)
    roles = db.query(Role).filter(Role.id.in_(wanted)).all() if wanted else []
    if len(roles) != len(wanted):
        raise HTTPException(status_code=400, detail="Unknown role")
    return roles


def _commit_unique(db: Session) -> None:
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Email or membership number already in use")


@router.get("/", response_model=list[UserOut])
def list_users(
    principal: Principal = Depends(require_permission(Permission.MANAGE_USERS)),
    db: Session = Depends(get_db),
):
    """List all users, newest first."""
    return db.query(User).order_by(User.created_at.desc()).all()


@router.post("/", response_model=UserOut, status_code=status.HTTP_201_CREATED)
def create_user(
    payload: UserCreate,
    principal: Principal = Depends(require_permission(Permission.MANAGE_USERS)),
    db: Session = Depends(get_db),
):
    """Create a member account. The member must change the password on first login."""
    if db.query(User).filter(User.email == payload.email).first():
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Email already in use")

    user = User(
        name=payload.name,
        email=payload.email,
        password_hash=auth_service.hash_password(payload.password),
        instrument=payload.instrument,
        membership_number=payload.membership_number or None,
        must_change_password=True,
        roles=_resolve_roles(db, payload.role_ids),
    )
    db.add(user)
    _commit_unique(db)
    db.refresh(user)
    logger.info("Created user %s (%s) by %s", user.id, user.email, principal.id)
    return user


@router.get("/{user_id}", response_model=UserDetailOut)
def get_user(
    user_id: str,
    principal: Principal = Depends(get_active_principal),
    db: Session = Depends(get_db),
):
    """Fetch a user with roles and clothing. Members may only read themselves."""
    if not principal.owns_or_can(user_id, Permission.MANAGE_USERS):
        raise HTTPException(status_code=403, detail="Forbidden")
    return _get_user_or_404(db, user_id)


@router.patch("/{user_id}", response_model=UserOut)
def update_user(
    user_id: str,
    payload: UserUpdate,
    principal: Principal = Depends(require_permission(Permission.MANAGE_USERS)),
    db: Session = Depends(get_db),
):
    """Partial update; ``role_ids`` replaces the whole role set."""
    user = _get_user_or_404(db, user_id)
    updates = payload.model_dump(exclude_unset=True)

    if "role_ids" in updates:
        role_ids = updates.pop("role_ids")
        if role_ids is not None:
            user.roles = _resolve_roles(db, role_ids)
    password = updates.pop("password", None)
    if password:
        user.password_hash = auth_service.hash_password(password)

    for field, value in updates.items():
        if field in ("name", "email") and not value:
            continue
        if field == "membership_number":
            value = value or None
        setattr(user, field, value)

    _commit_unique(db)
    db.refresh(user)
    logger.info("Updated user %s by %s", user_id, principal.id)
    return user


@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_user(
    user_id: str,
    principal: Principal = Depends(require_permission(Permission.MANAGE_USERS)),
    db: Session = Depends(get_db),
):
    """Delete a user and everything they own."""
    if user_id == principal.id:
        raise HTTPException(status_code=400, detail="You cannot delete your own account")
    user = _get_user_or_404(db, user_id)
    db.delete(user)
    db.commit()
    logger.info("Deleted user %s by %s", user_id, principal.id)


@router.get("/{user_id}/history", response_model=UserHistoryOut)
def get_user_history(
    user_id: str,
    principal: Principal = Depends(get_active_principal),
    db: Session = Depends(get_db),
):
    """Per-event attendance for one user with participation stats."""
    if not principal.owns_or_can(user_id, Permission.MANAGE_USERS, Permission.VIEW_ATTENDANCE):
        raise HTTPException(status_code=403, detail="Forbidden")
    user = _get_user_or_404(db, user_id)
    return attendance_service.user_history(db, user)

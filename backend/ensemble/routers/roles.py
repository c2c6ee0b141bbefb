"""Role administration routes — named sets of permission tokens."""
import logging
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ensemble.database import get_db
from ensemble.deps import require_permission
from ensemble.models.role import Role
from ensemble.schemas.role import RoleCreate, RoleOut, RoleUpdate
from ensemble.services.permissions import ALL_PERMISSIONS, Permission, Principal

logger = logging.getLogger(__name__)
router = APIRouter()

can_manage_roles = require_permission(Permission.MANAGE_ROLES)


def _get_role_or_404(db: Session, role_id: str) -> Role:
    role = db.query(Role).filter(Role.id == role_id).first()
    if not role:
        raise HTTPException(status_code=404, detail="Role not found")
    return role


def _commit_unique(db: Session) -> None:
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Role name already exists")


@router.get("/", response_model=list[RoleOut])
def list_roles(principal: Principal = Depends(can_manage_roles), db: Session = Depends(get_db)):
    return db.query(Role).order_by(Role.name).all()


@router.get("/permissions", response_model=list[str])
def list_permissions(principal: Principal = Depends(can_manage_roles)):
    """The fixed set of grantable permission tokens."""
    return ALL_PERMISSIONS


@router.get("/{role_id}", response_model=RoleOut)
def get_role(role_id: str, principal: Principal = Depends(can_manage_roles), db: Session = Depends(get_db)):
    return _get_role_or_404(db, role_id)


@router.post("/", response_model=RoleOut, status_code=status.HTTP_201_CREATED)
def create_role(payload: RoleCreate, principal: Principal = Depends(can_manage_roles), db: Session = Depends(get_db)):
    role = Role(name=payload.name.strip().upper())
    role.permission_list = [p.value for p in payload.permissions]
    db.add(role)
    _commit_unique(db)
    db.refresh(role)
    logger.info("Created role %s (%s) with %s", role.name, role.id, role.permission_list)
    return role


@router.patch("/{role_id}", response_model=RoleOut)
def update_role(
    role_id: str,
    payload: RoleUpdate,
    principal: Principal = Depends(can_manage_roles),
    db: Session = Depends(get_db),
):
    role = _get_role_or_404(db, role_id)
    if payload.name is not None:
        role.name = payload.name.strip().upper()
    if payload.permissions is not None:
        role.permission_list = [p.value for p in payload.permissions]
    _commit_unique(db)
    db.refresh(role)
    logger.info("Updated role %s", role_id)
    return role


@router.delete("/{role_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_role(role_id: str, principal: Principal = Depends(can_manage_roles), db: Session = Depends(get_db)):
    role = _get_role_or_404(db, role_id)
    db.delete(role)
    db.commit()
    logger.info("Deleted role %s", role_id)

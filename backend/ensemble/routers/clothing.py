"""Clothing inventory routes — each member manages their own items."""
import logging
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from ensemble.database import get_db
from ensemble.deps import get_active_principal
from ensemble.models.clothing_item import ClothingItem
from ensemble.schemas.clothing import ClothingItemCreate, ClothingItemOut
from ensemble.services.permissions import Principal

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("/", response_model=list[ClothingItemOut])
def list_clothing(
    principal: Principal = Depends(get_active_principal),
    db: Session = Depends(get_db),
):
    return (
        db.query(ClothingItem)
        .filter(ClothingItem.user_id == principal.id)
        .order_by(ClothingItem.created_at.desc())
        .all()
    )


@router.post("/", response_model=ClothingItemOut, status_code=status.HTTP_201_CREATED)
def create_clothing(
    payload: ClothingItemCreate,
    principal: Principal = Depends(get_active_principal),
    db: Session = Depends(get_db),
):
    item = ClothingItem(user_id=principal.id, name=payload.name, image=payload.image)
    db.add(item)
    db.commit()
    db.refresh(item)
    logger.info("User %s added clothing item %s", principal.id, item.id)
    return item


@router.delete("/{item_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_clothing(
    item_id: str,
    principal: Principal = Depends(get_active_principal),
    db: Session = Depends(get_db),
):
    item = db.query(ClothingItem).filter(ClothingItem.id == item_id).first()
    if not item:
        raise HTTPException(status_code=404, detail="Clothing item not found")
    if item.user_id != principal.id:
        raise HTTPException(status_code=403, detail="Forbidden")
    db.delete(item)
    db.commit()
    logger.info("User %s removed clothing item %s", principal.id, item_id)

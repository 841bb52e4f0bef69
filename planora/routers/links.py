from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from planora.schemas.quick_link import QuickLinkCreate, QuickLinkOut
from planora.models.quick_link import QuickLink
from planora.database import get_db
from planora.utils.auth import get_current_user
from planora.utils.ownership import owned, get_owned_or_404

router = APIRouter(prefix="/links", tags=["links"])


@router.post("/", response_model=QuickLinkOut)
def create_link(link: QuickLinkCreate, db: Session = Depends(get_db), user: str = Depends(get_current_user)):
    new = QuickLink(user_id=user, **link.dict())
    db.add(new)
    db.commit()
    db.refresh(new)
    return new


@router.get("/", response_model=List[QuickLinkOut])
def list_links(db: Session = Depends(get_db), user: str = Depends(get_current_user)):
    return owned(db, QuickLink, user).order_by(QuickLink.position.asc()).all()


@router.delete("/{link_id}")
def delete_link(link_id: str, db: Session = Depends(get_db), user: str = Depends(get_current_user)):
    link = get_owned_or_404(db, QuickLink, link_id, user, label="Link")
    db.delete(link)
    db.commit()
    return {"detail": "deleted"}

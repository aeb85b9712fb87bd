from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import Text, type_coerce
from sqlalchemy.orm import Session
from typing import List
import logging
from app.core.database import get_db, utcnow
from app.core.auth import get_current_user
from app.models.announcement import Announcement
from app.models.user import User
from app.schemas.announcement import (
    Announcement as AnnouncementSchema,
    AnnouncementCreate,
    AnnouncementUpdate,
)

logger = logging.getLogger(__name__)
router = APIRouter()


def _newest_first(query):
    return query.order_by(Announcement.created_at.desc(), Announcement.id.desc())


@router.get("/", response_model=List[AnnouncementSchema])
def get_announcements(db: Session = Depends(get_db)):
    """Get all announcements, newest first."""
    return _newest_first(db.query(Announcement)).all()


@router.get("/active", response_model=List[AnnouncementSchema])
def get_active_announcements(db: Session = Depends(get_db)):
    """
    Get announcements that are switched on and not yet expired.

    Expiry is checked against the current time on every request; the stored
    ``active`` flag is never changed by expiry. A stored expiry that cannot be
    parsed counts as expired.
    """
    now = utcnow()
    raw_expiry = type_coerce(Announcement.expires_at, Text).label("raw_expiry")
    rows = _newest_first(
        db.query(Announcement, raw_expiry).filter(Announcement.active == True)
    ).all()

    live = []
    for announcement, raw in rows:
        if announcement.expires_at is None and raw:
            logger.error(
                f"Announcement {announcement.id} hidden: unreadable expiresAt {raw!r}"
            )
            continue
        if announcement.expires_at is None or announcement.expires_at > now:
            live.append(announcement)
    return live


@router.get("/{announcement_id}", response_model=AnnouncementSchema)
def get_announcement(announcement_id: int, db: Session = Depends(get_db)):
    announcement = (
        db.query(Announcement).filter(Announcement.id == announcement_id).first()
    )
    if not announcement:
        raise HTTPException(status_code=404, detail="Announcement not found")
    return announcement


@router.post(
    "/", response_model=AnnouncementSchema, status_code=status.HTTP_201_CREATED
)
def create_announcement(
    announcement: AnnouncementCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    db_announcement = Announcement(**announcement.model_dump())
    db.add(db_announcement)
    db.commit()
    db.refresh(db_announcement)
    return db_announcement


@router.put("/{announcement_id}", response_model=AnnouncementSchema)
def update_announcement(
    announcement_id: int,
    announcement_update: AnnouncementUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    announcement = (
        db.query(Announcement).filter(Announcement.id == announcement_id).first()
    )
    if not announcement:
        raise HTTPException(status_code=404, detail="Announcement not found")

    update_data = announcement_update.model_dump(exclude_unset=True)
    for key in ("title", "active"):
        if key in update_data and update_data[key] is None:
            del update_data[key]
    if "message" in update_data and update_data["message"] is None:
        update_data["message"] = ""

    for key, value in update_data.items():
        setattr(announcement, key, value)

    db.commit()
    db.refresh(announcement)
    return announcement


@router.delete("/{announcement_id}")
def delete_announcement(
    announcement_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    announcement = (
        db.query(Announcement).filter(Announcement.id == announcement_id).first()
    )
    if not announcement:
        raise HTTPException(status_code=404, detail="Announcement not found")

    db.delete(announcement)
    db.commit()

    return {"message": "Announcement deleted successfully"}

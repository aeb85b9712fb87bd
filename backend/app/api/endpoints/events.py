from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from typing import List
from app.core.database import get_db
from app.core.auth import get_current_user
from app.core.exceptions import EntityNotFoundError
from app.models.user import User
from app.schemas.event import Event as EventSchema, EventCreate, EventUpdate
from app.services.event_service import EventService
from app.api.validation import LimitParam, SkipParam

router = APIRouter()


@router.get("/", response_model=List[EventSchema])
def get_events(
    skip: int = SkipParam,
    limit: int = LimitParam,
    db: Session = Depends(get_db),
):
    """List events newest first, each with its ordered items and item count."""
    return EventService(db).list_events(skip=skip, limit=limit)


@router.get("/{event_id}", response_model=EventSchema)
def get_event(event_id: int, db: Session = Depends(get_db)):
    try:
        return EventService(db).get_event(event_id)
    except EntityNotFoundError:
        raise HTTPException(status_code=404, detail="Event not found")


@router.post("/", response_model=EventSchema, status_code=status.HTTP_201_CREATED)
def create_event(
    event: EventCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Create an event; items are stored in the order given."""
    return EventService(db).create_event(event)


@router.put("/{event_id}", response_model=EventSchema)
def update_event(
    event_id: int,
    event_update: EventUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """
    Update the provided fields of an event.

    When ``items`` is present the whole item list is replaced and positions
    are renumbered from zero.
    """
    try:
        return EventService(db).update_event(event_id, event_update)
    except EntityNotFoundError:
        raise HTTPException(status_code=404, detail="Event not found")


@router.delete("/{event_id}")
def delete_event(
    event_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    try:
        EventService(db).delete_event(event_id)
    except EntityNotFoundError:
        raise HTTPException(status_code=404, detail="Event not found")

    return {"message": "Event deleted successfully"}

"""
Event aggregate writes. Items are always written as a whole list whose
positions follow list order, so positions stay dense (0..n-1).
"""

import logging
from typing import List

from sqlalchemy.orm import Session, selectinload

from app.core.database import utcnow
from app.core.exceptions import EntityNotFoundError
from app.models.event import Event, EventItem
from app.schemas.event import EventCreate, EventItemCreate, EventUpdate

logger = logging.getLogger(__name__)


class EventService:
    def __init__(self, db: Session):
        self.db = db

    def _query(self):
        return self.db.query(Event).options(selectinload(Event.items))

    def list_events(self, skip: int = 0, limit: int = 100) -> List[Event]:
        return (
            self._query()
            .order_by(Event.created_at.desc(), Event.id.desc())
            .offset(skip)
            .limit(limit)
            .all()
        )

    def get_event(self, event_id: int) -> Event:
        event = self._query().filter(Event.id == event_id).first()
        if not event:
            raise EntityNotFoundError("Event", event_id)
        return event

    def create_event(self, data: EventCreate) -> Event:
        fields = data.model_dump(exclude={"items"})
        fields["summary"] = fields.get("summary") or ""

        event = Event(**fields)
        self.db.add(event)
        self.db.flush()
        self._replace_items(event.id, data.items)
        self.db.commit()

        logger.info(f"Created event {event.id} with {len(data.items)} item(s)")
        return self.get_event(event.id)

    def update_event(self, event_id: int, data: EventUpdate) -> Event:
        event = self.db.get(Event, event_id)
        if not event:
            raise EntityNotFoundError("Event", event_id)

        updates = data.model_dump(exclude_unset=True, exclude={"items"})
        for key in ("title", "published"):
            if key in updates and updates[key] is None:
                del updates[key]
        if "summary" in updates and updates["summary"] is None:
            updates["summary"] = ""

        for key, value in updates.items():
            setattr(event, key, value)
        event.updated_at = utcnow()

        if data.items is not None:
            self._replace_items(event.id, data.items)
        self.db.commit()

        logger.info(f"Updated event {event_id}")
        return self.get_event(event_id)

    def delete_event(self, event_id: int) -> None:
        event = self.db.get(Event, event_id)
        if not event:
            raise EntityNotFoundError("Event", event_id)
        # Items go with the row through ON DELETE CASCADE
        self.db.delete(event)
        self.db.commit()
        logger.info(f"Deleted event {event_id}")

    def _replace_items(self, event_id: int, items: List[EventItemCreate]) -> None:
        self.db.query(EventItem).filter(EventItem.event_id == event_id).delete(
            synchronize_session=False
        )
        for position, item in enumerate(items):
            self.db.add(
                EventItem(
                    event_id=event_id,
                    name=item.name,
                    content=item.content,
                    icon_url=item.icon_url,
                    position=position,
                )
            )
        self.db.flush()

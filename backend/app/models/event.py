from sqlalchemy import Column, Integer, String, Text, Boolean, ForeignKey
from sqlalchemy.orm import relationship
from app.core.database import Base, IsoTimestamp, utcnow


class Event(Base):
    __tablename__ = "events"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String, nullable=False)
    image_url = Column("imageUrl", String)
    summary = Column(Text, nullable=False, default="")
    content = Column(Text)
    external_link = Column("externalLink", String)
    published = Column(Boolean, nullable=False, default=False)

    # Metadata
    created_at = Column("createdAt", IsoTimestamp, default=utcnow)
    updated_at = Column("updatedAt", IsoTimestamp, default=utcnow, onupdate=utcnow)

    # Items are written as whole lists by EventService; read-only here so the
    # ORM never issues its own child deletes (ON DELETE CASCADE does that)
    items = relationship(
        "EventItem",
        order_by="EventItem.position",
        viewonly=True,
    )

    @property
    def item_count(self) -> int:
        return len(self.items)


class EventItem(Base):
    __tablename__ = "event_items"

    id = Column(Integer, primary_key=True, index=True)
    event_id = Column(
        "eventId",
        Integer,
        ForeignKey("events.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    name = Column(String, nullable=False)
    content = Column(Text)
    icon_url = Column("iconUrl", String)
    position = Column(Integer, nullable=False, default=0)  # 0..n-1 within an event

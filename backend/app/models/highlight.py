from sqlalchemy import Column, Integer, String, Boolean
from app.core.database import Base, IsoTimestamp, utcnow


class Highlight(Base):
    __tablename__ = "highlights"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String, nullable=False)
    image_url = Column("imageUrl", String)
    url = Column(String)
    type = Column(String, nullable=False, default="image")  # "image" or "video"
    active = Column(Boolean, nullable=False, default=False)

    # Metadata
    created_at = Column("createdAt", IsoTimestamp, default=utcnow)
    updated_at = Column("updatedAt", IsoTimestamp, default=utcnow, onupdate=utcnow)

from sqlalchemy import Column, Integer, String
from app.core.database import Base, IsoTimestamp, utcnow

DEFAULT_TAG_COLOR = "#3B82F6"


class Tag(Base):
    __tablename__ = "tags"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, unique=True, nullable=False)
    color = Column(String, default=DEFAULT_TAG_COLOR)

    # Metadata
    created_at = Column("createdAt", IsoTimestamp, default=utcnow)
    updated_at = Column("updatedAt", IsoTimestamp, default=utcnow, onupdate=utcnow)

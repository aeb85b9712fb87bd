from sqlalchemy import Column, Integer, String, Text
from app.core.database import Base, IsoTimestamp, utcnow


class Author(Base):
    __tablename__ = "authors"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    avatar_url = Column("avatarUrl", String)
    bio = Column(Text)

    # Metadata
    created_at = Column("createdAt", IsoTimestamp, default=utcnow)
    updated_at = Column("updatedAt", IsoTimestamp, default=utcnow, onupdate=utcnow)

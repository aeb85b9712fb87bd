from sqlalchemy import Column, Integer, String, Text, Boolean
from app.core.database import Base, IsoTimestamp, utcnow


class Announcement(Base):
    __tablename__ = "announcements"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String, nullable=False)
    message = Column(Text, nullable=False, default="")
    url = Column(String)
    active = Column(Boolean, nullable=False, default=False)

    # Metadata
    created_at = Column("createdAt", IsoTimestamp, default=utcnow)
    # Expiry is applied when reading active announcements; nothing flips `active`
    expires_at = Column("expiresAt", IsoTimestamp, nullable=True)

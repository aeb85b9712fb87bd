from sqlalchemy import Column, Integer, String
from app.core.database import Base, IsoTimestamp, utcnow


class Logo(Base):
    __tablename__ = "logos"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    logo_url = Column("logoUrl", String)
    date = Column(String)  # Free-form display date chosen in the dashboard

    # Metadata
    created_at = Column("createdAt", IsoTimestamp, default=utcnow)
    updated_at = Column("updatedAt", IsoTimestamp, default=utcnow, onupdate=utcnow)

from sqlalchemy import Column, Integer, String
from app.core.database import Base, IsoTimestamp, utcnow


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String, unique=True, nullable=False, index=True)
    password = Column(String, nullable=False)  # bcrypt hash, never the plain value
    role = Column(String, nullable=False, default="admin")

    # Metadata
    created_at = Column("createdAt", IsoTimestamp, default=utcnow)

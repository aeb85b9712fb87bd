from pydantic import field_validator
from datetime import datetime
from typing import Optional

from .base import CamelModel
from .tag import clean_name


class AnnouncementBase(CamelModel):
    title: str
    message: str = ""
    url: Optional[str] = None
    active: bool = False
    expires_at: Optional[datetime] = None


class AnnouncementCreate(AnnouncementBase):
    @field_validator("title")
    @classmethod
    def validate_title(cls, v: str) -> str:
        return clean_name(v, max_length=500)


class AnnouncementUpdate(CamelModel):
    title: Optional[str] = None
    message: Optional[str] = None
    url: Optional[str] = None
    active: Optional[bool] = None
    expires_at: Optional[datetime] = None

    @field_validator("title")
    @classmethod
    def validate_title(cls, v: Optional[str]) -> Optional[str]:
        return clean_name(v, max_length=500)


class Announcement(AnnouncementBase):
    id: int
    created_at: Optional[datetime] = None

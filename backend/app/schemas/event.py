from pydantic import field_validator
from datetime import datetime
from typing import Optional, List

from .base import CamelModel
from .tag import clean_name


class EventItemCreate(CamelModel):
    name: str
    content: Optional[str] = None
    icon_url: Optional[str] = None

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        return clean_name(v)


class EventItem(CamelModel):
    id: int
    event_id: int
    name: str
    content: Optional[str] = None
    icon_url: Optional[str] = None
    position: int


class EventBase(CamelModel):
    title: str
    image_url: Optional[str] = None
    summary: Optional[str] = None
    content: Optional[str] = None
    external_link: Optional[str] = None
    published: bool = False


class EventCreate(EventBase):
    items: List[EventItemCreate] = []

    @field_validator("title")
    @classmethod
    def validate_title(cls, v: str) -> str:
        return clean_name(v, max_length=500)


class EventUpdate(CamelModel):
    title: Optional[str] = None
    image_url: Optional[str] = None
    summary: Optional[str] = None
    content: Optional[str] = None
    external_link: Optional[str] = None
    published: Optional[bool] = None
    # When present the whole list is replaced; positions follow list order
    items: Optional[List[EventItemCreate]] = None

    @field_validator("title")
    @classmethod
    def validate_title(cls, v: Optional[str]) -> Optional[str]:
        return clean_name(v, max_length=500)


class Event(EventBase):
    id: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    items: List[EventItem] = []
    item_count: int = 0

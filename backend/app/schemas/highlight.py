from pydantic import field_validator
from datetime import datetime
from typing import Optional, Literal

from .base import CamelModel
from .tag import clean_name

HighlightType = Literal["image", "video"]


class HighlightBase(CamelModel):
    title: str
    image_url: Optional[str] = None
    url: Optional[str] = None
    type: HighlightType = "image"
    active: bool = False


class HighlightCreate(HighlightBase):
    @field_validator("title")
    @classmethod
    def validate_title(cls, v: str) -> str:
        return clean_name(v, max_length=500)


class HighlightUpdate(CamelModel):
    title: Optional[str] = None
    image_url: Optional[str] = None
    url: Optional[str] = None
    type: Optional[HighlightType] = None
    active: Optional[bool] = None

    @field_validator("title")
    @classmethod
    def validate_title(cls, v: Optional[str]) -> Optional[str]:
        return clean_name(v, max_length=500)


class Highlight(HighlightBase):
    id: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

from pydantic import field_validator
from datetime import datetime
from typing import Optional

from .base import CamelModel


def clean_name(v: Optional[str], max_length: int = 255) -> Optional[str]:
    """Strip a display name and reject blank or oversized values."""
    if v is None:
        return v
    v = v.strip()
    if not v:
        raise ValueError("Name cannot be empty")
    if len(v) > max_length:
        raise ValueError(f"Name cannot exceed {max_length} characters")
    return v


class TagBase(CamelModel):
    name: str
    color: Optional[str] = None

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        return clean_name(v, max_length=50)


class TagCreate(TagBase):
    pass


class TagUpdate(CamelModel):
    name: Optional[str] = None
    color: Optional[str] = None

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: Optional[str]) -> Optional[str]:
        return clean_name(v, max_length=50)


class Tag(TagBase):
    id: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

from pydantic import field_validator
from datetime import datetime
from typing import Optional

from .base import CamelModel
from .tag import clean_name


class AuthorBase(CamelModel):
    name: str
    avatar_url: Optional[str] = None
    bio: Optional[str] = None

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        return clean_name(v)


class AuthorCreate(AuthorBase):
    pass


class AuthorUpdate(CamelModel):
    name: Optional[str] = None
    avatar_url: Optional[str] = None
    bio: Optional[str] = None

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: Optional[str]) -> Optional[str]:
        return clean_name(v)


class Author(AuthorBase):
    id: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

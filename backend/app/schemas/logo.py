from pydantic import field_validator
from datetime import datetime
from typing import Optional

from .base import CamelModel
from .tag import clean_name


class LogoBase(CamelModel):
    name: str
    logo_url: Optional[str] = None
    date: Optional[str] = None

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        return clean_name(v)


class LogoCreate(LogoBase):
    pass


class LogoUpdate(CamelModel):
    name: Optional[str] = None
    logo_url: Optional[str] = None
    date: Optional[str] = None

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: Optional[str]) -> Optional[str]:
        return clean_name(v)


class Logo(LogoBase):
    id: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

from pydantic import field_validator
from datetime import datetime
from typing import Optional, List, Union

from .base import CamelModel
from .tag import Tag, clean_name
from .author import Author
from .logo import Logo


def parse_id_list(v: Union[List[int], str, None]) -> Optional[List[int]]:
    """Accept a list of ids or the dashboard's comma-separated form ("3,7,12")."""
    if v is None:
        return None
    if isinstance(v, str):
        ids = []
        for part in v.split(","):
            part = part.strip()
            if not part:
                continue
            if not part.lstrip("-").isdigit():
                raise ValueError(f"Invalid article id: {part!r}")
            ids.append(int(part))
        return ids
    return v


class BlogBase(CamelModel):
    title: Optional[str] = None
    content: Optional[str] = None
    summary: Optional[str] = None
    category: Optional[str] = None
    image_url: Optional[str] = None
    cover_image: Optional[str] = None
    external_link: Optional[str] = None
    logo_id: Optional[int] = None
    author_id: Optional[int] = None
    published: bool = False


class BlogCreate(BlogBase):
    title: str
    tags: List[int] = []
    reference_articles: Optional[Union[List[int], str]] = None

    @field_validator("title")
    @classmethod
    def validate_title(cls, v: str) -> str:
        return clean_name(v, max_length=500)

    @field_validator("reference_articles", mode="before")
    @classmethod
    def validate_reference_articles(cls, v):
        return parse_id_list(v)


class BlogUpdate(CamelModel):
    title: Optional[str] = None
    content: Optional[str] = None
    summary: Optional[str] = None
    category: Optional[str] = None
    image_url: Optional[str] = None
    cover_image: Optional[str] = None
    external_link: Optional[str] = None
    logo_id: Optional[int] = None
    author_id: Optional[int] = None
    published: Optional[bool] = None
    tags: Optional[List[int]] = None  # Replaces the whole tag set when given
    reference_articles: Optional[Union[List[int], str]] = None

    @field_validator("title")
    @classmethod
    def validate_title(cls, v: Optional[str]) -> Optional[str]:
        return clean_name(v, max_length=500)

    @field_validator("reference_articles", mode="before")
    @classmethod
    def validate_reference_articles(cls, v):
        return parse_id_list(v)


class BlogReferenceSummary(CamelModel):
    """A published article linked from another blog."""

    id: int
    title: Optional[str] = None
    slug: Optional[str] = None
    summary: Optional[str] = None
    category: Optional[str] = None
    image_url: Optional[str] = None
    cover_image: Optional[str] = None
    created_at: Optional[datetime] = None
    tags: List[Tag] = []


class Blog(BlogBase):
    id: int
    slug: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    logo: Optional[Logo] = None
    author: Optional[Author] = None
    tags: List[Tag] = []
    reference_article_ids: List[int] = []
    reference_articles: List[BlogReferenceSummary] = []

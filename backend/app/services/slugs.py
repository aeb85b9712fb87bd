"""
URL slug generation for blogs.

The same two functions serve the live API and the migration backfill so a
title always maps to the same slug no matter which path created the row.
"""

import logging
import re
import time
from typing import Optional

from slugify import slugify as _normalize
from sqlalchemy.orm import Session

from app.models.blog import Blog

logger = logging.getLogger(__name__)

# Removed outright rather than turned into a separator: "U.S.A" -> "usa"
_DISALLOWED = re.compile(r"[^a-z0-9\s-]")


def slugify(title, fallback_id: Optional[int] = None) -> str:
    """
    Turn a title into a URL-safe slug.

    Lowercases, drops everything outside ``[a-z0-9]``, whitespace and ``-``,
    turns whitespace runs into a single hyphen and trims hyphens at both ends.
    A missing title, or one that reduces to nothing, yields ``blog-<id>`` when
    the row id is known and ``blog-<epoch ms>`` otherwise.
    """
    slug = ""
    if isinstance(title, str):
        slug = _normalize(_DISALLOWED.sub("", title.lower()))

    if slug:
        return slug
    if fallback_id is not None:
        return f"blog-{fallback_id}"
    return f"blog-{int(time.time() * 1000)}"


def ensure_unique_slug(
    db: Session, candidate: str, exclude_id: Optional[int] = None
) -> str:
    """
    Return ``candidate`` or the first free ``candidate-N`` (N = 1, 2, ...).

    The database is queried again on every iteration. This only narrows the
    window for a clash; the unique index on ``blogs.slug`` remains the final
    arbiter and callers must handle its IntegrityError.
    """
    slug = candidate
    counter = 1
    while True:
        query = db.query(Blog.id).filter(Blog.slug == slug)
        if exclude_id is not None:
            query = query.filter(Blog.id != exclude_id)
        if query.first() is None:
            return slug
        slug = f"{candidate}-{counter}"
        counter += 1

"""
Blog aggregate writes: the blog row, its tag links and its reference links.

All three are written in one transaction. Slugs come from the slug generator;
when a concurrent writer claims the same slug first, the unique index rejects
the commit and the whole write is retried with a freshly resolved slug.
"""

import logging
from typing import Iterable, List, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, selectinload

from app.core.database import utcnow
from app.core.exceptions import (
    ContentValidationError,
    DuplicateEntityError,
    EntityNotFoundError,
)
from app.models.author import Author
from app.models.blog import Blog, BlogReference, BlogTag, DEFAULT_BLOG_CATEGORY
from app.models.logo import Logo
from app.models.tag import Tag
from app.schemas.blog import BlogCreate, BlogUpdate
from app.services.slugs import ensure_unique_slug, slugify

logger = logging.getLogger(__name__)

MAX_SLUG_ATTEMPTS = 5


def normalize_ids(ids: Optional[Iterable[int]]) -> List[int]:
    """Drop non-positive ids and duplicates, keeping first-seen order."""
    result = []
    for value in ids or []:
        if value is None or value <= 0 or value in result:
            continue
        result.append(value)
    return result


def _is_slug_conflict(error: IntegrityError) -> bool:
    return "slug" in str(error.orig).lower()


class BlogService:
    """Reads and writes blogs together with their tag and reference links."""

    def __init__(self, db: Session):
        self.db = db

    # Reads ------------------------------------------------------------------

    def _query(self):
        return self.db.query(Blog).options(
            selectinload(Blog.logo),
            selectinload(Blog.author),
            selectinload(Blog.tags),
            selectinload(Blog.reference_links)
            .selectinload(BlogReference.referenced)
            .selectinload(Blog.tags),
        )

    def list_blogs(
        self,
        published: Optional[bool] = None,
        category: Optional[str] = None,
        skip: int = 0,
        limit: int = 100,
    ) -> List[Blog]:
        query = self._query()
        if published is not None:
            query = query.filter(Blog.published == published)
        if category:
            query = query.filter(Blog.category == category)
        return (
            query.order_by(Blog.created_at.desc(), Blog.id.desc())
            .offset(skip)
            .limit(limit)
            .all()
        )

    def get_by_id(self, blog_id: int) -> Blog:
        blog = self._query().filter(Blog.id == blog_id).first()
        if not blog:
            raise EntityNotFoundError("Blog", blog_id)
        return blog

    def get_blog(self, identifier: str) -> Blog:
        """
        Resolve a blog by id or slug.

        A purely numeric identifier is tried as an id first and falls back to
        the slug, so a blog titled "2024" stays reachable at /blogs/2024.
        """
        # ASCII only: "²" and "১" also pass str.isdigit()
        if identifier.isascii() and identifier.isdigit():
            blog = self._query().filter(Blog.id == int(identifier)).first()
            if blog:
                return blog

        blog = self._query().filter(Blog.slug == identifier).first()
        if not blog:
            raise EntityNotFoundError("Blog", identifier)
        return blog

    # Writes -----------------------------------------------------------------

    def create_blog(self, data: BlogCreate) -> Blog:
        fields = data.model_dump(exclude={"tags", "reference_articles"})
        tag_ids = normalize_ids(data.tags)
        reference_ids = normalize_ids(data.reference_articles)
        self._check_links(fields, tag_ids, reference_ids)

        fields["summary"] = fields.get("summary") or ""
        fields["category"] = fields.get("category") or DEFAULT_BLOG_CATEGORY
        base_slug = slugify(data.title)

        slug = base_slug
        for attempt in range(1, MAX_SLUG_ATTEMPTS + 1):
            slug = ensure_unique_slug(self.db, base_slug)
            try:
                blog = Blog(**fields, slug=slug)
                self.db.add(blog)
                self.db.flush()
                self._replace_tags(blog.id, tag_ids)
                self._replace_references(blog.id, reference_ids)
                self.db.commit()
            except IntegrityError as e:
                self.db.rollback()
                if not _is_slug_conflict(e):
                    raise
                logger.warning(
                    f"Slug '{slug}' taken concurrently (attempt {attempt}/{MAX_SLUG_ATTEMPTS})"
                )
                continue

            logger.info(f"Created blog {blog.id} with slug '{slug}'")
            return self.get_by_id(blog.id)

        raise DuplicateEntityError("Blog", "slug", slug)

    def update_blog(self, blog_id: int, data: BlogUpdate) -> Blog:
        updates = data.model_dump(exclude_unset=True)
        tag_ids = updates.pop("tags", None)
        reference_ids = updates.pop("reference_articles", None)

        # Columns that cannot hold NULL keep their value or fall back to defaults
        for key in ("title", "published"):
            if key in updates and updates[key] is None:
                del updates[key]
        if "summary" in updates and updates["summary"] is None:
            updates["summary"] = ""
        if "category" in updates and not updates["category"]:
            updates["category"] = DEFAULT_BLOG_CATEGORY

        if tag_ids is not None:
            tag_ids = normalize_ids(tag_ids)
        if reference_ids is not None:
            reference_ids = normalize_ids(reference_ids)
            if blog_id in reference_ids:
                raise ContentValidationError("A blog cannot reference itself")
        self._check_links(updates, tag_ids or [], reference_ids or [])

        slug = None
        for attempt in range(1, MAX_SLUG_ATTEMPTS + 1):
            blog = self.db.get(Blog, blog_id)
            if not blog:
                raise EntityNotFoundError("Blog", blog_id)

            retitled = "title" in updates and updates["title"] != blog.title
            for key, value in updates.items():
                setattr(blog, key, value)
            if retitled:
                slug = ensure_unique_slug(
                    self.db,
                    slugify(updates["title"], fallback_id=blog.id),
                    exclude_id=blog.id,
                )
                blog.slug = slug
            # Link-only edits still count as an update of the blog
            blog.updated_at = utcnow()

            try:
                if tag_ids is not None:
                    self._replace_tags(blog.id, tag_ids)
                if reference_ids is not None:
                    self._replace_references(blog.id, reference_ids)
                self.db.commit()
            except IntegrityError as e:
                self.db.rollback()
                if not retitled or not _is_slug_conflict(e):
                    raise
                logger.warning(
                    f"Slug '{slug}' taken concurrently (attempt {attempt}/{MAX_SLUG_ATTEMPTS})"
                )
                continue

            logger.info(f"Updated blog {blog_id}")
            return self.get_by_id(blog_id)

        raise DuplicateEntityError("Blog", "slug", slug)

    def delete_blog(self, blog_id: int) -> None:
        blog = self.db.get(Blog, blog_id)
        if not blog:
            raise EntityNotFoundError("Blog", blog_id)
        # Tag and reference links go with the row through ON DELETE CASCADE
        self.db.delete(blog)
        self.db.commit()
        logger.info(f"Deleted blog {blog_id}")

    # Helpers ----------------------------------------------------------------

    def _check_links(
        self, fields: dict, tag_ids: List[int], reference_ids: List[int]
    ) -> None:
        """Raise EntityNotFoundError for any referenced row that does not exist."""
        if fields.get("logo_id") is not None:
            if not self.db.get(Logo, fields["logo_id"]):
                raise EntityNotFoundError("Logo", fields["logo_id"])
        if fields.get("author_id") is not None:
            if not self.db.get(Author, fields["author_id"]):
                raise EntityNotFoundError("Author", fields["author_id"])

        self._check_ids(Tag, "Tag", tag_ids)
        self._check_ids(Blog, "Blog", reference_ids)

    def _check_ids(self, model, entity_type: str, ids: List[int]) -> None:
        if not ids:
            return
        found = {
            row[0] for row in self.db.query(model.id).filter(model.id.in_(ids)).all()
        }
        for entity_id in ids:
            if entity_id not in found:
                raise EntityNotFoundError(entity_type, entity_id)

    def _replace_tags(self, blog_id: int, tag_ids: List[int]) -> None:
        self.db.query(BlogTag).filter(BlogTag.blog_id == blog_id).delete(
            synchronize_session=False
        )
        for tag_id in tag_ids:
            self.db.add(BlogTag(blog_id=blog_id, tag_id=tag_id))
        self.db.flush()

    def _replace_references(self, blog_id: int, reference_ids: List[int]) -> None:
        self.db.query(BlogReference).filter(BlogReference.blog_id == blog_id).delete(
            synchronize_session=False
        )
        for position, referenced_id in enumerate(reference_ids):
            self.db.add(
                BlogReference(
                    blog_id=blog_id,
                    referenced_blog_id=referenced_id,
                    position=position,
                )
            )
        self.db.flush()

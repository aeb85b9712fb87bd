from sqlalchemy import (
    Column,
    Integer,
    String,
    Text,
    Boolean,
    ForeignKey,
    Index,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship
from app.core.database import Base, IsoTimestamp, utcnow

SLUG_INDEX_NAME = "idx_blogs_slug"
DEFAULT_BLOG_CATEGORY = "Blogs"


class Blog(Base):
    __tablename__ = "blogs"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String)
    # Null only until the slug generator assigns one; unique once assigned
    slug = Column(String, nullable=True)
    content = Column(Text)
    summary = Column(Text, nullable=False, default="")
    category = Column(String, nullable=False, default=DEFAULT_BLOG_CATEGORY)
    image_url = Column("imageUrl", String)
    cover_image = Column("coverImage", String)
    external_link = Column("externalLink", String)
    logo_id = Column(
        "logoId", Integer, ForeignKey("logos.id", ondelete="SET NULL"), nullable=True
    )
    author_id = Column(
        "authorId",
        Integer,
        ForeignKey("authors.id", ondelete="SET NULL"),
        nullable=True,
    )
    published = Column(Boolean, nullable=False, default=False)

    # Metadata
    created_at = Column("createdAt", IsoTimestamp, default=utcnow)
    updated_at = Column("updatedAt", IsoTimestamp, default=utcnow, onupdate=utcnow)

    # Relationships
    logo = relationship("Logo")
    author = relationship("Author")
    # Junction rows are replaced wholesale by BlogService; the collections are
    # read-only so deletes are left to the database cascades
    tags = relationship(
        "Tag", secondary="blog_tags", order_by="Tag.name", viewonly=True
    )
    reference_links = relationship(
        "BlogReference",
        foreign_keys="BlogReference.blog_id",
        order_by="BlogReference.position",
        viewonly=True,
    )

    __table_args__ = (Index(SLUG_INDEX_NAME, "slug", unique=True),)

    @property
    def reference_article_ids(self):
        return [link.referenced_blog_id for link in self.reference_links]

    @property
    def reference_articles(self):
        """Referenced blogs that are currently published, in link order."""
        return [
            link.referenced
            for link in self.reference_links
            if link.referenced is not None and link.referenced.published
        ]


class BlogTag(Base):
    __tablename__ = "blog_tags"

    id = Column(Integer, primary_key=True, index=True)
    blog_id = Column(
        "blogId",
        Integer,
        ForeignKey("blogs.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    tag_id = Column(
        "tagId",
        Integer,
        ForeignKey("tags.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    __table_args__ = (UniqueConstraint("blogId", "tagId", name="uq_blog_tag"),)


class BlogReference(Base):
    """Ordered "further reading" link from one blog to another."""

    __tablename__ = "blog_references"

    id = Column(Integer, primary_key=True, index=True)
    blog_id = Column(
        "blogId",
        Integer,
        ForeignKey("blogs.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    referenced_blog_id = Column(
        "referencedBlogId",
        Integer,
        ForeignKey("blogs.id", ondelete="CASCADE"),
        nullable=False,
    )
    position = Column(Integer, nullable=False, default=0)

    referenced = relationship("Blog", foreign_keys=[referenced_blog_id])

    __table_args__ = (
        UniqueConstraint("blogId", "referencedBlogId", name="uq_blog_reference"),
    )

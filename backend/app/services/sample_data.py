#!/usr/bin/env python3
"""
Inject sample content into a Fableration database.

Creates the admin account (when a password is given), a few blogs, two
announcements and two events with items so the site and dashboard have
something to show.

Usage: fableration-seed [--database-url URL] [--admin-password PW] [--reset]
"""

import argparse
import logging
import sys
from datetime import timedelta
from typing import List, Optional

from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.database import create_db_engine, create_session_factory, utcnow
from app.core.logging_config import setup_logging
from app.models import Announcement, Blog, Event, EventItem, Tag
from app.schemas.blog import BlogCreate
from app.schemas.event import EventCreate
from app.services.blog_service import BlogService
from app.services.event_service import EventService
from app.services.schema import ensure_schema, ensure_seed_admin

logger = logging.getLogger(__name__)

PLACEHOLDER_IMAGE = "https://via.placeholder.com/800x400"
PLACEHOLDER_ICON = "https://via.placeholder.com/50"

SAMPLE_TAGS = [("Community", "#10B981"), ("Technology", "#3B82F6")]

SAMPLE_BLOGS = [
    {
        "title": "Sample Blog Title 1",
        "content": "This is a sample blog post content. It can contain detailed "
        "information about your topic.",
        "summary": "A brief overview of this blog post",
        "category": "Blogs",
        "image_url": PLACEHOLDER_IMAGE,
        "external_link": "https://example.com/blog1",
        "published": True,
    },
    {
        "title": "Sample Blog Title 2",
        "content": "Another sample blog post content. You can write detailed "
        "information here.",
        "summary": "A short summary of this blog post",
        "category": "News",
        "published": False,
    },
    {
        "title": "Sample Event Post",
        "summary": "This is a sample event announcement",
        "category": "Events",
        "image_url": PLACEHOLDER_IMAGE,
        "external_link": "https://example.com/event",
        "published": True,
    },
]

SAMPLE_EVENTS = [
    {
        "title": "Annual Conference",
        "image_url": PLACEHOLDER_IMAGE,
        "summary": "Join us for our annual conference with industry leaders",
        "content": "The event will feature keynote speeches, workshops, and "
        "networking opportunities.",
        "external_link": "https://example.com/conference",
        "published": True,
        "items": [
            {
                "name": "Keynote Speech",
                "content": "Industry leader keynote on emerging trends.",
                "icon_url": PLACEHOLDER_ICON,
            },
            {
                "name": "Workshop Session",
                "content": "Interactive workshop on new technologies.",
                "icon_url": PLACEHOLDER_ICON,
            },
        ],
    },
    {
        "title": "Tech Workshop Series",
        "image_url": PLACEHOLDER_IMAGE,
        "summary": "A series of workshops covering the latest technologies",
        "published": False,
        "items": [
            {
                "name": "Web Development",
                "content": "Learn the latest web development frameworks.",
                "icon_url": PLACEHOLDER_ICON,
            }
        ],
    },
]


def clear_content(db: Session) -> None:
    """Remove blogs, events and announcements. Users, tags, authors and logos stay."""
    for model in (EventItem, Event, Blog, Announcement):
        db.query(model).delete(synchronize_session=False)
    db.commit()
    logger.info("Cleared existing content")


def _ensure_tags(db: Session) -> List[int]:
    ids = []
    for name, color in SAMPLE_TAGS:
        tag = db.query(Tag).filter(Tag.name == name).first()
        if not tag:
            tag = Tag(name=name, color=color)
            db.add(tag)
            db.commit()
            db.refresh(tag)
        ids.append(tag.id)
    return ids


def inject_sample_data(
    db: Session, admin_password: Optional[str] = None, reset: bool = False
) -> dict:
    """
    Write the sample content and return how many rows of each kind were added.
    """
    if reset:
        clear_content(db)

    admin = ensure_seed_admin(db, password=admin_password)
    tag_ids = _ensure_tags(db)

    blogs = BlogService(db)
    for index, blog in enumerate(SAMPLE_BLOGS):
        blogs.create_blog(BlogCreate(**blog, tags=tag_ids[: index + 1]))

    now = utcnow()
    db.add_all(
        [
            Announcement(
                title="Website Launch",
                message="Welcome to our website!",
                url="https://example.com/welcome",
                active=True,
                expires_at=now + timedelta(days=30),
            ),
            Announcement(
                title="Maintenance Notice",
                message="Website maintenance in progress, some features may be unavailable.",
                active=False,
            ),
        ]
    )
    db.commit()

    events = EventService(db)
    for event in SAMPLE_EVENTS:
        events.create_event(EventCreate(**event))

    counts = {
        "admin": 1 if admin else 0,
        "blogs": len(SAMPLE_BLOGS),
        "announcements": 2,
        "events": len(SAMPLE_EVENTS),
    }
    logger.info("Sample data injected", extra=counts)
    return counts


def main(argv: Optional[List[str]] = None) -> int:
    """Entry point for ``fableration-seed``."""
    parser = argparse.ArgumentParser(description="Inject Fableration sample data")
    parser.add_argument("--database-url", default=settings.DATABASE_URL)
    parser.add_argument(
        "--admin-password",
        default=None,
        help="Create the admin account with this password if it does not exist",
    )
    parser.add_argument(
        "--reset",
        action="store_true",
        help="Delete existing blogs, events and announcements first",
    )
    args = parser.parse_args(argv)

    setup_logging()
    engine = create_db_engine(args.database_url)
    try:
        ensure_schema(engine)
        with create_session_factory(engine)() as db:
            counts = inject_sample_data(
                db, admin_password=args.admin_password, reset=args.reset
            )
    finally:
        engine.dispose()

    print("=" * 60)
    print("  Fableration sample data")
    print("=" * 60)
    for kind, count in counts.items():
        print(f"✓ {kind}: {count}")
    return 0


if __name__ == "__main__":
    sys.exit(main())

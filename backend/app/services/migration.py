"""
In-place upgrade of databases written by earlier releases.

Adds the columns older databases lack, fills NULL timestamps, assigns slugs to
blogs without one, moves the comma-separated ``referenceArticles`` text into
the ``blog_references`` table and finally creates the unique slug index. Every
step can be re-run; a second run against an upgraded database changes nothing.
"""

import argparse
import logging
import sys
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Set, Tuple

import sqlalchemy as sa
from alembic.migration import MigrationContext
from alembic.operations import Operations
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.database import create_db_engine, format_timestamp, utcnow
from app.core.logging_config import setup_logging
from app.models.blog import SLUG_INDEX_NAME
from app.services.schema import ensure_schema
from app.services.slugs import ensure_unique_slug, slugify

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ColumnSpec:
    name: str
    type_: sa.types.TypeEngine
    is_timestamp: bool = False


# Columns each table must carry after migration. Timestamp columns are added
# as plain nullable TEXT and filled in by the backfill pass.
TARGET_COLUMNS: Dict[str, List[ColumnSpec]] = {
    "users": [ColumnSpec("createdAt", sa.Text(), True)],
    "logos": [
        ColumnSpec("date", sa.Text()),
        ColumnSpec("createdAt", sa.Text(), True),
        ColumnSpec("updatedAt", sa.Text(), True),
    ],
    "authors": [
        ColumnSpec("avatarUrl", sa.Text()),
        ColumnSpec("bio", sa.Text()),
        ColumnSpec("createdAt", sa.Text(), True),
        ColumnSpec("updatedAt", sa.Text(), True),
    ],
    "tags": [
        ColumnSpec("color", sa.Text()),
        ColumnSpec("createdAt", sa.Text(), True),
        ColumnSpec("updatedAt", sa.Text(), True),
    ],
    "blogs": [
        ColumnSpec("slug", sa.Text()),
        ColumnSpec("coverImage", sa.Text()),
        ColumnSpec("logoId", sa.Integer()),
        ColumnSpec("authorId", sa.Integer()),
        ColumnSpec("referenceArticles", sa.Text()),
        ColumnSpec("createdAt", sa.Text(), True),
        ColumnSpec("updatedAt", sa.Text(), True),
    ],
    "announcements": [ColumnSpec("createdAt", sa.Text(), True)],
    "events": [
        ColumnSpec("createdAt", sa.Text(), True),
        ColumnSpec("updatedAt", sa.Text(), True),
    ],
    "highlights": [
        ColumnSpec("createdAt", sa.Text(), True),
        ColumnSpec("updatedAt", sa.Text(), True),
    ],
}


@dataclass
class MigrationReport:
    """What a migration run changed, plus the errors it survived."""

    columns_added: List[str] = field(default_factory=list)
    timestamps_backfilled: Dict[str, int] = field(default_factory=dict)
    slugs_generated: Dict[int, str] = field(default_factory=dict)
    references_migrated: int = 0
    index_created: bool = False
    errors: List[str] = field(default_factory=list)

    @property
    def changed(self) -> bool:
        return bool(
            self.columns_added
            or self.timestamps_backfilled
            or self.slugs_generated
            or self.references_migrated
            or self.index_created
        )


def parse_reference_ids(value: Optional[str]) -> List[int]:
    """Ids from the legacy comma-separated text; junk entries are skipped."""
    ids = []
    if not value:
        return ids
    for part in str(value).split(","):
        part = part.strip()
        if not part:
            continue
        try:
            ids.append(int(part))
        except ValueError:
            logger.warning(f"Ignoring non-numeric reference article id {part!r}")
    return ids


class MigrationRunner:
    """Brings an existing database up to the current column layout."""

    def __init__(self, engine: Engine):
        self.engine = engine

    def run(self) -> MigrationReport:
        report = MigrationReport()
        logger.info("Starting database migration")

        steps = [
            ("add missing columns", self.add_missing_columns),
            ("backfill timestamps", self.backfill_timestamps),
            ("generate slugs", self.generate_slugs),
            ("migrate reference articles", self.migrate_references),
            ("ensure slug index", self.ensure_slug_index),
        ]
        for name, step in steps:
            try:
                step(report)
            except Exception as e:
                logger.error(f"Migration step '{name}' failed: {e}", exc_info=True)
                report.errors.append(f"{name}: {e}")

        logger.info(
            "Database migration finished",
            extra={
                "columns_added": len(report.columns_added),
                "slugs_generated": len(report.slugs_generated),
                "references_migrated": report.references_migrated,
                "index_created": report.index_created,
                "error_count": len(report.errors),
            },
        )
        return report

    # Introspection helpers ----------------------------------------------

    def _table_names(self) -> Set[str]:
        return set(sa.inspect(self.engine).get_table_names())

    def _column_names(self, table_name: str) -> Set[str]:
        return {col["name"] for col in sa.inspect(self.engine).get_columns(table_name)}

    def _index_names(self, table_name: str) -> Set[str]:
        return {idx["name"] for idx in sa.inspect(self.engine).get_indexes(table_name)}

    # Steps ----------------------------------------------------------------

    def _add_column(self, table_name: str, column: sa.Column) -> None:
        with self.engine.begin() as conn:
            op = Operations(MigrationContext.configure(conn))
            op.add_column(table_name, column)

    def add_missing_columns(self, report: MigrationReport) -> None:
        tables = self._table_names()
        for table_name, specs in TARGET_COLUMNS.items():
            if table_name not in tables:
                logger.warning(
                    f"Table '{table_name}' does not exist; skipping its columns"
                )
                continue

            existing = self._column_names(table_name)
            for wanted in specs:
                if wanted.name in existing:
                    continue

                column_type = sa.Text() if wanted.is_timestamp else wanted.type_
                qualified = f"{table_name}.{wanted.name}"
                logger.info(f"Adding column {qualified}")
                try:
                    self._add_column(table_name, sa.Column(wanted.name, column_type))
                except Exception as e:
                    logger.warning(
                        f"Adding {qualified} failed ({e}); retrying as plain TEXT"
                    )
                    try:
                        self._add_column(table_name, sa.Column(wanted.name, sa.Text()))
                    except Exception as retry_error:
                        logger.error(f"Could not add column {qualified}: {retry_error}")
                        report.errors.append(f"add column {qualified}: {retry_error}")
                        continue
                report.columns_added.append(qualified)

    def backfill_timestamps(self, report: MigrationReport) -> None:
        tables = self._table_names()
        now = format_timestamp(utcnow())
        for table_name, specs in TARGET_COLUMNS.items():
            if table_name not in tables:
                continue
            existing = self._column_names(table_name)
            for wanted in specs:
                if not wanted.is_timestamp or wanted.name not in existing:
                    continue
                target = sa.table(table_name, sa.column(wanted.name))
                with self.engine.begin() as conn:
                    count = conn.execute(
                        sa.update(target)
                        .where(target.c[wanted.name].is_(None))
                        .values({wanted.name: now})
                    ).rowcount
                if count:
                    qualified = f"{table_name}.{wanted.name}"
                    report.timestamps_backfilled[qualified] = count
                    logger.info(f"Backfilled {count} NULL value(s) in {qualified}")

    def generate_slugs(self, report: MigrationReport) -> None:
        if "blogs" not in self._table_names():
            return

        blogs = sa.table("blogs", sa.column("id"), sa.column("title"), sa.column("slug"))
        with Session(self.engine) as db:
            pending = db.execute(
                sa.select(blogs.c.id, blogs.c.title)
                .where(sa.or_(blogs.c.slug.is_(None), blogs.c.slug == ""))
                .order_by(blogs.c.id)
            ).all()
            if not pending:
                logger.info("No blogs require slug generation")
                return

            logger.info(f"Generating slugs for {len(pending)} blog(s)")
            for blog_id, title in pending:
                slug = ensure_unique_slug(
                    db, slugify(title, fallback_id=blog_id), exclude_id=blog_id
                )
                db.execute(
                    sa.update(blogs).where(blogs.c.id == blog_id).values(slug=slug)
                )
                report.slugs_generated[blog_id] = slug
                logger.debug(f"Blog {blog_id} gets slug '{slug}'")
            db.commit()

    def migrate_references(self, report: MigrationReport) -> None:
        tables = self._table_names()
        if "blogs" not in tables or "blog_references" not in tables:
            return
        if "referenceArticles" not in self._column_names("blogs"):
            return

        blogs = sa.table("blogs", sa.column("id"), sa.column("referenceArticles"))
        refs = sa.table(
            "blog_references",
            sa.column("blogId"),
            sa.column("referencedBlogId"),
            sa.column("position"),
        )
        with self.engine.begin() as conn:
            known_ids = set(conn.execute(sa.select(blogs.c.id)).scalars())
            existing: Set[Tuple[int, int]] = {
                (row.blogId, row.referencedBlogId)
                for row in conn.execute(sa.select(refs.c.blogId, refs.c.referencedBlogId))
            }
            rows = conn.execute(
                sa.select(blogs.c.id, blogs.c.referenceArticles).where(
                    blogs.c.referenceArticles.is_not(None),
                    blogs.c.referenceArticles != "",
                )
            ).all()

            inserted = 0
            for blog_id, raw in rows:
                position = len([pair for pair in existing if pair[0] == blog_id])
                for ref_id in parse_reference_ids(raw):
                    if ref_id == blog_id or ref_id not in known_ids:
                        continue
                    if (blog_id, ref_id) in existing:
                        continue
                    conn.execute(
                        sa.insert(refs).values(
                            blogId=blog_id, referencedBlogId=ref_id, position=position
                        )
                    )
                    existing.add((blog_id, ref_id))
                    position += 1
                    inserted += 1

        if inserted:
            logger.info(f"Migrated {inserted} reference article link(s)")
        report.references_migrated += inserted

    def ensure_slug_index(self, report: MigrationReport) -> None:
        if "blogs" not in self._table_names():
            return
        if SLUG_INDEX_NAME in self._index_names("blogs"):
            return
        try:
            with self.engine.begin() as conn:
                op = Operations(MigrationContext.configure(conn))
                op.create_index(SLUG_INDEX_NAME, "blogs", ["slug"], unique=True)
        except Exception as e:
            # Usually duplicate slugs that predate the slug generator
            logger.warning(f"Could not create unique index {SLUG_INDEX_NAME}: {e}")
            report.errors.append(f"create index {SLUG_INDEX_NAME}: {e}")
            return
        report.index_created = True
        logger.info(f"Created unique index {SLUG_INDEX_NAME} on blogs(slug)")


def main(argv: Optional[List[str]] = None) -> int:
    """Entry point for ``fableration-migrate``."""
    parser = argparse.ArgumentParser(description="Upgrade a Fableration database in place")
    parser.add_argument(
        "--database-url",
        default=settings.DATABASE_URL,
        help="SQLAlchemy database URL (default: DATABASE_URL setting)",
    )
    args = parser.parse_args(argv)

    setup_logging()
    engine = create_db_engine(args.database_url)
    try:
        ensure_schema(engine)
        report = MigrationRunner(engine).run()
    finally:
        engine.dispose()

    return 1 if report.errors else 0


if __name__ == "__main__":
    sys.exit(main())

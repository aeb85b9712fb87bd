"""Tests for the schema store and the in-place migration of legacy databases."""

import pytest
import sqlalchemy as sa
from sqlalchemy.orm import Session
from sqlalchemy.pool import StaticPool

from app.core.config import settings
from app.core.database import Base, create_db_engine, parse_timestamp
from app.models import Blog, User
from app.models.blog import SLUG_INDEX_NAME
from app.services import migration as migration_module
from app.services.migration import MigrationRunner, parse_reference_ids
from app.services.schema import ensure_schema, ensure_seed_admin

LEGACY_SCHEMA = [
    """CREATE TABLE users (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        email TEXT UNIQUE NOT NULL,
        password TEXT NOT NULL,
        role TEXT NOT NULL DEFAULT 'admin'
    )""",
    """CREATE TABLE blogs (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        title TEXT NOT NULL,
        content TEXT,
        summary TEXT NOT NULL,
        category TEXT NOT NULL DEFAULT 'Blogs',
        imageUrl TEXT,
        externalLink TEXT,
        referenceArticles TEXT,
        published INTEGER NOT NULL DEFAULT 0
    )""",
    """CREATE TABLE tags (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        name TEXT NOT NULL UNIQUE
    )""",
    """CREATE TABLE events (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        title TEXT NOT NULL,
        imageUrl TEXT,
        summary TEXT NOT NULL,
        content TEXT,
        externalLink TEXT,
        published INTEGER NOT NULL DEFAULT 0,
        createdAt TEXT
    )""",
]

LEGACY_ROWS = [
    "INSERT INTO users (email, password) VALUES ('old@example.com', 'x')",
    """INSERT INTO blogs (id, title, summary, referenceArticles, published)
       VALUES (1, 'Hello World', '', '2,3,99', 1)""",
    "INSERT INTO blogs (id, title, summary) VALUES (2, 'Hello World', '')",
    "INSERT INTO blogs (id, title, summary, referenceArticles) VALUES (3, '', '', '1')",
    """INSERT INTO blogs (id, title, summary, referenceArticles)
       VALUES (4, 'Hello World!', '', 'abc, 1')""",
    "INSERT INTO tags (name) VALUES ('Legacy')",
    "INSERT INTO events (title, summary, createdAt) VALUES ('Old', '', NULL)",
]


@pytest.fixture
def legacy_engine(tmp_path):
    engine = create_db_engine(f"sqlite:///{tmp_path / 'legacy.sqlite'}")
    with engine.begin() as conn:
        for statement in LEGACY_SCHEMA + LEGACY_ROWS:
            conn.execute(sa.text(statement))
    yield engine
    engine.dispose()


@pytest.fixture
def empty_engine():
    engine = create_db_engine("sqlite:///:memory:", poolclass=StaticPool)
    yield engine
    engine.dispose()


def _columns(engine, table):
    return {c["name"] for c in sa.inspect(engine).get_columns(table)}


def _snapshot(engine):
    """Columns and every row of every table, keyed by table name."""
    inspector = sa.inspect(engine)
    snapshot = {}
    with engine.connect() as conn:
        for table in sorted(inspector.get_table_names()):
            columns = sorted(c["name"] for c in inspector.get_columns(table))
            rows = conn.execute(sa.text(f'SELECT * FROM "{table}" ORDER BY rowid')).all()
            snapshot[table] = (columns, [tuple(r) for r in rows])
    return snapshot


@pytest.mark.unit
class TestSchemaStore:
    """Test table creation and admin seeding."""

    def test_creates_all_tables(self, empty_engine):
        failed = ensure_schema(empty_engine)

        assert failed == []
        assert set(sa.inspect(empty_engine).get_table_names()) == set(
            Base.metadata.tables
        )

    def test_is_idempotent_and_keeps_data(self, empty_engine):
        ensure_schema(empty_engine)
        with Session(empty_engine) as db:
            db.add(Blog(title="Kept", slug="kept"))
            db.commit()

        assert ensure_schema(empty_engine) == []
        with Session(empty_engine) as db:
            assert db.query(Blog).count() == 1

    def test_seed_admin_created_once(self, db_session):
        first = ensure_seed_admin(db_session, password="bootstrap-pass")
        second = ensure_seed_admin(db_session, password="bootstrap-pass")

        assert first is not None
        assert first.email == settings.ADMIN_EMAIL
        assert first.password != "bootstrap-pass"
        assert second is None
        assert db_session.query(User).count() == 1

    def test_seed_admin_skipped_without_password(self, db_session, monkeypatch):
        monkeypatch.setattr(settings, "ADMIN_PASSWORD", None)

        assert ensure_seed_admin(db_session) is None
        assert db_session.query(User).count() == 0


@pytest.mark.unit
def test_parse_reference_ids():
    assert parse_reference_ids("3, 7,,12") == [3, 7, 12]
    assert parse_reference_ids("x,4") == [4]
    assert parse_reference_ids(None) == []
    assert parse_reference_ids("") == []


@pytest.mark.integration
class TestMigrationRunner:
    """Test migrating a database written by the legacy service."""

    def test_adds_missing_columns(self, legacy_engine):
        report = MigrationRunner(legacy_engine).run()

        assert report.errors == []
        assert {"slug", "coverImage", "logoId", "authorId", "createdAt", "updatedAt"} <= (
            _columns(legacy_engine, "blogs")
        )
        assert {"color", "createdAt", "updatedAt"} <= _columns(legacy_engine, "tags")
        assert "createdAt" in _columns(legacy_engine, "users")
        assert "blogs.slug" in report.columns_added
        assert "events.createdAt" not in report.columns_added

    def test_skips_missing_tables(self, legacy_engine):
        report = MigrationRunner(legacy_engine).run()

        assert not any(c.startswith("highlights.") for c in report.columns_added)
        assert "highlights" not in sa.inspect(legacy_engine).get_table_names()

    def test_backfills_null_timestamps(self, legacy_engine):
        MigrationRunner(legacy_engine).run()

        with legacy_engine.connect() as conn:
            for table, column in [
                ("blogs", "createdAt"),
                ("blogs", "updatedAt"),
                ("events", "createdAt"),
                ("users", "createdAt"),
                ("tags", "updatedAt"),
            ]:
                values = conn.execute(sa.text(f'SELECT "{column}" FROM {table}')).scalars().all()
                assert values
                for value in values:
                    assert parse_timestamp(value).tzinfo is not None

    def test_generates_unique_slugs(self, legacy_engine):
        report = MigrationRunner(legacy_engine).run()

        assert report.slugs_generated == {
            1: "hello-world",
            2: "hello-world-1",
            3: "blog-3",
            4: "hello-world-2",
        }
        indexes = {i["name"]: i for i in sa.inspect(legacy_engine).get_indexes("blogs")}
        assert indexes[SLUG_INDEX_NAME]["unique"]
        assert report.index_created

    def test_migrates_reference_articles(self, legacy_engine):
        ensure_schema(legacy_engine)
        report = MigrationRunner(legacy_engine).run()

        with legacy_engine.connect() as conn:
            pairs = conn.execute(
                sa.text(
                    'SELECT "blogId", "referencedBlogId" FROM blog_references '
                    'ORDER BY "blogId", position'
                )
            ).all()
        assert [tuple(p) for p in pairs] == [(1, 2), (1, 3), (3, 1), (4, 1)]
        assert report.references_migrated == 4

    def test_second_run_changes_nothing(self, legacy_engine):
        ensure_schema(legacy_engine)
        MigrationRunner(legacy_engine).run()

        before = _snapshot(legacy_engine)

        report = MigrationRunner(legacy_engine).run()

        assert report.errors == []
        assert not report.changed
        assert _snapshot(legacy_engine) == before
        assert before["blogs"][1]

    def test_migrated_rows_readable_through_models(self, legacy_engine):
        ensure_schema(legacy_engine)
        MigrationRunner(legacy_engine).run()

        with Session(legacy_engine) as db:
            blog = db.query(Blog).filter(Blog.slug == "hello-world").one()
            assert blog.published is True
            assert blog.created_at is not None
            assert blog.reference_article_ids == [2, 3]

    def test_failed_column_add_retried_as_text(self, legacy_engine, monkeypatch):
        original = MigrationRunner._add_column
        attempts = []

        def flaky_add(self, table_name, column):
            attempts.append((table_name, column.name))
            if (table_name, column.name) == ("blogs", "logoId") and len(
                [a for a in attempts if a == ("blogs", "logoId")]
            ) == 1:
                raise sa.exc.OperationalError("ALTER", {}, Exception("boom"))
            return original(self, table_name, column)

        monkeypatch.setattr(MigrationRunner, "_add_column", flaky_add)

        report = MigrationRunner(legacy_engine).run()

        assert "blogs.logoId" in report.columns_added
        assert attempts.count(("blogs", "logoId")) == 2
        assert "logoId" in _columns(legacy_engine, "blogs")

    def test_duplicate_slugs_leave_index_missing(self, tmp_path):
        engine = create_db_engine(f"sqlite:///{tmp_path / 'dupes.sqlite'}")
        with engine.begin() as conn:
            conn.execute(sa.text(LEGACY_SCHEMA[1]))
            conn.execute(sa.text("ALTER TABLE blogs ADD COLUMN slug TEXT"))
            conn.execute(
                sa.text(
                    "INSERT INTO blogs (title, summary, slug) VALUES "
                    "('A', '', 'same'), ('B', '', 'same')"
                )
            )

        report = MigrationRunner(engine).run()
        engine.dispose()

        assert not report.index_created
        assert any(SLUG_INDEX_NAME in e for e in report.errors)
        assert "blogs.createdAt" in report.columns_added

    def test_cli_entry_point(self, tmp_path, legacy_engine):
        url = str(legacy_engine.url)
        legacy_engine.dispose()

        assert migration_module.main(["--database-url", url]) == 0

        engine = create_db_engine(url)
        try:
            assert "highlights" in sa.inspect(engine).get_table_names()
            assert SLUG_INDEX_NAME in {
                i["name"] for i in sa.inspect(engine).get_indexes("blogs")
            }
        finally:
            engine.dispose()

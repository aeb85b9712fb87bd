"""
Schema store: creates missing tables and the seed admin on startup.

Both operations are idempotent and never drop or alter existing data, so they
run on every boot of the API as well as ahead of the migration runner.
"""

import logging
from typing import List, Optional

from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.auth import hash_password
from app.core.config import settings
from app.core.database import Base
from app.core.logging_config import log_security_event
from app.models.user import User

# Imported for its side effect of registering every table on Base.metadata
import app.models  # noqa: F401

logger = logging.getLogger(__name__)


def ensure_schema(engine: Engine) -> List[str]:
    """
    Create every canonical table that does not exist yet.

    Tables are created one by one in dependency order; a failure is logged and
    the remaining tables are still attempted, so a database that is already in
    shape keeps serving even if one statement is rejected.

    Returns:
        Names of the tables that could not be created
    """
    failed = []
    for table in Base.metadata.sorted_tables:
        try:
            table.create(bind=engine, checkfirst=True)
        except SQLAlchemyError as e:
            logger.error(f"Could not create table '{table.name}': {e}")
            failed.append(table.name)

    if failed:
        logger.warning(f"Schema ensured with failures: {', '.join(failed)}")
    else:
        logger.info("Database schema ensured")
    return failed


def ensure_seed_admin(
    db: Session,
    email: Optional[str] = None,
    password: Optional[str] = None,
) -> Optional[User]:
    """
    Insert the administrator account when no user has its email.

    The password comes from the ``password`` argument or ``ADMIN_PASSWORD``;
    without one nothing is created. Returns the new user, or None when no
    user was inserted.
    """
    email = email or settings.ADMIN_EMAIL
    password = password or settings.ADMIN_PASSWORD

    existing = db.query(User).filter(User.email == email).first()
    if existing:
        logger.debug(f"Admin user {email} already present")
        return None

    if not password:
        logger.warning(
            f"No admin user '{email}' and ADMIN_PASSWORD is not set; "
            "skipping admin seeding"
        )
        return None

    user = User(email=email, password=hash_password(password), role="admin")
    db.add(user)
    db.commit()
    db.refresh(user)

    log_security_event(
        event_type="auth.admin.seeded",
        message=f"Admin user created: {email}",
        user_id=str(user.id),
        username=email,
        event_category="authentication",
    )
    return user

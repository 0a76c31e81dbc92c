"""Create or reset the local test account."""
from __future__ import annotations

import argparse
import logging
import sys

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from crush_confessions.core import security
from crush_confessions.core.log_config import configure_logging
from crush_confessions.core.settings import settings
from crush_confessions.db.session import SessionLocal, create_tables
from crush_confessions.models import AccountStatus, User
from crush_confessions.services.users import get_user_by_email

logger = logging.getLogger(__name__)

DEFAULT_PASSWORD = "password123"
DEFAULT_DISPLAY_NAME = "Test User"


def seed_test_user(
    db: Session,
    email: str | None = None,
    password: str = DEFAULT_PASSWORD,
) -> User:
    """Upsert an ACTIVE test user and reset its password."""
    email = (email or f"test{settings.email_suffix}").lower()
    user = get_user_by_email(db, email)
    if user is None:
        user = User(email=email, display_name=DEFAULT_DISPLAY_NAME)
        db.add(user)
        logger.info("Creating test user %s", email)
    else:
        logger.info("Resetting test user %s", email)
    user.password_hash = security.hash_password(password)
    user.account_status = AccountStatus.ACTIVE
    db.commit()
    db.refresh(user)
    return user


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Seed the database with a test account")
    parser.add_argument("--email", default=None, help="Account email (defaults to test@<domain>)")
    parser.add_argument("--password", default=DEFAULT_PASSWORD)
    parser.add_argument(
        "--create-tables",
        action="store_true",
        help="Create missing tables before seeding.",
    )
    args = parser.parse_args(argv)

    configure_logging()
    try:
        if args.create_tables:
            create_tables()
        with SessionLocal() as db:
            user = seed_test_user(db, args.email, args.password)
    except SQLAlchemyError:
        logger.exception("Seeding failed")
        return 1
    print(f"[seed_db] {user.email} / {args.password}")
    return 0


if __name__ == "__main__":
    sys.exit(main())

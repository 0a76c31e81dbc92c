"""Utility script to manage the configured database."""
from __future__ import annotations

import argparse
import os
import sys
from urllib.parse import urlsplit, urlunsplit

import psycopg
from psycopg import sql

from crush_confessions.core.settings import settings


def is_sqlite_url(uri: str) -> bool:
    return uri.strip().strip("'\"").startswith("sqlite")


def normalize_to_psycopg(uri: str) -> str:
    """Return a Postgres URI suitable for psycopg.connect().

    Strips quotes and whitespace and turns SQLAlchemy driver schemes
    (``postgresql+psycopg``, ``postgresql+asyncpg``) into ``postgresql``.
    """
    uri = (uri or "").strip()
    if len(uri) >= 2 and uri[0] == uri[-1] and uri[0] in "'\"":
        uri = uri[1:-1]
    if not uri:
        raise ValueError("DATABASE_URL is empty")

    parts = urlsplit(uri)
    scheme = parts.scheme
    if scheme.startswith("postgresql+") or scheme == "postgres":
        scheme = "postgresql"
    if scheme != "postgresql":
        raise ValueError(f"Not a PostgreSQL URL: {uri!r}")

    return urlunsplit((scheme, parts.netloc, parts.path, parts.query, parts.fragment))


def split_db_url(db_url: str) -> tuple[str, str]:
    """Return ``(admin_url, target_db)`` using the ``postgres`` maintenance database."""
    parts = urlsplit(normalize_to_psycopg(db_url))
    target_db = parts.path.lstrip("/") or "postgres"
    if parts.netloc:
        admin_url = urlunsplit(("postgresql", parts.netloc, "/postgres", parts.query, ""))
    else:
        admin_url = "postgresql:///postgres"
    return admin_url, target_db


def ensure_database_exists(db_url: str) -> bool:
    """Create the configured database if it is missing; return True if created."""
    admin_url, target_db = split_db_url(db_url)

    if os.getenv("ENSURE_DB_DEBUG") == "1":
        print(f"[ensure_db] admin_url={admin_url!r}, target_db={target_db!r}")

    with psycopg.connect(admin_url, autocommit=True) as conn, conn.cursor() as cur:
        cur.execute("SELECT 1 FROM pg_database WHERE datname = %s", (target_db,))
        if cur.fetchone() is not None:
            print(f"[ensure_db] database {target_db} already exists")
            return False
        cur.execute(sql.SQL("CREATE DATABASE {}").format(sql.Identifier(target_db)))
        print(f"[ensure_db] created database {target_db}")
        return True


def drop_all_tables(db_url: str) -> None:
    """Drop and recreate the public schema of the configured database."""
    with psycopg.connect(normalize_to_psycopg(db_url), autocommit=True) as conn, conn.cursor() as cur:
        cur.execute("DROP SCHEMA IF EXISTS public CASCADE")
        cur.execute("CREATE SCHEMA public")
        cur.execute("GRANT ALL ON SCHEMA public TO CURRENT_USER")
        cur.execute("GRANT ALL ON SCHEMA public TO public")
    print("[ensure_db] dropped all tables in public schema")


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Ensure or reset the configured database")
    parser.add_argument(
        "--drop-tables",
        action="store_true",
        help="Drop and recreate the public schema after ensuring the database exists.",
    )
    parser.add_argument(
        "--create-tables",
        action="store_true",
        help="Create all tables from the ORM metadata (use Alembic in production).",
    )
    parser.add_argument(
        "--url",
        default=None,
        help="Override database URL (defaults to effective settings URL)",
    )
    args = parser.parse_args(argv)

    raw_url = args.url or settings.effective_database_url
    try:
        if is_sqlite_url(raw_url):
            print("[ensure_db] SQLite database is created on first connection")
        else:
            ensure_database_exists(raw_url)
            if args.drop_tables:
                drop_all_tables(raw_url)
        if args.create_tables:
            from crush_confessions.db.session import create_tables

            create_tables()
            print("[ensure_db] created all tables")
    except (psycopg.Error, ValueError) as exc:
        print(f"[ensure_db] ERROR: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())

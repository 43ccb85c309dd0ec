from sqlmodel import SQLModel, create_engine
import logging
import sqlite3

from hiredready.config import DATABASE_URL, DB_PATH

logger = logging.getLogger(__name__)

connect_args = {"check_same_thread": False} if DATABASE_URL.startswith("sqlite") else {}
engine = create_engine(DATABASE_URL, echo=False, connect_args=connect_args)


def _ensure_columns(conn: sqlite3.Connection, table: str, columns: dict):
    cur = conn.execute(f'PRAGMA table_info("{table}")')
    existing = {row[1] for row in cur.fetchall()}
    for name, ddl in columns.items():
        if name not in existing:
            logger.info("Adding column %s.%s", table, name)
            conn.execute(f'ALTER TABLE "{table}" ADD COLUMN {name} {ddl}')


def migrate_sqlite_if_needed():
    if DATABASE_URL != f"sqlite:///{DB_PATH}":
        return
    conn = sqlite3.connect(DB_PATH)
    try:
        # columns added after the first release
        _ensure_columns(conn, "user", {
            "register_type": "VARCHAR DEFAULT 'normal'",
            "social_id": "VARCHAR",
            "password_reset_token": "VARCHAR",
            "password_reset_expires": "DATETIME",
        })
        _ensure_columns(conn, "submission", {
            "memory_used_mb": "INTEGER DEFAULT 0",
            "ai_feedback": "JSON",
        })
        conn.commit()
    finally:
        conn.close()


def init_db():
    from hiredready import models  # ensure models are imported
    SQLModel.metadata.create_all(engine)
    migrate_sqlite_if_needed()

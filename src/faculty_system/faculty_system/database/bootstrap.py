from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Iterable

import mysql.connector
from werkzeug.security import generate_password_hash

from .connection import DBConfig

logger = logging.getLogger(__name__)

DEMO_PASSWORD = "password123"

DEMO_ACCOUNTS = [
    # (full_name, email, role, student_number)
    ("Admin Demo", "admin@faculty.local", "admin", None),
    ("Dr. Sara Ahmed", "sara.ahmed@faculty.local", "professor", None),
    ("Omar Hassan", "omar.hassan@faculty.local", "student", "S2024001"),
    ("Mona Adel", "mona.adel@faculty.local", "student", "S2024002"),
]


def _strip_create_db_and_use(sql: str) -> str:
    # schema.sql names its own database; the configured one wins.
    sql = re.sub(r"(?im)^\s*CREATE\s+DATABASE\b.*?;\s*$", "", sql)
    sql = re.sub(r"(?im)^\s*USE\b.*?;\s*$", "", sql)
    return sql


def _strip_comments(sql: str) -> str:
    return re.sub(r"(?m)^\s*--.*$", "", sql)


def _iter_sql_statements(sql: str) -> Iterable[str]:
    # Splits on ';' outside quoted strings.
    buf: list[str] = []
    quote: str | None = None
    escape = False

    for ch in sql:
        buf.append(ch)
        if escape:
            escape = False
        elif ch == "\\":
            escape = True
        elif quote:
            if ch == quote:
                quote = None
        elif ch in ("'", '"'):
            quote = ch
        elif ch == ";":
            stmt = "".join(buf[:-1]).strip()
            buf.clear()
            if stmt:
                yield stmt

    tail = "".join(buf).strip()
    if tail:
        yield tail


def _connect(target: DBConfig, *, with_database: bool = True):
    kwargs = dict(host=target.host, port=target.port, user=target.user, password=target.password, use_pure=True)
    if with_database:
        kwargs["database"] = target.database
    return mysql.connector.connect(**kwargs)


def _run_sql_file(db_config: dict, path: str | Path) -> None:
    target = DBConfig.from_dict(db_config)
    sql = _strip_comments(_strip_create_db_and_use(Path(path).read_text(encoding="utf-8")))

    conn = _connect(target)
    try:
        cur = conn.cursor()
        for stmt in _iter_sql_statements(sql):
            cur.execute(stmt)
        conn.commit()
    finally:
        conn.close()


def ensure_database_exists(db_config: dict) -> None:
    target = DBConfig.from_dict(db_config)
    conn = _connect(target, with_database=False)
    try:
        cur = conn.cursor()
        cur.execute(
            f"CREATE DATABASE IF NOT EXISTS `{target.database}` CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci"
        )
        conn.commit()
    finally:
        conn.close()


def apply_schema(db_config: dict, *, schema_path: str | Path) -> None:
    ensure_database_exists(db_config)
    _run_sql_file(db_config, schema_path)
    logger.info("Schema applied from %s", schema_path)


def apply_seed_sql(db_config: dict, *, seed_path: str | Path) -> None:
    _run_sql_file(db_config, seed_path)
    logger.info("Seed data applied from %s", seed_path)


def ensure_demo_users(db_config: dict) -> None:
    """Upsert demo accounts and wire them into the CS101 demo course."""
    target = DBConfig.from_dict(db_config)

    conn = _connect(target)
    try:
        cur = conn.cursor(dictionary=True)
        password_hash = generate_password_hash(DEMO_PASSWORD)

        ids: dict[str, int] = {}
        for full_name, email, role, student_number in DEMO_ACCOUNTS:
            cur.execute(
                """
                INSERT INTO users (full_name, email, password_hash, role, student_number, is_active)
                VALUES (%s, %s, %s, %s, %s, 1)
                ON DUPLICATE KEY UPDATE
                    full_name=VALUES(full_name), password_hash=VALUES(password_hash),
                    role=VALUES(role), is_active=1
                """,
                (full_name, email, password_hash, role, student_number),
            )
            cur.execute("SELECT user_id FROM users WHERE email=%s", (email,))
            ids[email] = int(cur.fetchone()["user_id"])

        cur.execute("SELECT course_id FROM courses WHERE code=%s", ("CS101",))
        row = cur.fetchone()
        if not row:
            raise RuntimeError("Missing courses row for code=CS101 (apply seed.sql first)")
        course_id = int(row["course_id"])

        for full_name, email, role, _ in DEMO_ACCOUNTS:
            if role == "professor":
                cur.execute(
                    "INSERT IGNORE INTO course_professors (course_id, professor_id) VALUES (%s, %s)",
                    (course_id, ids[email]),
                )
            elif role == "student":
                cur.execute(
                    "INSERT IGNORE INTO course_students (course_id, student_id) VALUES (%s, %s)",
                    (course_id, ids[email]),
                )

        conn.commit()
        logger.info("Demo accounts ready (%d users)", len(ids))
    finally:
        conn.close()


def list_tables(db_config: dict) -> list[str]:
    target = DBConfig.from_dict(db_config)
    conn = _connect(target)
    try:
        cur = conn.cursor()
        cur.execute("SHOW TABLES")
        return [row[0] for row in cur.fetchall()]
    finally:
        conn.close()

"""Apply schema/seed SQL files and upsert demo accounts.

Used by ``create_app`` (AUTO_INIT_DB / AUTO_SEED_DB) and by scripts/.
"""
from __future__ import annotations

import logging
import re
from datetime import date, time
from pathlib import Path
from typing import Any, Iterable, Mapping

from werkzeug.security import generate_password_hash

from .connection import DatabaseConnection, DBConfig

logger = logging.getLogger(__name__)

# Shipped inside the package so installed copies can bootstrap too.
SCHEMA_PATH = Path(__file__).with_name("schema.sql")
SEED_PATH = Path(__file__).with_name("seed.sql")

DEMO_ADMIN = ("System Admin", "admin@school.edu", "10000001", "admin123")
DEMO_TEACHERS = (
    ("Sarah Wilson", "sarah@school.edu", "20000001", "Mathematics"),
    ("James Chen", "james@school.edu", "20000002", "Science"),
    ("Emily Rodriguez", "emily@school.edu", "20000003", "History"),
)
DEMO_TEACHER_PASSWORD = "password123"
# (name, teacher email, start, end, first day, last day, enrolled student names)
DEMO_SESSIONS = (
    ("Algebra 101", "sarah@school.edu", time(9, 0), time(10, 30), date(2024, 1, 1), date(2024, 12, 31),
     ("Alex Johnson", "Bella Davis", "Evan Wright")),
    ("Physics Lab", "james@school.edu", time(11, 0), time(12, 30), date(2024, 1, 1), date(2024, 6, 30),
     ("Alex Johnson", "Bella Davis", "Charlie Brown", "Diana Prince")),
    ("World History", "emily@school.edu", time(14, 0), time(15, 0), date(2024, 1, 1), date(2024, 12, 31),
     ("Charlie Brown", "Diana Prince", "Evan Wright")),
)


def _strip_create_db_and_use(sql: str) -> str:
    # Keep schema.sql compatible regardless of DB name.
    sql = re.sub(r"(?im)^\s*CREATE\s+DATABASE\b.*?;\s*$", "", sql)
    sql = re.sub(r"(?im)^\s*USE\b.*?;\s*$", "", sql)
    return sql


def _iter_sql_statements(sql: str) -> Iterable[str]:
    # Minimal SQL splitter for schema/seed files (handles ';' inside quotes, skips -- comments).
    buf: list[str] = []
    in_single = False
    in_double = False
    escape = False

    lines = [ln for ln in sql.splitlines() if not ln.lstrip().startswith("--")]
    for ch in "\n".join(lines):
        if escape:
            buf.append(ch)
            escape = False
            continue

        if ch == "\\":
            buf.append(ch)
            escape = True
            continue

        if ch == "'" and not in_double:
            in_single = not in_single
        elif ch == '"' and not in_single:
            in_double = not in_double
        elif ch == ";" and not in_single and not in_double:
            stmt = "".join(buf).strip()
            buf.clear()
            if stmt:
                yield stmt
            continue

        buf.append(ch)

    tail = "".join(buf).strip()
    if tail:
        yield tail


def _run_sql_file(db_config: Mapping[str, Any], path: str | Path) -> None:
    sql = _strip_create_db_and_use(Path(path).read_text(encoding="utf-8"))
    conn = DatabaseConnection(DBConfig.from_mapping(db_config)).connect()
    try:
        cur = conn.cursor()
        for stmt in _iter_sql_statements(sql):
            cur.execute(stmt)
        conn.commit()
    finally:
        conn.close()


def ensure_database_exists(db_config: Mapping[str, Any]) -> None:
    target = DBConfig.from_mapping(db_config)
    conn = DatabaseConnection(target).connect(with_database=False)
    try:
        cur = conn.cursor()
        cur.execute(
            f"CREATE DATABASE IF NOT EXISTS `{target.database}` CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci"
        )
        conn.commit()
    finally:
        conn.close()


def apply_schema(db_config: Mapping[str, Any], *, schema_path: str | Path = SCHEMA_PATH) -> None:
    ensure_database_exists(db_config)
    _run_sql_file(db_config, schema_path)
    logger.info("applied %s", Path(schema_path).name)


def apply_seed_sql(db_config: Mapping[str, Any], *, seed_path: str | Path = SEED_PATH) -> None:
    _run_sql_file(db_config, seed_path)
    logger.info("applied %s", Path(seed_path).name)


def ensure_demo_data(db_config: Mapping[str, Any]) -> None:
    """Upsert the demo admin, teachers and sessions (passwords need hashing, so not in seed.sql)."""

    conn = DatabaseConnection(DBConfig.from_mapping(db_config)).connect()
    try:
        cur = conn.cursor(dictionary=True)

        def get_id(table: str, id_col: str, col: str, value: str) -> int:
            cur.execute(f"SELECT {id_col} AS id FROM {table} WHERE {col}=%s", (value,))
            row = cur.fetchone()
            if not row:
                raise RuntimeError(f"Missing {table} row for {col}={value}")
            return int(row["id"])

        name, email, mobile, password = DEMO_ADMIN
        cur.execute("SELECT admin_id FROM admins WHERE email=%s", (email,))
        if cur.fetchone():
            cur.execute(
                "UPDATE admins SET name=%s, mobile=%s, password_hash=%s WHERE email=%s",
                (name, mobile, generate_password_hash(password), email),
            )
        else:
            cur.execute(
                "INSERT INTO admins(name, email, mobile, password_hash) VALUES(%s,%s,%s,%s)",
                (name, email, mobile, generate_password_hash(password)),
            )

        teacher_hash = generate_password_hash(DEMO_TEACHER_PASSWORD)
        for name, email, mobile, dept_name in DEMO_TEACHERS:
            dept_id = get_id("departments", "dept_id", "dept_name", dept_name)
            cur.execute("SELECT teacher_id FROM teachers WHERE email=%s", (email,))
            if cur.fetchone():
                cur.execute(
                    "UPDATE teachers SET name=%s, mobile=%s, password_hash=%s, dept_id=%s WHERE email=%s",
                    (name, mobile, teacher_hash, dept_id, email),
                )
            else:
                cur.execute(
                    """
                    INSERT INTO teachers(name, email, mobile, password_hash, dept_id)
                    VALUES(%s,%s,%s,%s,%s)
                    """,
                    (name, email, mobile, teacher_hash, dept_id),
                )

        for name, teacher_email, start_t, end_t, first_day, last_day, student_names in DEMO_SESSIONS:
            teacher_id = get_id("teachers", "teacher_id", "email", teacher_email)
            cur.execute("SELECT session_id FROM sessions WHERE name=%s", (name,))
            if cur.fetchone():
                continue
            cur.execute(
                """
                INSERT INTO sessions(name, teacher_id, start_date, end_date, start_time, end_time)
                VALUES(%s,%s,%s,%s,%s,%s)
                """,
                (name, teacher_id, first_day, last_day, start_t, end_t),
            )
            session_id = int(cur.lastrowid)
            for position, student_name in enumerate(student_names):
                cur.execute(
                    "INSERT INTO session_students(session_id, student_id, position) VALUES(%s,%s,%s)",
                    (session_id, get_id("students", "student_id", "name", student_name), position),
                )

        conn.commit()
    finally:
        conn.close()


def list_tables(db_config: Mapping[str, Any]) -> list[str]:
    conn = DatabaseConnection(DBConfig.from_mapping(db_config)).connect()
    try:
        cur = conn.cursor()
        cur.execute("SHOW TABLES")
        return [row[0] for row in cur.fetchall()]
    finally:
        conn.close()

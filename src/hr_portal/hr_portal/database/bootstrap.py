from __future__ import annotations

import re
from pathlib import Path
from typing import Iterable

from werkzeug.security import generate_password_hash

from .connection import DBConfig, connect


def _strip_create_db_and_use(sql: str) -> str:
    # Keep schema.sql compatible regardless of DB name.
    sql = re.sub(r"(?im)^\s*CREATE\s+DATABASE\b.*?;\s*$", "", sql)
    sql = re.sub(r"(?im)^\s*USE\b.*?;\s*$", "", sql)
    return sql


def iter_sql_statements(sql: str) -> Iterable[str]:
    # Minimal SQL splitter for schema/seed files (handles ';' inside quotes, skips -- comments).
    buf: list[str] = []
    in_single = False
    in_double = False
    escape = False
    in_comment = False
    prev = ""

    for ch in sql:
        if in_comment:
            if ch == "\n":
                in_comment = False
                buf.append(ch)
            continue

        if escape:
            buf.append(ch)
            escape = False
            prev = ch
            continue

        if ch == "\\":
            buf.append(ch)
            escape = True
            continue

        if ch == "-" and prev == "-" and not in_single and not in_double:
            buf.pop()
            in_comment = True
            prev = ""
            continue

        if ch == "'" and not in_double:
            in_single = not in_single
        elif ch == '"' and not in_single:
            in_double = not in_double
        elif ch == ";" and not in_single and not in_double:
            stmt = "".join(buf).strip()
            buf.clear()
            prev = ""
            if stmt:
                yield stmt
            continue

        buf.append(ch)
        prev = ch

    tail = "".join(buf).strip()
    if tail:
        yield tail


def _exec_sql(cur, sql: str) -> None:
    for stmt in iter_sql_statements(sql):
        cur.execute(stmt)


def ensure_database_exists(db_config: dict) -> None:
    config = DBConfig.from_settings(db_config)
    conn = connect(config, with_database=False)
    try:
        cur = conn.cursor()
        cur.execute(
            f"CREATE DATABASE IF NOT EXISTS `{config.database}` CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci;"
        )
        conn.commit()
    finally:
        conn.close()


def apply_schema(db_config: dict, *, schema_path: str | Path) -> None:
    ensure_database_exists(db_config)
    sql = _strip_create_db_and_use(Path(schema_path).read_text(encoding="utf-8"))

    conn = connect(DBConfig.from_settings(db_config))
    try:
        _exec_sql(conn.cursor(), sql)
        conn.commit()
    finally:
        conn.close()


def apply_seed_sql(db_config: dict, *, seed_path: str | Path) -> None:
    sql = _strip_create_db_and_use(Path(seed_path).read_text(encoding="utf-8"))

    conn = connect(DBConfig.from_settings(db_config))
    try:
        _exec_sql(conn.cursor(), sql)
        conn.commit()
    finally:
        conn.close()


def ensure_demo_users(db_config: dict) -> list[tuple[str, str]]:
    """Create or reset the demo accounts; returns their (email, role) pairs."""
    conn = connect(DBConfig.from_settings(db_config))
    try:
        cur = conn.cursor(dictionary=True)

        def dept_id(name: str) -> int:
            cur.execute("SELECT dept_id AS id FROM departments WHERE dept_name=%s", (name,))
            row = cur.fetchone()
            if not row:
                raise RuntimeError(f"Missing departments row for dept_name={name}")
            return int(row["id"])

        def upsert_user(full_name: str, email: str, password: str, role: str, dept: int, designation: str) -> None:
            password_hash = generate_password_hash(password)
            cur.execute("SELECT user_id FROM users WHERE email=%s", (email,))
            if cur.fetchone():
                cur.execute(
                    """
                    UPDATE users
                    SET full_name=%s, password_hash=%s, role=%s, dept_id=%s, designation=%s, is_active=1
                    WHERE email=%s
                    """,
                    (full_name, password_hash, role, dept, designation, email),
                )
            else:
                cur.execute(
                    """
                    INSERT INTO users (full_name, email, password_hash, role, dept_id, designation)
                    VALUES (%s, %s, %s, %s, %s, %s)
                    """,
                    (full_name, email, password_hash, role, dept, designation),
                )

        upsert_user("Admin Demo", "admin@example.com", "admin123", "admin", dept_id("Administration"), "Administrator")
        upsert_user("Staff Demo", "staff@example.com", "staff123", "staff", dept_id("Port Operations"), "Port Officer")
        upsert_user(
            "Head Demo", "hod@example.com", "hod12345", "department_admin", dept_id("Port Operations"), "Head of Operations"
        )

        conn.commit()
        return [
            ("admin@example.com", "admin"),
            ("staff@example.com", "staff"),
            ("hod@example.com", "department_admin"),
        ]
    finally:
        conn.close()


def list_tables(db_config: dict) -> list[str]:
    conn = connect(DBConfig.from_settings(db_config))
    try:
        cur = conn.cursor()
        cur.execute("SHOW TABLES")
        return [row[0] for row in cur.fetchall()]
    finally:
        conn.close()


def has_constraint(db_config: dict, table: str, name: str) -> bool:
    """True when `table` carries the named key/constraint in the configured database."""
    config = DBConfig.from_settings(db_config)
    conn = connect(config)
    try:
        cur = conn.cursor()
        cur.execute(
            """
            SELECT COUNT(*) FROM information_schema.TABLE_CONSTRAINTS
            WHERE TABLE_SCHEMA=%s AND TABLE_NAME=%s AND CONSTRAINT_NAME=%s
            """,
            (config.database, table, name),
        )
        return int(cur.fetchone()[0]) > 0
    finally:
        conn.close()


def count_rows(db_config: dict, table: str) -> int:
    conn = connect(DBConfig.from_settings(db_config))
    try:
        cur = conn.cursor()
        cur.execute(f"SELECT COUNT(*) FROM `{table}`")
        return int(cur.fetchone()[0])
    finally:
        conn.close()

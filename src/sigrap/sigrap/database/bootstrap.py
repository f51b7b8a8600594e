from __future__ import annotations

import re
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator

import mysql.connector

from ..common.logging_utils import get_logger

logger = get_logger("database")


@dataclass(frozen=True)
class DBTarget:
    host: str
    port: int
    user: str
    password: str
    database: str


def _as_target(db_config: dict) -> DBTarget:
    return DBTarget(
        host=str(db_config.get("host", "localhost")),
        port=int(db_config.get("port", 3306)),
        user=str(db_config.get("user", "root")),
        password=str(db_config.get("password", "")),
        database=str(db_config.get("database", "sigrap_db")),
    )


def describe_target(db_config: dict) -> str:
    """Printable ``user@host:port/database`` for DB_CONFIG, without the password."""
    target = _as_target(db_config)
    return f"{target.user}@{target.host}:{target.port}/{target.database}"


def _connect(target: DBTarget, *, with_database: bool = True):
    kwargs = dict(host=target.host, port=target.port, user=target.user, password=target.password, use_pure=True)
    if with_database:
        kwargs["database"] = target.database
    return mysql.connector.connect(**kwargs)


# Script files carry their own CREATE DATABASE/USE for manual runs; the
# target database always comes from DB_CONFIG instead.
_SESSION_LINE = re.compile(r"(?im)^\s*(?:CREATE\s+DATABASE|USE)\b[^;]*;\s*$")
_LINE_COMMENT = re.compile(r"(?m)^\s*--.*$")
_TOKEN = re.compile(r"""'(?:[^'\\]|\\.)*'|"(?:[^"\\]|\\.)*"|;|[^'";]+|.""", re.S)


def prepare_script(sql: str) -> str:
    return _LINE_COMMENT.sub("", _SESSION_LINE.sub("", sql))


def iter_sql_statements(sql: str) -> Iterator[str]:
    """Split a script on top-level ``;``. Quoted literals are kept whole."""
    pending: list[str] = []
    for token in _TOKEN.findall(sql):
        if token != ";":
            pending.append(token)
            continue
        statement = "".join(pending).strip()
        pending = []
        if statement:
            yield statement

    statement = "".join(pending).strip()
    if statement:
        yield statement


@contextmanager
def _session(target: DBTarget, *, with_database: bool = True):
    conn = _connect(target, with_database=with_database)
    try:
        yield conn, conn.cursor()
    finally:
        conn.close()


def _run_script(db_config: dict, path: Path) -> int:
    statements = list(iter_sql_statements(prepare_script(path.read_text(encoding="utf-8"))))
    with _session(_as_target(db_config)) as (conn, cur):
        for statement in statements:
            cur.execute(statement)
        conn.commit()
    return len(statements)


def ensure_database_exists(db_config: dict) -> None:
    target = _as_target(db_config)
    with _session(target, with_database=False) as (conn, cur):
        cur.execute(
            f"CREATE DATABASE IF NOT EXISTS `{target.database}` CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci"
        )
        conn.commit()


def apply_schema(db_config: dict, *, schema_path: str | Path) -> None:
    ensure_database_exists(db_config)
    count = _run_script(db_config, Path(schema_path))
    logger.info("Applied %s (%d statements)", schema_path, count)


def apply_seed_sql(db_config: dict, *, seed_path: str | Path) -> None:
    count = _run_script(db_config, Path(seed_path))
    logger.info("Applied %s (%d statements)", seed_path, count)


def list_tables(db_config: dict) -> list[str]:
    with _session(_as_target(db_config)) as (_, cur):
        cur.execute("SHOW TABLES")
        return [row[0] for row in cur.fetchall()]

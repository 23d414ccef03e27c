from __future__ import annotations

from contextlib import contextmanager
from datetime import date, datetime
from typing import Any, Dict, Iterator, List, Optional, Sequence, Tuple

from .connection import DatabaseConnection


@contextmanager
def db_cursor(
    conn_factory: DatabaseConnection, *, dictionary: bool = True, commit: bool = True
) -> Iterator[Tuple[Any, Any]]:
    """One unit of work on a fresh connection.

    Commits on a clean exit (unless ``commit`` is False), rolls back on any
    error, and always closes the cursor and connection.
    """

    conn = conn_factory.connect()
    cur = None
    try:
        cur = conn.cursor(dictionary=dictionary)
        yield conn, cur
        if commit:
            conn.commit()
    except Exception:
        conn.rollback()
        raise
    finally:
        if cur is not None:
            cur.close()
        conn.close()


def fetchone(cur) -> Optional[Dict[str, Any]]:
    return cur.fetchone() or None


def fetchall(cur) -> List[Dict[str, Any]]:
    return list(cur.fetchall() or ())


def in_clause(values: Sequence[Any]) -> str:
    """Placeholder list for ``IN (...)``; callers must not pass an empty sequence."""

    return ", ".join(["%s"] * len(values))


def normalize_mysql_date(value: Any) -> date:
    """DATE columns arrive as ``date``; DATETIME columns and some drivers give ``datetime`` or text."""

    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        return date.fromisoformat(value.strip()[:10])
    raise TypeError(f"Unsupported MySQL DATE value type: {type(value)!r}")

"""
Store for the ``helprequests`` table.

``HelpRequestStore`` exposes find‑all, find‑by‑id, save and
delete‑by‑id.  Each call opens one connection from the factory it was
constructed with, runs in a single transaction and closes the
connection.  Rows are converted with ``row_to_help_request`` and
``help_request_to_row``.
"""

from __future__ import annotations

import logging
import sqlite3
from contextlib import contextmanager
from datetime import datetime
from typing import Callable, Iterator, List, Optional, Tuple

from helprequest_api.app.schemas.helprequest import HelpRequestBase, HelpRequestRead

logger = logging.getLogger(__name__)

ConnectionFactory = Callable[[], sqlite3.Connection]

COLUMNS = (
    "requester_email",
    "team_id",
    "table_or_breakout_room",
    "request_time",
    "explanation",
    "solved",
)


def help_request_to_row(data: HelpRequestBase) -> Tuple:
    """Return the column values for ``data`` in ``COLUMNS`` order."""
    return (
        data.requester_email,
        data.team_id,
        data.table_or_breakout_room,
        data.request_time.isoformat(),
        data.explanation,
        1 if data.solved else 0,
    )


def row_to_help_request(row: sqlite3.Row) -> HelpRequestRead:
    return HelpRequestRead(
        id=row["id"],
        requester_email=row["requester_email"],
        team_id=row["team_id"],
        table_or_breakout_room=row["table_or_breakout_room"],
        request_time=datetime.fromisoformat(row["request_time"]),
        explanation=row["explanation"],
        solved=bool(row["solved"]),
    )


class HelpRequestStore:
    """Find/save/delete by id over the ``helprequests`` table."""

    def __init__(self, connect: ConnectionFactory):
        self._connect = connect

    @contextmanager
    def _transaction(self) -> Iterator[sqlite3.Cursor]:
        conn = self._connect()
        try:
            yield conn.cursor()
            conn.commit()
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()

    def find_all(self) -> List[HelpRequestRead]:
        """Return every help request in insertion (id) order."""
        with self._transaction() as cursor:
            rows = cursor.execute("SELECT * FROM helprequests ORDER BY id ASC").fetchall()
            return [row_to_help_request(row) for row in rows]

    def find_by_id(self, help_request_id: int) -> Optional[HelpRequestRead]:
        with self._transaction() as cursor:
            row = cursor.execute(
                "SELECT * FROM helprequests WHERE id = ?",
                (help_request_id,),
            ).fetchone()
            return row_to_help_request(row) if row else None

    def save(
        self,
        data: HelpRequestBase,
        help_request_id: Optional[int] = None,
    ) -> Optional[HelpRequestRead]:
        """Insert ``data`` or overwrite the row with ``help_request_id``.

        Without an id a new row is inserted and the store assigns its
        id.  With an id every mutable column is replaced; ``None`` is
        returned if no such row exists.
        """
        values = help_request_to_row(data)
        with self._transaction() as cursor:
            if help_request_id is None:
                cursor.execute(
                    f"INSERT INTO helprequests ({', '.join(COLUMNS)}) "
                    f"VALUES ({', '.join('?' for _ in COLUMNS)})",
                    values,
                )
                help_request_id = cursor.lastrowid
                logger.debug("Inserted helprequests row %s", help_request_id)
            else:
                cursor.execute(
                    f"UPDATE helprequests SET {', '.join(f'{column} = ?' for column in COLUMNS)} "
                    "WHERE id = ?",
                    values + (help_request_id,),
                )
                if cursor.rowcount == 0:
                    return None
                logger.debug("Updated helprequests row %s", help_request_id)
            row = cursor.execute(
                "SELECT * FROM helprequests WHERE id = ?",
                (help_request_id,),
            ).fetchone()
            return row_to_help_request(row)

    def delete_by_id(self, help_request_id: int) -> bool:
        """Delete the row with ``help_request_id``; ``False`` if it did not exist."""
        with self._transaction() as cursor:
            cursor.execute("DELETE FROM helprequests WHERE id = ?", (help_request_id,))
            return cursor.rowcount > 0

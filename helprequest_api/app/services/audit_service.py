"""
Audit service for recording and querying changes to help requests.

Every create, update and delete performed through the API writes one
row to ``audit_logs`` naming the acting user, the action and the
affected object.  Only super administrators may read the log.
"""

from __future__ import annotations

import json
import logging
import sqlite3
from typing import Any, Callable, Dict, List, Optional

logger = logging.getLogger(__name__)


class AuditService:
    """Writes and reads ``audit_logs`` rows."""

    def __init__(self, connect: Callable[[], sqlite3.Connection]):
        self._connect = connect

    async def log(
        self,
        user_id: Optional[int],
        action: str,
        object_type: str,
        object_id: Optional[int] = None,
        details: Optional[dict] = None,
    ) -> None:
        """Insert an audit record.

        Parameters
        ----------
        user_id : Optional[int]
            ID of the acting user; ``None`` for bots and system actions.
        action : str
            ``"create"``, ``"update"`` or ``"delete"``.
        object_type : str
            Type of object affected, e.g. ``"helprequest"``.
        object_id : Optional[int]
            Primary key of the affected object.
        details : Optional[dict]
            Extra data stored as JSON text.
        """
        conn = self._connect()
        try:
            conn.execute(
                """
                INSERT INTO audit_logs (user_id, action, object_type, object_id, details)
                VALUES (?, ?, ?, ?, ?)
                """,
                (user_id, action, object_type, object_id, json.dumps(details, default=str) if details else None),
            )
            conn.commit()
        finally:
            conn.close()

    async def record(self, user_id: Optional[int], action: str, object_type: str, object_id: Optional[int], details: Optional[dict] = None) -> None:
        """Like ``log`` but never raises; failures are logged instead.

        Used after a change has been committed so that a broken audit
        table cannot turn a successful request into an error.
        """
        try:
            await self.log(user_id, action, object_type, object_id, details)
        except sqlite3.Error:
            logger.exception("Failed to write audit record for %s %s %s", action, object_type, object_id)

    async def list_logs(
        self,
        object_type: Optional[str] = None,
        action: Optional[str] = None,
        limit: int = 100,
        offset: int = 0,
    ) -> List[Dict[str, Any]]:
        """Return audit records, newest first, with optional filters."""
        where_clauses: List[str] = []
        params: List[Any] = []
        if object_type:
            where_clauses.append("object_type = ?")
            params.append(object_type)
        if action:
            where_clauses.append("action = ?")
            params.append(action)
        query = "SELECT id, user_id, action, object_type, object_id, timestamp, details FROM audit_logs"
        if where_clauses:
            query += " WHERE " + " AND ".join(where_clauses)
        query += " ORDER BY timestamp DESC, id DESC LIMIT ? OFFSET ?"
        params.extend([limit, offset])

        conn = self._connect()
        try:
            rows = conn.execute(query, tuple(params)).fetchall()
        finally:
            conn.close()

        logs = []
        for row in rows:
            details_data = None
            if row["details"]:
                try:
                    details_data = json.loads(row["details"])
                except json.JSONDecodeError:
                    details_data = row["details"]
            logs.append(
                {
                    "id": row["id"],
                    "user_id": row["user_id"],
                    "action": row["action"],
                    "object_type": row["object_type"],
                    "object_id": row["object_id"],
                    "timestamp": row["timestamp"],
                    "details": details_data,
                }
            )
        return logs

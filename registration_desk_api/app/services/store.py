"""
Access to the external registration store.

``RegistrationStore`` is the contract the core relies on: one read
returning joined registration/event/profile rows, optionally narrowed
server‑side by payment mode and status, and one write that sets a
single registration's status.  ``SQLiteRegistrationStore`` implements
it on the SQLite database configured in ``core.config``.

Blocking SQLite calls run in a worker thread so the event loop stays
free while a status write is in flight.  Each call opens and closes
its own connection.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Dict, List, Optional, Protocol

from registration_desk_api.app.core.db import get_connection

logger = logging.getLogger(__name__)


class RegistrationStore(Protocol):
    async def fetch_registrations(
        self, payment_mode: Optional[str] = None, status: Optional[str] = None
    ) -> List[Dict[str, Any]]:
        ...

    async def update_status(self, registration_id: str, status: str) -> None:
        ...


_SELECT_REGISTRATIONS = """
    SELECT
        r.id, r.status, r.payment_mode, r.transaction_id, r.registered_at,
        r.profile_id, r.event_id, r.team_members,
        e.id AS e_id, e.name AS e_name, e.category AS e_category,
        e.subcategory AS e_subcategory, e.fee AS e_fee,
        p.id AS p_id, p.full_name AS p_full_name, p.college_email AS p_college_email,
        p.phone AS p_phone, p.roll_number AS p_roll_number, p.gender AS p_gender,
        p.school AS p_school, p.department AS p_department, p.program AS p_program,
        p.year_of_study AS p_year_of_study
    FROM registrations r
    LEFT JOIN events e ON e.id = r.event_id
    LEFT JOIN profiles p ON p.id = r.profile_id
"""


def _nested(row: Any, prefix: str) -> Optional[Dict[str, Any]]:
    """Collect ``<prefix>_*`` columns into a dict, or None if the join missed."""
    if row[f"{prefix}_id"] is None:
        return None
    start = len(prefix) + 1
    return {key[start:]: row[key] for key in row.keys() if key.startswith(f"{prefix}_")}


class SQLiteRegistrationStore:
    """Registration store backed by the configured SQLite database."""

    def __init__(self, database_url: Optional[str] = None) -> None:
        self.database_url = database_url

    def _fetch(self, payment_mode: Optional[str], status: Optional[str]) -> List[Dict[str, Any]]:
        query = _SELECT_REGISTRATIONS
        where_clauses: List[str] = []
        params: List[Any] = []
        if payment_mode:
            where_clauses.append("r.payment_mode = ?")
            params.append(payment_mode)
        if status:
            where_clauses.append("r.status = ?")
            params.append(status)
        if where_clauses:
            query += " WHERE " + " AND ".join(where_clauses)
        query += " ORDER BY r.registered_at DESC"

        conn = get_connection(self.database_url)
        try:
            rows = conn.execute(query, tuple(params)).fetchall()
        finally:
            conn.close()

        return [
            {
                "id": row["id"],
                "status": row["status"],
                "payment_mode": row["payment_mode"],
                "transaction_id": row["transaction_id"],
                "registered_at": row["registered_at"],
                "profile_id": row["profile_id"],
                "event_id": row["event_id"],
                "team_members": row["team_members"],
                "event": _nested(row, "e"),
                "profile": _nested(row, "p"),
            }
            for row in rows
        ]

    def _update_status(self, registration_id: str, status: str) -> None:
        conn = get_connection(self.database_url)
        try:
            cursor = conn.execute(
                "UPDATE registrations SET status = ? WHERE id = ?",
                (status, registration_id),
            )
            if cursor.rowcount == 0:
                raise LookupError(f"Registration {registration_id} does not exist in the store")
            conn.commit()
        finally:
            conn.close()

    async def fetch_registrations(
        self, payment_mode: Optional[str] = None, status: Optional[str] = None
    ) -> List[Dict[str, Any]]:
        rows = await asyncio.to_thread(self._fetch, payment_mode, status)
        logger.debug("Fetched %d registration rows (payment_mode=%s, status=%s)", len(rows), payment_mode, status)
        return rows

    async def update_status(self, registration_id: str, status: str) -> None:
        await asyncio.to_thread(self._update_status, registration_id, status)

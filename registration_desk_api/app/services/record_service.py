"""
Normalization of joined store rows into ``Registration`` records.

``normalize_rows`` is a pure transform: it accepts whatever the store
adapter produced (one mapping per registration with nested ``event``
and ``profile`` mappings) and returns validated, frozen records.  A
registration whose event or participant did not resolve is kept with a
placeholder in place of the missing side.  Dropping it would silently
change revenue totals.

``RegistrationCatalog`` holds the current snapshot of normalized
records.  Readers always get an immutable tuple; status changes swap in
a new tuple rather than mutating the old one.
"""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple

from pydantic import ValidationError

from registration_desk_api.app.core.exceptions import FetchError, RegistrationNotFoundError
from registration_desk_api.app.schemas.event import UNKNOWN_LABEL, Event
from registration_desk_api.app.schemas.participant import Participant, TeamMember
from registration_desk_api.app.schemas.registration import (
    PaymentMode,
    Registration,
    RegistrationStatus,
)

logger = logging.getLogger(__name__)

_PROFILE_FIELDS = (
    "full_name",
    "roll_number",
    "college_email",
    "phone",
    "school",
    "department",
    "program",
    "year_of_study",
    "gender",
)


def _as_id(value: Any) -> str:
    return "" if value is None else str(value)


def _as_text(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value)
    return text if text != "" else None


def parse_timestamp(value: Any) -> Optional[datetime]:
    """Parse an ISO 8601 timestamp as stored by the registration workflow.

    Accepts ``datetime`` objects unchanged and a trailing ``Z``.  Returns
    ``None`` for missing or unparseable values.
    """
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value
    text = str(value).strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        return datetime.fromisoformat(text)
    except ValueError:
        logger.warning("Unparseable registration timestamp %r", value)
        return None


def parse_payment_mode(value: Any) -> Optional[PaymentMode]:
    text = _as_text(value)
    if text is None:
        return None
    try:
        return PaymentMode(text.lower())
    except ValueError:
        return PaymentMode.OTHER


def parse_status(value: Any, registration_id: str = "") -> RegistrationStatus:
    text = _as_text(value)
    if text is None:
        return RegistrationStatus.PENDING
    try:
        return RegistrationStatus(text.lower())
    except ValueError:
        logger.warning(
            "Registration %s has unrecognised status %r; treating as pending", registration_id, value
        )
        return RegistrationStatus.PENDING


def parse_team_members(value: Any, registration_id: str = "") -> Tuple[TeamMember, ...]:
    """Normalize the stored team member list.

    The store keeps the list as JSON text (SQLite) or as a native list;
    items are either bare participant ids or objects carrying an ``id``.
    """
    if value is None or value == "":
        return ()
    if isinstance(value, (str, bytes)):
        try:
            value = json.loads(value)
        except (TypeError, ValueError):
            logger.warning("Registration %s has undecodable team_members %r", registration_id, value)
            return ()
    if not isinstance(value, (list, tuple)):
        logger.warning("Registration %s has non-list team_members %r", registration_id, value)
        return ()

    members: List[TeamMember] = []
    for item in value:
        if isinstance(item, Mapping):
            member_id = _as_text(item.get("id"))
            if member_id is None:
                continue
            members.append(
                TeamMember(
                    id=member_id,
                    full_name=_as_text(item.get("full_name")),
                    roll_number=_as_text(item.get("roll_number")),
                )
            )
        elif item is not None and item != "":
            members.append(TeamMember(id=str(item)))
    return tuple(members)


def _parse_fee(value: Any, event_id: str) -> int:
    if value is None or value == "":
        return 0
    try:
        fee = int(float(value))
    except (TypeError, ValueError):
        logger.warning("Event %s has non-numeric fee %r; using 0", event_id, value)
        return 0
    if fee < 0:
        logger.warning("Event %s has negative fee %r; using 0", event_id, value)
        return 0
    return fee


def _build_event(raw: Optional[Mapping[str, Any]], event_id: str) -> Event:
    if not raw or raw.get("id") is None:
        return Event.placeholder(event_id)
    try:
        return Event(
            id=_as_id(raw.get("id")),
            name=_as_text(raw.get("name")) or Event.placeholder(event_id).name,
            category=_as_text(raw.get("category")) or UNKNOWN_LABEL,
            subcategory=_as_text(raw.get("subcategory")) or UNKNOWN_LABEL,
            fee=_parse_fee(raw.get("fee"), event_id),
        )
    except ValidationError:
        logger.warning("Event %s failed validation; using placeholder", event_id)
        return Event.placeholder(event_id)


def _build_profile(raw: Optional[Mapping[str, Any]], profile_id: str) -> Participant:
    if not raw or raw.get("id") is None:
        return Participant.placeholder(profile_id)
    fields = {name: _as_text(raw.get(name)) for name in _PROFILE_FIELDS}
    fields["full_name"] = fields["full_name"] or Participant.placeholder(profile_id).full_name
    return Participant(id=_as_id(raw.get("id")), **fields)


def normalize_row(row: Mapping[str, Any]) -> Registration:
    """Turn one joined store row into a ``Registration``."""
    registration_id = _as_id(row.get("id"))
    raw_event = row.get("event")
    raw_profile = row.get("profile")
    event_id = _as_id(row.get("event_id") if row.get("event_id") is not None else (raw_event or {}).get("id"))
    profile_id = _as_id(
        row.get("profile_id") if row.get("profile_id") is not None else (raw_profile or {}).get("id")
    )

    if not raw_event or raw_event.get("id") is None:
        logger.warning("Registration %s references unresolved event %s", registration_id, event_id)
    if not raw_profile or raw_profile.get("id") is None:
        logger.warning("Registration %s references unresolved profile %s", registration_id, profile_id)
    event = _build_event(raw_event, event_id)
    profile = _build_profile(raw_profile, profile_id)

    return Registration(
        id=registration_id,
        event_id=event_id,
        profile_id=profile_id,
        event=event,
        profile=profile,
        payment_mode=parse_payment_mode(row.get("payment_mode")),
        status=parse_status(row.get("status"), registration_id),
        transaction_id=_as_text(row.get("transaction_id")),
        team_members=parse_team_members(row.get("team_members"), registration_id),
        registered_at=parse_timestamp(row.get("registered_at")),
    )


def normalize_rows(rows: Iterable[Mapping[str, Any]]) -> List[Registration]:
    """Normalize a batch of joined rows, preserving their order."""
    return [normalize_row(row) for row in rows]


class RegistrationCatalog:
    """In‑memory snapshot of the normalized registrations.

    The snapshot is a tuple and is replaced wholesale on refresh or
    status change, so a caller holding a snapshot keeps a consistent
    view while filtering or exporting.
    """

    def __init__(self, registrations: Iterable[Registration] = ()) -> None:
        self._records: Tuple[Registration, ...] = tuple(registrations)
        self._loaded_at: Optional[datetime] = None

    @property
    def loaded_at(self) -> Optional[datetime]:
        return self._loaded_at

    def __len__(self) -> int:
        return len(self._records)

    def snapshot(self) -> Tuple[Registration, ...]:
        return self._records

    def load(self, rows: Iterable[Mapping[str, Any]]) -> Tuple[Registration, ...]:
        """Replace the snapshot with freshly normalized rows."""
        self._records = tuple(normalize_rows(rows))
        self._loaded_at = datetime.now(timezone.utc)
        logger.info("Loaded %d registrations", len(self._records))
        return self._records

    async def refresh(
        self,
        store: Any,
        payment_mode: Optional[str] = None,
        status: Optional[str] = None,
    ) -> Tuple[Registration, ...]:
        """Reload the snapshot from ``store``.

        Raises ``FetchError`` when the read fails; the previous snapshot
        is kept in that case so nothing partial is ever served.
        """
        try:
            rows = await store.fetch_registrations(payment_mode=payment_mode, status=status)
        except FetchError:
            raise
        except Exception as exc:
            logger.error("Failed to fetch registrations: %s", exc)
            raise FetchError(f"Failed to load registrations: {exc}") from exc
        return self.load(rows)

    def get(self, registration_id: str) -> Registration:
        for record in self._records:
            if record.id == registration_id:
                return record
        raise RegistrationNotFoundError(registration_id)

    def replace_status(self, registration_id: str, status: RegistrationStatus) -> Registration:
        """Swap in a copy of one registration with a new status."""
        updated: Optional[Registration] = None
        records: List[Registration] = []
        for record in self._records:
            if record.id == registration_id:
                updated = record.model_copy(update={"status": status})
                records.append(updated)
            else:
                records.append(record)
        if updated is None:
            raise RegistrationNotFoundError(registration_id)
        self._records = tuple(records)
        return updated

    def events(self) -> List[Event]:
        """Distinct events referenced by the snapshot, in first‑seen order."""
        seen: Dict[str, Event] = {}
        for record in self._records:
            seen.setdefault(record.event.id, record.event)
        return list(seen.values())

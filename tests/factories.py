"""
Builders and fakes shared by the test modules.

``SAMPLE_ROWS`` mimics what the store returns for a small festival:

* Hackathon (Technical/Group, fee 100): team of three, leader R1 with
  member rows R2 and R3, all cash and confirmed.
* Solo Singing (Cultural/Individual, fee 30): R4 online pending, R5 and
  R8 cash confirmed.
* Relay (Sports/Group, fee 60): team of two, leader R6 and member R7,
  online and rejected.

Confirmed cash revenue is therefore 100 + 30 + 30 = 160.
"""

import asyncio
import copy
from typing import Any, Dict, Iterable, List, Optional

from registration_desk_api.app.schemas.event import Event
from registration_desk_api.app.schemas.participant import Participant, TeamMember
from registration_desk_api.app.schemas.registration import (
    PaymentMode,
    Registration,
    RegistrationStatus,
)
from registration_desk_api.app.services.record_service import normalize_rows

EVENTS: Dict[str, Dict[str, Any]] = {
    "E1": {"id": "E1", "name": "Hackathon", "category": "Technical", "subcategory": "Group", "fee": 100},
    "E2": {"id": "E2", "name": "Solo Singing", "category": "Cultural", "subcategory": "Individual", "fee": 30},
    "E3": {"id": "E3", "name": "Relay", "category": "Sports", "subcategory": "Group", "fee": 60},
}

PROFILES: Dict[str, Dict[str, Any]] = {
    "P1": {
        "id": "P1", "full_name": "Asha Patil", "roll_number": "22CO041", "college_email": "asha@college.edu",
        "phone": "9876500001", "school": "SOET", "department": "CO", "program": "Diploma Engineering",
        "year_of_study": "Year 2", "gender": "Female",
    },
    "P2": {
        "id": "P2", "full_name": "Rohan Mehta", "roll_number": "22CO052", "college_email": "rohan@college.edu",
        "phone": "9876500002", "school": "SOET", "department": "CO", "program": "Diploma Engineering",
        "year_of_study": "Year 2", "gender": "Male",
    },
    "P3": {
        "id": "P3", "full_name": "Imran Shaikh", "roll_number": "21ME007", "college_email": "imran@college.edu",
        "phone": "9876500003", "school": "SOET", "department": "ME", "program": "Diploma Engineering",
        "year_of_study": "Year 3", "gender": "Male",
    },
    "P4": {
        "id": "P4", "full_name": "Neha Kulkarni", "roll_number": "23PH014", "college_email": "neha@college.edu",
        "phone": "9876500004", "school": "SOP", "department": "Degree Pharmacy", "program": "Pharmacy",
        "year_of_study": "Year 1", "gender": "Female",
    },
    "P5": {
        "id": "P5", "full_name": "Kabir Singh", "roll_number": "22AR003", "college_email": "kabir@college.edu",
        "phone": "9876500005", "school": "SOA", "department": "Degree Architecture", "program": "Architecture",
        "year_of_study": "Year 4", "gender": "Male",
    },
    "P6": {
        "id": "P6", "full_name": "Meera Joshi", "roll_number": "22AR019", "college_email": "meera@college.edu",
        "phone": "9876500006", "school": "SOA", "department": "Degree Architecture", "program": "Architecture",
        "year_of_study": "Year 4", "gender": "female",
    },
}


def raw_row(
    reg_id: str,
    event_id: str,
    profile_id: str,
    payment_mode: Optional[str] = "cash",
    status: Optional[str] = "confirmed",
    team: Iterable[str] = (),
    transaction_id: Optional[str] = None,
    registered_at: Optional[str] = "2025-01-14T10:30:00Z",
) -> Dict[str, Any]:
    """A joined row as the store adapter returns it."""
    return {
        "id": reg_id,
        "status": status,
        "payment_mode": payment_mode,
        "transaction_id": transaction_id,
        "registered_at": registered_at,
        "profile_id": profile_id,
        "event_id": event_id,
        "team_members": [
            {"id": member, "full_name": PROFILES.get(member, {}).get("full_name")} for member in team
        ],
        "event": copy.deepcopy(EVENTS.get(event_id)),
        "profile": copy.deepcopy(PROFILES.get(profile_id)),
    }


SAMPLE_ROWS: List[Dict[str, Any]] = [
    raw_row("R1", "E1", "P1", team=["P2", "P3"], registered_at="2025-01-14T09:00:00Z"),
    raw_row("R2", "E1", "P2", registered_at="2025-01-14T09:01:00Z"),
    raw_row("R3", "E1", "P3", registered_at="2025-01-14T09:02:00Z"),
    raw_row("R4", "E2", "P4", payment_mode="online", status="pending", transaction_id="UPI-778899"),
    raw_row("R5", "E2", "P1", transaction_id="CASH-0005"),
    raw_row("R6", "E3", "P5", payment_mode="online", status="rejected", team=["P6"], transaction_id="UPI-123456"),
    raw_row("R7", "E3", "P6", payment_mode="online", status="rejected"),
    raw_row("R8", "E2", "P6", transaction_id="CASH-0008"),
]


def sample_rows() -> List[Dict[str, Any]]:
    return copy.deepcopy(SAMPLE_ROWS)


def sample_records() -> List[Registration]:
    return normalize_rows(sample_rows())


def make_event(event_id: str = "E", fee: int = 100, **fields: Any) -> Event:
    values = {"name": f"Event {event_id}", "category": "Technical", "subcategory": "Group"}
    values.update(fields)
    return Event(id=event_id, fee=fee, **values)


def make_registration(
    reg_id: str,
    profile_id: str,
    event: Optional[Event] = None,
    team: Iterable[str] = (),
    status: RegistrationStatus = RegistrationStatus.CONFIRMED,
    payment_mode: Optional[PaymentMode] = PaymentMode.CASH,
    **fields: Any,
) -> Registration:
    event = event or make_event()
    return Registration(
        id=reg_id,
        event_id=event.id,
        profile_id=profile_id,
        event=event,
        profile=Participant(id=profile_id, full_name=f"Participant {profile_id}"),
        payment_mode=payment_mode,
        status=status,
        team_members=tuple(TeamMember(id=member) for member in team),
        **fields,
    )


class FakeStore:
    """In‑memory store.

    Set ``fail_fetch``/``fail_update`` to make calls raise.  When
    ``gate`` is an ``asyncio.Event``, ``update_status`` waits for it so
    a test can observe a write while it is in flight.
    """

    def __init__(self, rows: Optional[List[Dict[str, Any]]] = None) -> None:
        self.rows = rows if rows is not None else sample_rows()
        self.fail_fetch = False
        self.fail_update = False
        self.gate: Optional[asyncio.Event] = None
        self.updates: List[tuple] = []
        self.fetches: List[tuple] = []

    async def fetch_registrations(self, payment_mode=None, status=None):
        self.fetches.append((payment_mode, status))
        if self.fail_fetch:
            raise ConnectionError("store unreachable")
        return [
            copy.deepcopy(row)
            for row in self.rows
            if (payment_mode is None or row["payment_mode"] == payment_mode)
            and (status is None or row["status"] == status)
        ]

    async def update_status(self, registration_id, status):
        if self.gate is not None:
            await self.gate.wait()
        if self.fail_update:
            raise ConnectionError("write rejected")
        self.updates.append((registration_id, status))
        for row in self.rows:
            if row["id"] == registration_id:
                row["status"] = status

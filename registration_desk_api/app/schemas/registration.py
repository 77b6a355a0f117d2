"""
Pydantic models for registrations.

A ``Registration`` is one row of the registrations table with its
event and registering participant resolved.  Team registrations are
stored as one row per team member; see ``services/revenue_service.py``
for how those rows are told apart.
"""

from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field

from .event import Event
from .participant import Participant, TeamMember


class RegistrationStatus(str, Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    REJECTED = "rejected"


class PaymentMode(str, Enum):
    CASH = "cash"
    ONLINE = "online"
    OTHER = "other"


class Registration(BaseModel):
    id: str = Field(..., examples=["c0ffee"])
    event_id: str
    profile_id: str
    event: Event
    profile: Participant
    payment_mode: Optional[PaymentMode] = Field(None, examples=["cash"])
    status: RegistrationStatus = Field(RegistrationStatus.PENDING, examples=["pending"])
    transaction_id: Optional[str] = Field(None, examples=["UPI-20250114-0042"])
    # Non-empty only on a team leader's row, in the order the leader
    # entered the members.
    team_members: tuple[TeamMember, ...] = ()
    registered_at: Optional[datetime] = None

    model_config = {
        "frozen": True,
        "from_attributes": True,
    }

    @property
    def team_member_ids(self) -> tuple[str, ...]:
        return tuple(member.id for member in self.team_members)


class RegistrationRead(Registration):
    """Registration as returned by the API, with the operator actions it allows."""

    allowed_statuses: List[RegistrationStatus] = Field(default_factory=list)


class StatusChangeRequest(BaseModel):
    """Body of ``POST /registrations/{id}/status``.

    ``confirm`` records that the operator explicitly confirmed the
    change; requests without it are refused.
    """

    status: RegistrationStatus = Field(..., examples=["confirmed"])
    confirm: bool = Field(False, description="Operator confirmed the status change")

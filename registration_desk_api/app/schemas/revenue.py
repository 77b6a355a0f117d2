"""
Pydantic models for revenue reconciliation results.
"""

from enum import Enum
from typing import Dict, List

from pydantic import BaseModel, Field

from .registration import Registration


class RegistrationRole(str, Enum):
    LEADER = "leader"
    MEMBER = "member"
    INDIVIDUAL = "individual"


class ReconciledRegistration(BaseModel):
    registration: Registration
    role: RegistrationRole
    team_size: int = Field(1, ge=1)

    model_config = {
        "frozen": True,
    }

    @property
    def should_count(self) -> bool:
        return self.role is not RegistrationRole.MEMBER


class EventRevenue(BaseModel):
    event_id: str
    event_name: str
    amount: int


class RevenueSummary(BaseModel):
    total_revenue: int = 0
    # Keyed by payment mode value; rows without a mode are reported
    # under "hybrid".
    by_payment_mode: Dict[str, int] = Field(default_factory=dict)
    # Highest amount first.
    by_event: List[EventRevenue] = Field(default_factory=list)
    registrations: int = 0
    leaders: int = 0
    members: int = 0
    individuals: int = 0
    counted: int = 0

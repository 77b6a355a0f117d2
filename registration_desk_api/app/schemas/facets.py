"""
Pydantic models describing filter input and the values offered for it.

``RegistrationFacets`` is the set of named constraints an operator can
combine; an unset facet never excludes a record.  ``FacetOptions`` and
``TabCounts`` are derived from the loaded records for the filter bar.
"""

from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from .event import Event
from .registration import PaymentMode


class StatusTab(str, Enum):
    ALL = "all"
    PENDING = "pending"
    CONFIRMED = "confirmed"
    REJECTED = "rejected"


class RegistrationFacets(BaseModel):
    category: Optional[str] = Field(None, examples=["Technical"])
    subcategory: Optional[str] = Field(None, examples=["Group"])
    event_id: Optional[str] = None
    school: Optional[str] = Field(None, examples=["SOET"])
    department: Optional[str] = Field(None, examples=["CO"])
    program: Optional[str] = None
    year_of_study: Optional[str] = Field(None, examples=["Year 1"])
    gender: Optional[str] = Field(None, examples=["Male"])
    payment_mode: Optional[PaymentMode] = None

    model_config = {
        "frozen": True,
    }

    def active(self) -> Dict[str, object]:
        """Return only the facets that constrain the result."""
        return {name: value for name, value in self.model_dump().items() if value not in (None, "")}


class FacetOptions(BaseModel):
    categories: List[str]
    subcategories: List[str]
    events: List[Event]
    schools: List[str]
    departments: List[str]
    programs: List[str]
    years_of_study: List[str]
    genders: List[str]
    payment_modes: List[PaymentMode]


class TabCounts(BaseModel):
    all: int = 0
    pending: int = 0
    confirmed: int = 0
    rejected: int = 0

"""
Pydantic models for event data.

Events are owned by the external store and never modified here.  The
category set is open in storage, but the operator UI offers the three
values in ``EVENT_CATEGORIES``; ``EVENT_SUBCATEGORIES`` is closed.
"""

from pydantic import BaseModel, Field

EVENT_CATEGORIES = ("Cultural", "Sports", "Technical")
EVENT_SUBCATEGORIES = ("Individual", "Group")

UNKNOWN_EVENT_NAME = "Unknown Event"
UNKNOWN_LABEL = "Unknown"


class Event(BaseModel):
    id: str = Field(..., examples=["6f1c2a"])
    name: str = Field(..., examples=["Hackathon"])
    category: str = Field(UNKNOWN_LABEL, examples=["Technical"])
    subcategory: str = Field(UNKNOWN_LABEL, examples=["Group"])
    # Whole currency units per billable registration (per team for
    # Group events).
    fee: int = Field(0, ge=0, examples=[100])

    model_config = {
        "frozen": True,
        "from_attributes": True,
    }

    @classmethod
    def placeholder(cls, event_id: str) -> "Event":
        """Stand‑in for an event the store could not resolve."""
        return cls(
            id=event_id,
            name=UNKNOWN_EVENT_NAME,
            category=UNKNOWN_LABEL,
            subcategory=UNKNOWN_LABEL,
            fee=0,
        )

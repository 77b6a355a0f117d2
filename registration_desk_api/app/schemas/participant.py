"""
Pydantic models for participants (profiles) and team member references.

Demographic attributes are only used as filter facets and export
columns, so every one of them is optional.
"""

from typing import Optional

from pydantic import BaseModel, Field

UNKNOWN_PARTICIPANT_NAME = "Unknown"


class Participant(BaseModel):
    id: str = Field(..., examples=["b81e0d"])
    full_name: str = Field(UNKNOWN_PARTICIPANT_NAME, examples=["Asha Patil"])
    roll_number: Optional[str] = Field(None, examples=["22CO041"])
    college_email: Optional[str] = Field(None, examples=["asha.patil@college.edu"])
    phone: Optional[str] = Field(None, examples=["9876543210"])
    school: Optional[str] = Field(None, examples=["SOET"])
    department: Optional[str] = Field(None, examples=["CO"])
    program: Optional[str] = Field(None, examples=["Diploma Engineering"])
    year_of_study: Optional[str] = Field(None, examples=["Year 2"])
    gender: Optional[str] = Field(None, examples=["Female"])

    model_config = {
        "frozen": True,
        "from_attributes": True,
    }

    @classmethod
    def placeholder(cls, profile_id: str) -> "Participant":
        """Stand‑in for a profile the store could not resolve."""
        return cls(id=profile_id, full_name=UNKNOWN_PARTICIPANT_NAME)


class TeamMember(BaseModel):
    """Reference from a team leader's registration to another participant.

    Only ``id`` takes part in reconciliation.  Name and roll number are
    kept when the store denormalised them onto the leader row.
    """

    id: str
    full_name: Optional[str] = None
    roll_number: Optional[str] = None

    model_config = {
        "frozen": True,
    }

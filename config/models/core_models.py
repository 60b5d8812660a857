"""Data models for the CV Portal."""

from datetime import date, datetime
from enum import Enum
from typing import Dict, List, Optional, Any
from pydantic import BaseModel, Field, field_validator

from .attachment_models import CVAttachment


# ----------------------------------------------------------------------
# ENUMERATIONS
# ----------------------------------------------------------------------

class SubmissionStatus(str, Enum):
    """Review status of a stored CV."""
    PENDING = "pending"
    REVIEWING = "reviewing"
    ACCEPTED = "accepted"
    REJECTED = "rejected"


class SubmissionOutcome(str, Enum):
    """Result of a submit attempt as shown to the applicant."""
    SUBMITTED = "submitted"
    DUPLICATE = "duplicate"
    FAILED = "failed"


# ----------------------------------------------------------------------
# INTAKE MODELS
# ----------------------------------------------------------------------

class SubmissionInput(BaseModel):
    """Raw CV form values, as typed by the applicant."""
    full_name: str
    email: str = ""
    phone: str = ""
    education: str = ""
    experience: str = ""
    skills: str = ""
    cv_file: Optional[CVAttachment] = None

    @field_validator("full_name")
    @classmethod
    def _require_name(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Full name is required")
        return value

    @field_validator("email")
    @classmethod
    def _check_email(cls, value: str) -> str:
        value = value.strip()
        if value and "@" not in value:
            raise ValueError(f"Invalid email address: {value}")
        return value


class SubmissionRecord(BaseModel):
    """A CV row as stored in the `cvs` table."""
    id: Optional[str] = None
    applicant_name: str
    years_experience: int = Field(0, ge=0)
    skills: List[str] = Field(default_factory=list)
    # Kept as a raw string: the store may hold statuses this client does not know
    status: str = SubmissionStatus.PENDING.value
    requirements_match: Optional[float] = None
    cv_file_key: Optional[str] = None
    created_at: Optional[datetime] = None

    @field_validator("id", mode="before")
    @classmethod
    def _stringify_id(cls, value: Any) -> Any:
        return str(value) if value is not None else None

    @field_validator("years_experience", mode="before")
    @classmethod
    def _default_years(cls, value: Any) -> Any:
        return 0 if value is None else value

    @field_validator("skills", mode="before")
    @classmethod
    def _default_skills(cls, value: Any) -> Any:
        return [] if value is None else value

    def to_insert_payload(self) -> Dict[str, Any]:
        """Row body for an insert; the store assigns id and created_at."""
        return self.model_dump(exclude={"id", "created_at"}, exclude_none=True)


class SubmissionResult(BaseModel):
    """Outcome of a submit plus the toast text the UI shows for it."""
    outcome: SubmissionOutcome
    title: str
    message: str
    record: Optional[SubmissionRecord] = None

    @property
    def reset_form(self) -> bool:
        """Only a successful submit clears the form; failures keep entered values."""
        return self.outcome == SubmissionOutcome.SUBMITTED


# ----------------------------------------------------------------------
# DASHBOARD MODELS
# ----------------------------------------------------------------------

class AdminSession(BaseModel):
    """Authenticated user handed explicitly to the dashboard loader."""
    user_id: str
    email: Optional[str] = None
    access_token: Optional[str] = None
    is_admin: bool = False


class DashboardStats(BaseModel):
    """Headline numbers shown on the dashboard cards."""
    total: int = 0
    pending: int = 0
    accepted: int = 0
    average_experience: float = 0.0


class TrendPoint(BaseModel):
    """Submissions on one day of the current window vs the same offset a window earlier."""
    day: date
    current: int = 0
    previous: int = 0


class DashboardSummary(BaseModel):
    """Everything derived from one snapshot of submissions."""
    stats: DashboardStats = Field(default_factory=DashboardStats)
    experience_groups: Dict[str, List[SubmissionRecord]] = Field(default_factory=dict)
    trends: List[TrendPoint] = Field(default_factory=list)


class DashboardView(BaseModel):
    """Dashboard payload: fetched rows, derived summary and per-section errors."""
    submissions: List[SubmissionRecord] = Field(default_factory=list)
    positions: List[Dict[str, Any]] = Field(default_factory=list)
    summary: DashboardSummary = Field(default_factory=DashboardSummary)
    errors: Dict[str, str] = Field(default_factory=dict)
    generated_at: datetime = Field(default_factory=datetime.utcnow)

    class Config:
        json_schema_extra = {
            "example": {
                "summary": {
                    "stats": {
                        "total": 3,
                        "pending": 1,
                        "accepted": 1,
                        "average_experience": 4.0
                    },
                    "experience_groups": {
                        "2-4 years": [{"applicant_name": "Ada Lovelace", "years_experience": 2}],
                        "4-6 years": [{"applicant_name": "Alan Turing", "years_experience": 4}]
                    }
                },
                "errors": {"positions": "Failed to load positions"}
            }
        }

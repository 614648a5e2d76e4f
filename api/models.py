"""
API request and response models for InternHub REST endpoints.

These Pydantic v2 models define the HTTP transport contract for the API layer.
They are intentionally separate from the dataclasses in auth/models.py and
internships/models.py, which own the internal domain representation. Route
handlers map between the two.

Validation happens here, before any service is called: presence, length,
email format, 10-digit phone numbers and password complexity.
"""

import datetime
import re
from typing import Annotated, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field, StringConstraints, field_validator

from auth.models import Role
from internships.models import Feedback, Internship, InternshipApplication

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

PHONE_PATTERN = r"^\d{10}$"

# pydantic-core's regex engine has no lookahead support, so the complexity
# rule is checked with the re module in a field validator instead.
_PASSWORD_RE = re.compile(r"^(?=.*[a-z])(?=.*[A-Z])(?=.*\d)(?=.*[\W_]).{8,}$")
PASSWORD_RULE = (
    "Password must include at least 8 characters with one uppercase letter, "
    "one lowercase letter, one digit and one special character."
)
# bcrypt only hashes the first 72 bytes and current releases refuse longer input.
BCRYPT_MAX_BYTES = 72

# Passwords are never stripped; every other free-text field is.
Username = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=48)]
MobileNumber = Annotated[str, StringConstraints(strip_whitespace=True, pattern=PHONE_PATTERN)]


def check_password(value: str) -> str:
    """Enforce the complexity rule and the bcrypt byte limit on a new password."""
    if not _PASSWORD_RE.match(value):
        raise ValueError(PASSWORD_RULE)
    if len(value.encode("utf-8")) > BCRYPT_MAX_BYTES:
        raise ValueError(f"Password must not exceed {BCRYPT_MAX_BYTES} bytes when UTF-8 encoded.")
    return value


# ---------------------------------------------------------------------------
# Auth
# ---------------------------------------------------------------------------


class RegisterRequest(BaseModel):
    """Request body for POST /api/v1/register."""

    email: EmailStr
    password: str = Field(min_length=8, max_length=64)
    username: Username
    mobile_number: MobileNumber
    user_role: Role
    # Required only when user_role is Admin
    secret_key: Optional[str] = Field(default=None, max_length=56)

    @field_validator("password")
    @classmethod
    def check_complexity(cls, value: str) -> str:
        return check_password(value)


class LoginRequest(BaseModel):
    """Request body for POST /api/v1/login."""

    email: Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=255)]
    password: str = Field(min_length=1, max_length=64)


class LoginResponse(BaseModel):
    model_config = ConfigDict(frozen=True)

    token: str
    token_type: str = "bearer"
    expires_in: int


class MeResponse(BaseModel):
    """Claims carried by the caller's verified token."""

    model_config = ConfigDict(frozen=True)

    user_id: int
    email: str
    username: str
    role: str


class MessageResponse(BaseModel):
    model_config = ConfigDict(frozen=True)

    message: str


# ---------------------------------------------------------------------------
# Internships
# ---------------------------------------------------------------------------


class InternshipRequest(BaseModel):
    """Request body for POST and PUT /api/v1/internship. PUT overwrites every field."""

    model_config = ConfigDict(str_strip_whitespace=True)

    title: str = Field(min_length=1, max_length=128)
    company_name: str = Field(min_length=1, max_length=128)
    location: str = Field(min_length=1, max_length=128)
    duration_in_months: int = Field(ge=1)
    stipend: float = Field(ge=0)
    description: str = Field(min_length=1, max_length=1024)
    skills_required: str = Field(min_length=1, max_length=200)
    application_deadline: datetime.date

    def to_domain(self) -> Internship:
        return Internship(
            title=self.title,
            company_name=self.company_name,
            location=self.location,
            duration_in_months=self.duration_in_months,
            stipend=self.stipend,
            description=self.description,
            skills_required=self.skills_required,
            application_deadline=self.application_deadline.isoformat(),
        )


class InternshipResponse(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: int
    title: str
    company_name: str
    location: str
    duration_in_months: int
    stipend: float
    description: str
    skills_required: str
    application_deadline: str

    @classmethod
    def from_domain(cls, internship: Internship) -> "InternshipResponse":
        return cls(
            id=internship.id,
            title=internship.title,
            company_name=internship.company_name,
            location=internship.location,
            duration_in_months=internship.duration_in_months,
            stipend=internship.stipend,
            description=internship.description,
            skills_required=internship.skills_required,
            application_deadline=internship.application_deadline,
        )


# ---------------------------------------------------------------------------
# Internship applications
# ---------------------------------------------------------------------------


class ApplicationUpdate(BaseModel):
    """Request body for PUT /api/v1/internship-application/{id}.

    Only these fields are mutable after submission.
    """

    model_config = ConfigDict(str_strip_whitespace=True)

    university_name: str = Field(min_length=1, max_length=128)
    degree_program: str = Field(min_length=1, max_length=32)
    resume: str = Field(min_length=1, max_length=1024)
    linkedin_profile: Optional[str] = Field(default=None, max_length=512)
    application_status: str = Field(min_length=1, max_length=8)


class ApplicationCreate(ApplicationUpdate):
    """Request body for POST /api/v1/internship-application."""

    user_id: int = Field(ge=1)
    internship_id: int = Field(ge=1)
    application_date: datetime.date = Field(default_factory=datetime.date.today)

    def to_domain(self) -> InternshipApplication:
        return InternshipApplication(
            user_id=self.user_id,
            internship_id=self.internship_id,
            university_name=self.university_name,
            degree_program=self.degree_program,
            resume=self.resume,
            linkedin_profile=self.linkedin_profile,
            application_status=self.application_status,
            application_date=self.application_date.isoformat(),
        )


class ApplicationResponse(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: int
    user_id: int
    internship_id: int
    university_name: str
    degree_program: str
    resume: str
    linkedin_profile: Optional[str]
    application_status: str
    application_date: str

    @classmethod
    def from_domain(cls, application: InternshipApplication) -> "ApplicationResponse":
        return cls(
            id=application.id,
            user_id=application.user_id,
            internship_id=application.internship_id,
            university_name=application.university_name,
            degree_program=application.degree_program,
            resume=application.resume,
            linkedin_profile=application.linkedin_profile,
            application_status=application.application_status,
            application_date=application.application_date,
        )


# ---------------------------------------------------------------------------
# Feedback
# ---------------------------------------------------------------------------


class FeedbackUpdate(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    feedback_text: str = Field(min_length=1, max_length=1012)
    date: datetime.date = Field(default_factory=datetime.date.today)


class FeedbackCreate(FeedbackUpdate):
    user_id: int = Field(ge=1)


class FeedbackResponse(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: int
    user_id: int
    feedback_text: str
    date: str

    @classmethod
    def from_domain(cls, feedback: Feedback) -> "FeedbackResponse":
        return cls(
            id=feedback.id,
            user_id=feedback.user_id,
            feedback_text=feedback.feedback_text,
            date=feedback.date,
        )


# ---------------------------------------------------------------------------
# Errors and health
# ---------------------------------------------------------------------------


class ErrorDetail(BaseModel):
    """Machine-readable error payload."""

    model_config = ConfigDict(frozen=True)

    code: str
    message: str
    detail: Optional[str] = None


class ErrorResponse(BaseModel):
    """Top-level error envelope returned on 4xx/5xx responses."""

    model_config = ConfigDict(frozen=True)

    error: ErrorDetail


class HealthResponse(BaseModel):
    """Response for GET /api/v1/health."""

    model_config = ConfigDict(frozen=True)

    status: str = "healthy"
    version: str
    components: dict[str, str]

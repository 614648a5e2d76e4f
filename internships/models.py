"""
internships/models.py -- Domain dataclasses for listings, applications, and feedback.

These are pure data containers with zero logic. Integrity rules (unique
company name, one application per user per internship, no orphaned
applications) live in internships/store.py and internships/service.py.

id is None before a record is written to the database.
"""

from dataclasses import dataclass
from typing import Optional


@dataclass
class Internship:
    title: str
    company_name: str  # unique across listings
    location: str
    duration_in_months: int
    stipend: float
    description: str
    skills_required: str
    application_deadline: str  # yyyy-MM-dd
    id: Optional[int] = None


@dataclass
class InternshipApplication:
    """A user's application to one internship.

    user_id, internship_id and application_date are fixed at creation.
    Updates overwrite the remaining fields.
    """

    user_id: int
    internship_id: int
    university_name: str
    degree_program: str
    resume: str  # file name / reference
    application_status: str
    application_date: str  # yyyy-MM-dd
    linkedin_profile: Optional[str] = None
    id: Optional[int] = None


@dataclass
class Feedback:
    user_id: int
    feedback_text: str
    date: str  # yyyy-MM-dd
    id: Optional[int] = None

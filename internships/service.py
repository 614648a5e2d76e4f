"""
internships/service.py -- Domain services for listings, applications, and feedback.

Each service wraps InternshipStore and returns tagged results from
core.results. Duplicates are pre-checked for the common case; the unique
constraints in the schema catch the concurrent case, where the losing insert
raises IntegrityError and is reported as the same Conflict.

Layer rule: no imports from api/ or auth/.
"""

from __future__ import annotations

import logging

from sqlalchemy.exc import IntegrityError

from core.results import Conflict, NotFound, Ok, Result
from internships.models import Feedback, Internship, InternshipApplication
from internships.store import InternshipInUseError, InternshipStore

logger = logging.getLogger("internhub.internships")

DUPLICATE_COMPANY = "Company with the same name already exists"
INTERNSHIP_IN_USE = "Internship has existing applications"
INTERNSHIP_NOT_FOUND = "Cannot find any internship"
DUPLICATE_APPLICATION = "User already applied for this internship"
APPLICATION_NOT_FOUND = "Cannot find any internship application"
FEEDBACK_NOT_FOUND = "Cannot find any feedback"


class InternshipService:
    def __init__(self, store: InternshipStore) -> None:
        self._store = store

    def get_all(self) -> list[Internship]:
        return self._store.list_internships()

    def get_by_id(self, internship_id: int) -> Result[Internship]:
        internship = self._store.get_internship(internship_id)
        if internship is None:
            return NotFound(INTERNSHIP_NOT_FOUND)
        return Ok(internship)

    def add(self, internship: Internship) -> Result[Internship]:
        """Create a listing unless another one already uses the company name."""
        if self._store.get_internship_by_company(internship.company_name) is not None:
            logger.info("Rejected duplicate company %r", internship.company_name)
            return Conflict(DUPLICATE_COMPANY)
        try:
            internship.id = self._store.create_internship(internship)
        except IntegrityError:
            logger.info("Rejected duplicate company %r (constraint)", internship.company_name)
            return Conflict(DUPLICATE_COMPANY)
        logger.info("Created internship %d for %r", internship.id, internship.company_name)
        return Ok(internship)

    def update(self, internship_id: int, internship: Internship) -> Result[Internship]:
        """Full overwrite of the listing. NotFound when the id is absent."""
        try:
            updated = self._store.update_internship(internship_id, internship)
        except IntegrityError:
            return Conflict(DUPLICATE_COMPANY)
        if not updated:
            return NotFound(INTERNSHIP_NOT_FOUND)
        internship.id = internship_id
        logger.info("Updated internship %d", internship_id)
        return Ok(internship)

    def delete(self, internship_id: int) -> Result[None]:
        """Delete a listing. Blocked while applications still reference it."""
        try:
            deleted = self._store.delete_internship(internship_id)
        except InternshipInUseError as exc:
            logger.info("Refused to delete internship %d: %s", internship_id, exc)
            return Conflict(INTERNSHIP_IN_USE)
        if not deleted:
            return NotFound(INTERNSHIP_NOT_FOUND)
        logger.info("Deleted internship %d", internship_id)
        return Ok(None)


class ApplicationService:
    def __init__(self, store: InternshipStore) -> None:
        self._store = store

    def get_all(self) -> list[InternshipApplication]:
        return self._store.list_applications()

    def get_by_id(self, application_id: int) -> Result[InternshipApplication]:
        application = self._store.get_application(application_id)
        if application is None:
            return NotFound(APPLICATION_NOT_FOUND)
        return Ok(application)

    def get_by_user_id(self, user_id: int) -> Result[list[InternshipApplication]]:
        """Applications submitted by a user. An empty result is NotFound."""
        applications = self._store.list_applications_by_user(user_id)
        if not applications:
            return NotFound(APPLICATION_NOT_FOUND)
        return Ok(applications)

    def add(self, application: InternshipApplication) -> Result[InternshipApplication]:
        """Submit an application unless the user already applied to this internship."""
        if self._store.get_application_for(application.user_id, application.internship_id) is not None:
            logger.info(
                "Rejected duplicate application user=%d internship=%d",
                application.user_id,
                application.internship_id,
            )
            return Conflict(DUPLICATE_APPLICATION)
        try:
            application.id = self._store.create_application(application)
        except IntegrityError:
            return Conflict(DUPLICATE_APPLICATION)
        logger.info(
            "Created application %d user=%d internship=%d",
            application.id,
            application.user_id,
            application.internship_id,
        )
        return Ok(application)

    def update(self, application_id: int, application: InternshipApplication) -> Result[InternshipApplication]:
        """Overwrite the mutable fields and return the stored record."""
        if not self._store.update_application(application_id, application):
            return NotFound(APPLICATION_NOT_FOUND)
        logger.info("Updated application %d", application_id)
        return self.get_by_id(application_id)

    def delete(self, application_id: int) -> Result[None]:
        if not self._store.delete_application(application_id):
            return NotFound(APPLICATION_NOT_FOUND)
        logger.info("Deleted application %d", application_id)
        return Ok(None)


class FeedbackService:
    """Plain CRUD; feedback carries no uniqueness rule."""

    def __init__(self, store: InternshipStore) -> None:
        self._store = store

    def get_all(self) -> list[Feedback]:
        return self._store.list_feedback()

    def get_by_id(self, feedback_id: int) -> Result[Feedback]:
        feedback = self._store.get_feedback(feedback_id)
        if feedback is None:
            return NotFound(FEEDBACK_NOT_FOUND)
        return Ok(feedback)

    def get_by_user_id(self, user_id: int) -> list[Feedback]:
        return self._store.list_feedback_by_user(user_id)

    def add(self, feedback: Feedback) -> Result[Feedback]:
        feedback.id = self._store.create_feedback(feedback)
        logger.info("Created feedback %d for user %d", feedback.id, feedback.user_id)
        return Ok(feedback)

    def update(self, feedback_id: int, feedback: Feedback) -> Result[Feedback]:
        if not self._store.update_feedback(feedback_id, feedback):
            return NotFound(FEEDBACK_NOT_FOUND)
        logger.info("Updated feedback %d", feedback_id)
        return self.get_by_id(feedback_id)

    def delete(self, feedback_id: int) -> Result[None]:
        if not self._store.delete_feedback(feedback_id):
            return NotFound(FEEDBACK_NOT_FOUND)
        logger.info("Deleted feedback %d", feedback_id)
        return Ok(None)

"""Unit tests for the internship, application, and feedback services.

Covers:
- company names are unique on create and on rename
- the database constraint still rejects a duplicate that slips past the pre-check
- one application per (user, internship)
- updates overwrite only the mutable application fields
- updates and deletes on a missing id report NotFound, including a row that vanishes mid-update
- internships with applications cannot be deleted
"""

import pytest

from core.results import Conflict, NotFound, Ok
from internships.models import Feedback, Internship, InternshipApplication
from internships.service import (
    APPLICATION_NOT_FOUND,
    DUPLICATE_APPLICATION,
    DUPLICATE_COMPANY,
    FEEDBACK_NOT_FOUND,
    INTERNSHIP_IN_USE,
    INTERNSHIP_NOT_FOUND,
    ApplicationService,
    FeedbackService,
    InternshipService,
)
from internships.store import InternshipStore

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


@pytest.fixture
def store():
    s = InternshipStore("sqlite:///:memory:")
    yield s
    s.close()


def _internship(company: str = "Acme", title: str = "Backend Intern") -> Internship:
    return Internship(
        title=title,
        company_name=company,
        location="Remote",
        duration_in_months=3,
        stipend=1500.0,
        description="Build and maintain REST services.",
        skills_required="Python, SQL",
        application_deadline="2026-12-31",
    )


def _application(user_id: int = 1, internship_id: int = 5, status: str = "Pending") -> InternshipApplication:
    return InternshipApplication(
        user_id=user_id,
        internship_id=internship_id,
        university_name="State University",
        degree_program="BSc CS",
        resume="alice_cv.pdf",
        application_status=status,
        application_date="2026-10-01",
    )


# ---------------------------------------------------------------------------
# Internships
# ---------------------------------------------------------------------------


class TestInternshipService:
    def test_add_assigns_id(self, store):
        result = InternshipService(store).add(_internship())
        assert isinstance(result, Ok)
        assert result.value.id is not None
        assert store.get_internship(result.value.id).company_name == "Acme"

    def test_duplicate_company_is_rejected_without_writing(self, store):
        service = InternshipService(store)
        service.add(_internship())

        result = service.add(_internship(title="Frontend Intern"))

        assert result == Conflict(DUPLICATE_COMPANY)
        assert store.count_internships() == 1

    def test_duplicate_company_caught_by_constraint(self, store, monkeypatch):
        """A duplicate that races past the pre-check still leaves one row."""
        service = InternshipService(store)
        service.add(_internship())
        monkeypatch.setattr(store, "get_internship_by_company", lambda name: None)

        assert service.add(_internship()) == Conflict(DUPLICATE_COMPANY)
        assert store.count_internships() == 1

    def test_company_name_match_is_case_sensitive(self, store):
        service = InternshipService(store)
        service.add(_internship("Acme"))
        assert isinstance(service.add(_internship("acme")), Ok)

    def test_update_overwrites_every_field(self, store):
        service = InternshipService(store)
        created = service.add(_internship()).value

        changed = _internship(company="Acme Labs", title="Data Intern")
        changed.stipend = 2000.0
        result = service.update(created.id, changed)

        assert isinstance(result, Ok)
        stored = store.get_internship(created.id)
        assert stored.company_name == "Acme Labs"
        assert stored.title == "Data Intern"
        assert stored.stipend == 2000.0

    def test_rename_onto_existing_company_is_rejected(self, store):
        service = InternshipService(store)
        service.add(_internship("Acme"))
        other = service.add(_internship("Globex")).value

        assert service.update(other.id, _internship("Acme")) == Conflict(DUPLICATE_COMPANY)
        assert store.get_internship(other.id).company_name == "Globex"

    def test_update_missing_is_not_found(self, store):
        assert InternshipService(store).update(999, _internship()) == NotFound(INTERNSHIP_NOT_FOUND)

    def test_get_missing_is_not_found(self, store):
        assert InternshipService(store).get_by_id(999) == NotFound(INTERNSHIP_NOT_FOUND)

    def test_delete_blocked_while_applications_exist(self, store):
        internships = InternshipService(store)
        applications = ApplicationService(store)
        created = internships.add(_internship()).value
        application = applications.add(_application(internship_id=created.id)).value

        assert internships.delete(created.id) == Conflict(INTERNSHIP_IN_USE)
        assert store.get_internship(created.id) is not None

        applications.delete(application.id)
        assert internships.delete(created.id) == Ok(None)
        assert store.get_internship(created.id) is None

    def test_delete_missing_is_not_found(self, store):
        assert InternshipService(store).delete(999) == NotFound(INTERNSHIP_NOT_FOUND)


# ---------------------------------------------------------------------------
# Applications
# ---------------------------------------------------------------------------


class TestApplicationService:
    def test_second_application_to_same_internship_is_rejected(self, store):
        service = ApplicationService(store)
        assert isinstance(service.add(_application(user_id=1, internship_id=5)), Ok)

        assert service.add(_application(user_id=1, internship_id=5)) == Conflict(DUPLICATE_APPLICATION)
        assert len(store.list_applications()) == 1

    def test_duplicate_application_caught_by_constraint(self, store, monkeypatch):
        service = ApplicationService(store)
        service.add(_application())
        monkeypatch.setattr(store, "get_application_for", lambda user_id, internship_id: None)

        assert service.add(_application()) == Conflict(DUPLICATE_APPLICATION)
        assert len(store.list_applications()) == 1

    def test_same_user_may_apply_to_different_internships(self, store):
        service = ApplicationService(store)
        service.add(_application(user_id=1, internship_id=5))
        assert isinstance(service.add(_application(user_id=1, internship_id=6)), Ok)
        assert isinstance(service.add(_application(user_id=2, internship_id=5)), Ok)

    def test_update_keeps_immutable_fields(self, store):
        service = ApplicationService(store)
        created = service.add(_application(user_id=1, internship_id=5)).value

        changes = _application(user_id=99, internship_id=99, status="Accepted")
        changes.application_date = "1999-01-01"
        changes.linkedin_profile = "https://linkedin.com/in/alice"
        result = service.update(created.id, changes)

        assert isinstance(result, Ok)
        stored = result.value
        assert stored.application_status == "Accepted"
        assert stored.linkedin_profile == "https://linkedin.com/in/alice"
        assert stored.user_id == 1
        assert stored.internship_id == 5
        assert stored.application_date == "2026-10-01"

    def test_update_missing_is_not_found(self, store):
        assert ApplicationService(store).update(999, _application()) == NotFound(APPLICATION_NOT_FOUND)

    def test_get_by_user_without_applications_is_not_found(self, store):
        assert ApplicationService(store).get_by_user_id(42) == NotFound(APPLICATION_NOT_FOUND)

    def test_get_by_user_returns_only_that_user(self, store):
        service = ApplicationService(store)
        service.add(_application(user_id=1, internship_id=5))
        service.add(_application(user_id=2, internship_id=5))

        result = service.get_by_user_id(1)

        assert isinstance(result, Ok)
        assert [a.user_id for a in result.value] == [1]

    def test_delete_missing_is_not_found(self, store):
        assert ApplicationService(store).delete(999) == NotFound(APPLICATION_NOT_FOUND)


# ---------------------------------------------------------------------------
# Feedback
# ---------------------------------------------------------------------------


class TestFeedbackService:
    def test_add_and_list_by_user(self, store):
        service = FeedbackService(store)
        service.add(Feedback(user_id=1, feedback_text="Great platform", date="2026-10-01"))
        service.add(Feedback(user_id=2, feedback_text="Needs dark mode", date="2026-10-02"))

        assert [f.feedback_text for f in service.get_by_user_id(1)] == ["Great platform"]
        assert len(service.get_all()) == 2

    def test_get_by_user_without_feedback_is_empty(self, store):
        assert FeedbackService(store).get_by_user_id(42) == []

    def test_update_overwrites_text_and_date(self, store):
        service = FeedbackService(store)
        created = service.add(Feedback(user_id=1, feedback_text="Okay", date="2026-10-01")).value

        result = service.update(created.id, Feedback(user_id=1, feedback_text="Much better", date="2026-10-05"))

        assert result == Ok(Feedback(user_id=1, feedback_text="Much better", date="2026-10-05", id=created.id))

    def test_update_missing_is_not_found(self, store):
        changes = Feedback(user_id=1, feedback_text="x", date="2026-10-01")
        assert FeedbackService(store).update(999, changes) == NotFound(FEEDBACK_NOT_FOUND)

    def test_delete(self, store):
        service = FeedbackService(store)
        created = service.add(Feedback(user_id=1, feedback_text="Bye", date="2026-10-01")).value

        assert service.delete(created.id) == Ok(None)
        assert service.delete(created.id) == NotFound(FEEDBACK_NOT_FOUND)

    def test_update_of_feedback_deleted_before_reread_is_not_found(self, store, monkeypatch):
        service = FeedbackService(store)
        created = service.add(Feedback(user_id=1, feedback_text="Okay", date="2026-10-01")).value
        # The row disappears between the UPDATE and the follow-up read.
        monkeypatch.setattr(store, "get_feedback", lambda feedback_id: None)

        result = service.update(created.id, Feedback(user_id=1, feedback_text="Later", date="2026-10-02"))

        assert result == NotFound(FEEDBACK_NOT_FOUND)

    def test_get_by_id(self, store):
        service = FeedbackService(store)
        created = service.add(Feedback(user_id=1, feedback_text="Hi", date="2026-10-01")).value

        assert service.get_by_id(created.id) == Ok(created)
        assert service.get_by_id(999) == NotFound(FEEDBACK_NOT_FOUND)

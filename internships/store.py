"""
internships/store.py -- SQLAlchemy-backed persistence for listings, applications, and feedback.

Uses SQLAlchemy Core (not ORM) so the dataclasses in internships/models.py
remain the authoritative domain representation. Swapping SQLite for
PostgreSQL is a connection string change, not a rewrite.

Pattern: Repository + Data Mapper. InternshipStore is the repository (one
clean interface per entity). The _row_to_* functions are the mappers.
Services never touch SQL directly.

Integrity:
  UNIQUE(company_name) and UNIQUE(user_id, internship_id) are declared on the
  tables, so two concurrent adds cannot both commit a duplicate. Inserts and
  updates that hit a constraint raise sqlalchemy.exc.IntegrityError.

  delete_internship() checks for referencing applications and deletes in the
  same transaction; it raises InternshipInUseError instead of orphaning them.

Security: all queries use bound parameters. No f-strings in SQL.

Usage:
    store = InternshipStore("sqlite:///internhub.db")
    internship_id = store.create_internship(internship)
    store.create_application(application)
    store.close()
"""

from typing import Optional

from sqlalchemy import (
    Column,
    Float,
    Index,
    Integer,
    MetaData,
    String,
    Table,
    Text,
    UniqueConstraint,
    create_engine,
    event,
    func,
    select,
)
from sqlalchemy.engine import Engine

from internships.models import Feedback, Internship, InternshipApplication


class InternshipInUseError(Exception):
    """Raised when deleting an internship that applications still reference."""

    def __init__(self, internship_id: int, application_count: int) -> None:
        super().__init__(f"Internship {internship_id} is referenced by {application_count} application(s)")
        self.internship_id = internship_id
        self.application_count = application_count


# ---------------------------------------------------------------------------
# Schema
# ---------------------------------------------------------------------------

metadata = MetaData()

_internships = Table(
    "internships",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("title", String(128), nullable=False),
    Column("company_name", String(128), nullable=False),
    Column("location", String(128), nullable=False),
    Column("duration_in_months", Integer, nullable=False),
    Column("stipend", Float, nullable=False),
    Column("description", String(1024), nullable=False),
    Column("skills_required", String(200), nullable=False),
    Column("application_deadline", String(16), nullable=False),
    UniqueConstraint("company_name", name="uq_internship_company_name"),
)

_applications = Table(
    "internship_applications",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("user_id", Integer, nullable=False),
    Column("internship_id", Integer, nullable=False),
    Column("university_name", String(128), nullable=False),
    Column("degree_program", String(32), nullable=False),
    Column("resume", Text, nullable=False),
    Column("linkedin_profile", String(512)),
    Column("application_status", String(8), nullable=False),
    Column("application_date", String(10), nullable=False),  # YYYY-MM-DD
    UniqueConstraint("user_id", "internship_id", name="uq_application_user_internship"),
)

_feedback = Table(
    "feedback",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("user_id", Integer, nullable=False),
    Column("feedback_text", String(1012), nullable=False),
    Column("date", String(10), nullable=False),  # YYYY-MM-DD
)

Index("ix_internship_location", _internships.c.location)
Index("ix_application_degree_program", _applications.c.degree_program)
Index("ix_application_internship_id", _applications.c.internship_id)
Index("ix_feedback_user_id", _feedback.c.user_id)


def _set_wal_mode(dbapi_conn, connection_record) -> None:
    """Enable WAL journal mode (per connection -- PRAGMAs are not inherited)."""
    dbapi_conn.execute("PRAGMA journal_mode=WAL")


# ---------------------------------------------------------------------------
# Repository
# ---------------------------------------------------------------------------


class InternshipStore:
    """Repository for Internship, InternshipApplication, and Feedback entities."""

    def __init__(self, db_url: str) -> None:
        connect_args: dict = {}
        if db_url.startswith("sqlite"):
            connect_args["check_same_thread"] = False
        self.engine: Engine = create_engine(db_url, connect_args=connect_args)
        if db_url.startswith("sqlite"):
            event.listen(self.engine, "connect", _set_wal_mode)
        metadata.create_all(self.engine)

    # ------------------------------------------------------------------
    # Internships
    # ------------------------------------------------------------------

    def create_internship(self, internship: Internship) -> int:
        """Insert a listing and return its ID.

        Raises sqlalchemy.exc.IntegrityError if the company name is taken.
        """
        with self.engine.begin() as conn:
            result = conn.execute(_internships.insert().values(**_internship_values(internship)))
            return result.inserted_primary_key[0]

    def get_internship(self, internship_id: int) -> Optional[Internship]:
        with self.engine.connect() as conn:
            row = conn.execute(_internships.select().where(_internships.c.id == internship_id)).fetchone()
        return _row_to_internship(row) if row is not None else None

    def get_internship_by_company(self, company_name: str) -> Optional[Internship]:
        """Exact, case-sensitive match on company name."""
        with self.engine.connect() as conn:
            row = conn.execute(
                _internships.select().where(_internships.c.company_name == company_name)
            ).fetchone()
        return _row_to_internship(row) if row is not None else None

    def list_internships(self) -> list[Internship]:
        with self.engine.connect() as conn:
            rows = conn.execute(_internships.select().order_by(_internships.c.id)).fetchall()
        return [_row_to_internship(r) for r in rows]

    def count_internships(self) -> int:
        with self.engine.connect() as conn:
            return conn.execute(select(func.count()).select_from(_internships)).scalar_one()

    def update_internship(self, internship_id: int, internship: Internship) -> bool:
        """Overwrite every mutable field. Returns False if the id does not exist.

        Raises sqlalchemy.exc.IntegrityError if the new company name belongs
        to another listing.
        """
        with self.engine.begin() as conn:
            result = conn.execute(
                _internships.update()
                .where(_internships.c.id == internship_id)
                .values(**_internship_values(internship))
            )
        return result.rowcount > 0

    def delete_internship(self, internship_id: int) -> bool:
        """Delete a listing. Returns False if the id does not exist.

        Raises InternshipInUseError if any application references the listing.
        The reference check and the delete run in one transaction.
        """
        with self.engine.begin() as conn:
            exists = conn.execute(
                select(_internships.c.id).where(_internships.c.id == internship_id)
            ).first()
            if exists is None:
                return False
            refs = conn.execute(
                select(func.count())
                .select_from(_applications)
                .where(_applications.c.internship_id == internship_id)
            ).scalar_one()
            if refs:
                raise InternshipInUseError(internship_id, refs)
            conn.execute(_internships.delete().where(_internships.c.id == internship_id))
        return True

    # ------------------------------------------------------------------
    # Applications
    # ------------------------------------------------------------------

    def create_application(self, application: InternshipApplication) -> int:
        """Insert an application and return its ID.

        Raises sqlalchemy.exc.IntegrityError if the user already applied to
        this internship.
        """
        with self.engine.begin() as conn:
            result = conn.execute(
                _applications.insert().values(
                    user_id=application.user_id,
                    internship_id=application.internship_id,
                    university_name=application.university_name,
                    degree_program=application.degree_program,
                    resume=application.resume,
                    linkedin_profile=application.linkedin_profile,
                    application_status=application.application_status,
                    application_date=application.application_date,
                )
            )
            return result.inserted_primary_key[0]

    def get_application(self, application_id: int) -> Optional[InternshipApplication]:
        with self.engine.connect() as conn:
            row = conn.execute(_applications.select().where(_applications.c.id == application_id)).fetchone()
        return _row_to_application(row) if row is not None else None

    def get_application_for(self, user_id: int, internship_id: int) -> Optional[InternshipApplication]:
        """Return the user's application to the given internship, if any."""
        with self.engine.connect() as conn:
            row = conn.execute(
                _applications.select().where(
                    (_applications.c.user_id == user_id) & (_applications.c.internship_id == internship_id)
                )
            ).fetchone()
        return _row_to_application(row) if row is not None else None

    def list_applications(self) -> list[InternshipApplication]:
        with self.engine.connect() as conn:
            rows = conn.execute(_applications.select().order_by(_applications.c.id)).fetchall()
        return [_row_to_application(r) for r in rows]

    def list_applications_by_user(self, user_id: int) -> list[InternshipApplication]:
        with self.engine.connect() as conn:
            rows = conn.execute(
                _applications.select().where(_applications.c.user_id == user_id).order_by(_applications.c.id)
            ).fetchall()
        return [_row_to_application(r) for r in rows]

    def update_application(self, application_id: int, application: InternshipApplication) -> bool:
        """Overwrite the mutable fields only.

        user_id, internship_id and application_date are fixed at creation and
        are ignored here. Returns False if the id does not exist.
        """
        with self.engine.begin() as conn:
            result = conn.execute(
                _applications.update()
                .where(_applications.c.id == application_id)
                .values(
                    university_name=application.university_name,
                    degree_program=application.degree_program,
                    resume=application.resume,
                    linkedin_profile=application.linkedin_profile,
                    application_status=application.application_status,
                )
            )
        return result.rowcount > 0

    def delete_application(self, application_id: int) -> bool:
        with self.engine.begin() as conn:
            result = conn.execute(_applications.delete().where(_applications.c.id == application_id))
        return result.rowcount > 0

    # ------------------------------------------------------------------
    # Feedback
    # ------------------------------------------------------------------

    def create_feedback(self, feedback: Feedback) -> int:
        with self.engine.begin() as conn:
            result = conn.execute(
                _feedback.insert().values(
                    user_id=feedback.user_id,
                    feedback_text=feedback.feedback_text,
                    date=feedback.date,
                )
            )
            return result.inserted_primary_key[0]

    def get_feedback(self, feedback_id: int) -> Optional[Feedback]:
        with self.engine.connect() as conn:
            row = conn.execute(_feedback.select().where(_feedback.c.id == feedback_id)).fetchone()
        return _row_to_feedback(row) if row is not None else None

    def list_feedback(self) -> list[Feedback]:
        with self.engine.connect() as conn:
            rows = conn.execute(_feedback.select().order_by(_feedback.c.id)).fetchall()
        return [_row_to_feedback(r) for r in rows]

    def list_feedback_by_user(self, user_id: int) -> list[Feedback]:
        with self.engine.connect() as conn:
            rows = conn.execute(
                _feedback.select().where(_feedback.c.user_id == user_id).order_by(_feedback.c.id)
            ).fetchall()
        return [_row_to_feedback(r) for r in rows]

    def update_feedback(self, feedback_id: int, feedback: Feedback) -> bool:
        """Overwrite text and date. Returns False if the id does not exist."""
        with self.engine.begin() as conn:
            result = conn.execute(
                _feedback.update()
                .where(_feedback.c.id == feedback_id)
                .values(feedback_text=feedback.feedback_text, date=feedback.date)
            )
        return result.rowcount > 0

    def delete_feedback(self, feedback_id: int) -> bool:
        with self.engine.begin() as conn:
            result = conn.execute(_feedback.delete().where(_feedback.c.id == feedback_id))
        return result.rowcount > 0

    def close(self) -> None:
        self.engine.dispose()


# ---------------------------------------------------------------------------
# Row mappers (Data Mapper pattern)
# ---------------------------------------------------------------------------


def _internship_values(internship: Internship) -> dict:
    return {
        "title": internship.title,
        "company_name": internship.company_name,
        "location": internship.location,
        "duration_in_months": internship.duration_in_months,
        "stipend": internship.stipend,
        "description": internship.description,
        "skills_required": internship.skills_required,
        "application_deadline": internship.application_deadline,
    }


def _row_to_internship(row) -> Internship:
    return Internship(
        id=row.id,
        title=row.title,
        company_name=row.company_name,
        location=row.location,
        duration_in_months=row.duration_in_months,
        stipend=row.stipend,
        description=row.description,
        skills_required=row.skills_required,
        application_deadline=row.application_deadline,
    )


def _row_to_application(row) -> InternshipApplication:
    return InternshipApplication(
        id=row.id,
        user_id=row.user_id,
        internship_id=row.internship_id,
        university_name=row.university_name,
        degree_program=row.degree_program,
        resume=row.resume,
        linkedin_profile=row.linkedin_profile,
        application_status=row.application_status,
        application_date=row.application_date,
    )


def _row_to_feedback(row) -> Feedback:
    return Feedback(
        id=row.id,
        user_id=row.user_id,
        feedback_text=row.feedback_text,
        date=row.date,
    )

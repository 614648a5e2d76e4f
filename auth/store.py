"""
auth/store.py -- SQLAlchemy Core persistence layer for auth entities.

Pattern: Repository + Data Mapper (same as internships/store.py).
UserStore is the repository; _row_to_user is the mapper. Service and route
code never touches SQL directly.

Security:
  All queries use bound parameters. No f-strings in SQL.

  UNIQUE(email) is declared on the table. AuthService pre-checks for a
  friendly conflict message, but the constraint is what stops two concurrent
  registrations for the same address from both committing.

Roles:
  The roles table is seeded with every Role value each time the store opens.
  Seeding is idempotent -- existing names are skipped.

Layer rule: no imports from api/ or internships/.
"""

from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy import Column, Integer, MetaData, String, Table, Text, create_engine, event, func, select
from sqlalchemy.engine import Engine

from auth.models import Role, User

# ---------------------------------------------------------------------------
# Schema
# ---------------------------------------------------------------------------

_metadata = MetaData()

_users = Table(
    "users",
    _metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("email", String(255), nullable=False, unique=True),
    Column("hashed_password", Text, nullable=False),
    Column("username", String(48), nullable=False),
    Column("mobile_number", String(10), nullable=False),
    Column("role", String(8), nullable=False, server_default=Role.user.value),
    Column("created_at", String(32), nullable=False),
)

_roles = Table(
    "roles",
    _metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("name", String(8), nullable=False, unique=True),
)


# ---------------------------------------------------------------------------
# WAL mode
# ---------------------------------------------------------------------------


def _set_wal_mode(dbapi_conn, connection_record) -> None:
    """Enable WAL journal mode for concurrent read safety.

    Set per-connection because SQLite PRAGMAs are not inherited by new
    connections from the pool.
    """
    dbapi_conn.execute("PRAGMA journal_mode=WAL")


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


# ---------------------------------------------------------------------------
# Repository
# ---------------------------------------------------------------------------


class UserStore:
    """Repository for User records and the seeded roles table.

    Usage:
        store = UserStore(settings.database_url)
        user_id = store.create_user(User(email="a@x.com", ..., hashed_password=digest))
        user = store.get_by_email("a@x.com")
        store.close()
    """

    def __init__(self, db_url: str) -> None:
        connect_args: dict = {}
        if db_url.startswith("sqlite"):
            connect_args["check_same_thread"] = False
        self.engine: Engine = create_engine(db_url, connect_args=connect_args)
        if db_url.startswith("sqlite"):
            event.listen(self.engine, "connect", _set_wal_mode)
        _metadata.create_all(self.engine)
        self._seed_roles()

    def _seed_roles(self) -> None:
        """Insert any Role value missing from the roles table."""
        with self.engine.begin() as conn:
            existing = set(conn.execute(select(_roles.c.name)).scalars())
            for role in Role:
                if role.value not in existing:
                    conn.execute(_roles.insert().values(name=role.value))

    # ------------------------------------------------------------------
    # Roles
    # ------------------------------------------------------------------

    def list_roles(self) -> list[str]:
        with self.engine.connect() as conn:
            return list(conn.execute(select(_roles.c.name).order_by(_roles.c.id)).scalars())

    # ------------------------------------------------------------------
    # Users
    # ------------------------------------------------------------------

    def create_user(self, user: User) -> int:
        """Insert a new user and return its assigned database ID.

        Raises sqlalchemy.exc.IntegrityError if the email already exists.
        """
        with self.engine.begin() as conn:
            result = conn.execute(
                _users.insert().values(
                    email=user.email,
                    hashed_password=user.hashed_password,
                    username=user.username,
                    mobile_number=user.mobile_number,
                    role=user.role,
                    created_at=_now_iso(),
                )
            )
            return result.inserted_primary_key[0]

    def get_by_email(self, email: str) -> User | None:
        """Look up a user by exact email. Returns None if not found."""
        with self.engine.connect() as conn:
            row = conn.execute(_users.select().where(_users.c.email == email)).fetchone()
        return _row_to_user(row) if row is not None else None

    def count_users(self) -> int:
        with self.engine.connect() as conn:
            return conn.execute(select(func.count()).select_from(_users)).scalar_one()

    def close(self) -> None:
        self.engine.dispose()


# ---------------------------------------------------------------------------
# Row mapper
# ---------------------------------------------------------------------------


def _row_to_user(row) -> User:
    return User(
        id=row.id,
        email=row.email,
        hashed_password=row.hashed_password,
        username=row.username,
        mobile_number=row.mobile_number,
        role=row.role,
        created_at=row.created_at,
    )

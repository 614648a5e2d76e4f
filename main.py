#!/usr/bin/env python3
"""
InternHub -- internship listings, applications, and feedback over HTTP.

Usage:
  python main.py serve
  python main.py serve --host 0.0.0.0 --port 8080 --reload
  python main.py init-db
  python main.py create-admin --email admin@example.com --username admin --mobile 0123456789

Environment variables (or .env):
  SECRET_KEY        JWT signing key, at least 32 characters. Required unless DEBUG=true.
  DATABASE_URL      SQLAlchemy URL. Defaults to sqlite:///internhub.db.
  ADMIN_SECRET_KEY  Secret that Admin self-registration must present.
"""

import argparse
import getpass
import sys

from pydantic import ValidationError
from sqlalchemy.exc import IntegrityError

from api.models import RegisterRequest
from auth.models import Role, User
from auth.service import USER_EXISTS
from auth.store import UserStore
from auth.tokens import hash_password
from core.config import get_settings
from internships.store import InternshipStore


def _cmd_serve(args: argparse.Namespace) -> int:
    import uvicorn

    uvicorn.run("asgi:app", host=args.host, port=args.port, reload=args.reload)
    return 0


def _cmd_init_db(args: argparse.Namespace) -> int:
    """Create every table and seed the roles, then exit."""
    settings = get_settings()
    users = UserStore(settings.database_url)
    internships = InternshipStore(settings.database_url)
    print(f"  Database ready. Roles: {', '.join(users.list_roles())}")
    internships.close()
    users.close()
    return 0


def _cmd_create_admin(args: argparse.Namespace) -> int:
    """Create an Admin account directly, without the registration secret key.

    The input goes through the same RegisterRequest validation as
    POST /api/v1/register.
    """
    settings = get_settings()
    password = args.password or getpass.getpass("  Password: ")
    try:
        body = RegisterRequest(
            email=args.email,
            password=password,
            username=args.username,
            mobile_number=args.mobile,
            user_role=Role.admin,
        )
    except ValidationError as e:
        for err in e.errors():
            field = ".".join(str(part) for part in err["loc"])
            print(f"  [!] {field}: {err['msg']}")
        return 1

    store = UserStore(settings.database_url)
    try:
        if store.get_by_email(body.email) is not None:
            print(f"  [!] {USER_EXISTS}")
            return 1
        user = User(
            email=body.email,
            username=body.username,
            mobile_number=body.mobile_number,
            role=Role.admin.value,
            hashed_password=hash_password(body.password, settings.bcrypt_rounds),
        )
        try:
            store.create_user(user)
        except IntegrityError:
            print(f"  [!] {USER_EXISTS}")
            return 1
    finally:
        store.close()
    print(f"  Admin {body.email} created.")
    return 0


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(
        prog="internhub",
        description="InternHub backend -- internship listings, applications, and feedback.",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    serve = sub.add_parser("serve", help="Run the API with uvicorn")
    serve.add_argument("--host", default="127.0.0.1")
    serve.add_argument("--port", type=int, default=8000)
    serve.add_argument("--reload", action="store_true", help="Reload on code changes (development)")
    serve.set_defaults(func=_cmd_serve)

    init_db = sub.add_parser("init-db", help="Create tables and seed roles")
    init_db.set_defaults(func=_cmd_init_db)

    admin = sub.add_parser("create-admin", help="Create an Admin account")
    admin.add_argument("--email", required=True)
    admin.add_argument("--username", required=True)
    admin.add_argument("--mobile", required=True, help="10-digit mobile number")
    admin.add_argument("--password", help="Prompted for when omitted")
    admin.set_defaults(func=_cmd_create_admin)

    args = parser.parse_args(argv)
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())

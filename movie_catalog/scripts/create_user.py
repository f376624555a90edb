"""
Create a user (e.g. the first admin; registration over HTTP only creates 'user'). Run from project root:
  python -m movie_catalog.scripts.create_user NAME EMAIL PASSWORD [role]
Example:
  python -m movie_catalog.scripts.create_user "Site Admin" admin@example.com your-secure-password admin
"""
import argparse
import sys

from pydantic import ValidationError

from movie_catalog.core.config import get_settings
from movie_catalog.core.database import SessionLocal
from movie_catalog.core.logging_config import configure_logging
from movie_catalog.core.security import ROLE_USER, ROLES
from movie_catalog.schemas.auth import RegisterRequest
from movie_catalog.services.auth import DuplicateAccountError, register_user


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Create a movie catalog user.")
    parser.add_argument("name", help="Display name (1-120 chars)")
    parser.add_argument("email", help="Login email (must be unique)")
    parser.add_argument("password", help="Password (8-128 chars)")
    parser.add_argument("role", nargs="?", default=ROLE_USER, choices=list(ROLES))
    args = parser.parse_args(argv)

    configure_logging(get_settings().LOG_LEVEL)
    try:
        body = RegisterRequest(name=args.name, email=args.email, password=args.password)
    except ValidationError as e:
        for err in e.errors():
            field = ".".join(str(p) for p in err["loc"])
            print(f"Invalid {field}: {err['msg']}", file=sys.stderr)
        return 1

    db = SessionLocal()
    try:
        user = register_user(db, body.name, body.email, body.password, role=args.role)
    except DuplicateAccountError as e:
        print(e.message, file=sys.stderr)
        return 1
    finally:
        db.close()
    print(f"Created user '{body.email}' (id={user.id}) with role '{args.role}'.")
    return 0


if __name__ == "__main__":
    sys.exit(main())

"""
Create a portal user (e.g. an extra administrator). Run from project root:
  python -m portal.scripts.create_user NAME EMAIL PASSWORD [role]
Example:
  python -m portal.scripts.create_user "Maria Souza" maria@example.gov.br s3cret! Administrador
"""
import argparse
import sys

from portal.core.database import SessionLocal
from portal.core.errors import PortalError
from portal.core.security import ADMIN_ROLE, DEFAULT_ROLE
from portal.services.accounts import create_user


def main() -> int:
    parser = argparse.ArgumentParser(description="Create a portal user (no registration UI).")
    parser.add_argument("name", help="Display name")
    parser.add_argument("email", help="Email (stored lower-cased)")
    parser.add_argument("password", help="Password (at least 6 characters)")
    parser.add_argument("role", nargs="?", default=DEFAULT_ROLE, choices=[DEFAULT_ROLE, ADMIN_ROLE])
    args = parser.parse_args()

    db = SessionLocal()
    try:
        user = create_user(
            db,
            name=args.name,
            email=args.email,
            password=args.password,
            role=args.role,
        )
    except PortalError as e:
        print(e.message, file=sys.stderr)
        return 1
    finally:
        db.close()
    print(f"Created user '{user.email}' (id={user.id}) with role '{user.role}'.")
    return 0


if __name__ == "__main__":
    sys.exit(main())

"""
Create an approved user (e.g. first admin). Run from project root:
  python -m app.scripts.create_user NAME EMAIL PASSWORD [--role ROLE]
Example:
  python -m app.scripts.create_user "Site Admin" admin@example.com 'S3cure-password' --role admin
"""
import argparse
import sys

from app.core.config import get_settings
from app.core.database import SessionLocal
from app.core.errors import ServiceError
from app.core.security import NAME_MAX_LEN, NAME_MIN_LEN, PASSWORD_MAX_LEN, PASSWORD_MIN_LEN
from app.services.roles import get_role_by_name
from app.services.users import create_user


def main() -> int:
    parser = argparse.ArgumentParser(description="Create an approved Portcullis user.")
    parser.add_argument("name", help=f"Display name ({NAME_MIN_LEN}-{NAME_MAX_LEN} chars)")
    parser.add_argument("email", help="Email address (unique)")
    parser.add_argument("password", help=f"Password ({PASSWORD_MIN_LEN}-{PASSWORD_MAX_LEN} chars)")
    parser.add_argument("--role", default=None, help="Role name to assign (e.g. admin)")
    args = parser.parse_args()

    name = args.name.strip()
    if not (NAME_MIN_LEN <= len(name) <= NAME_MAX_LEN):
        print("Invalid name length.", file=sys.stderr)
        return 1
    if not (PASSWORD_MIN_LEN <= len(args.password) <= PASSWORD_MAX_LEN):
        print(f"Password must be {PASSWORD_MIN_LEN}-{PASSWORD_MAX_LEN} characters.", file=sys.stderr)
        return 1

    settings = get_settings()
    db = SessionLocal()
    try:
        role_id = None
        if args.role:
            role = get_role_by_name(db, args.role)
            if role is None:
                print(f"Role '{args.role}' does not exist.", file=sys.stderr)
                return 1
            role_id = role.id
        try:
            user = create_user(
                db,
                name=name,
                email=args.email,
                password=args.password,
                settings=settings,
                role_id=role_id,
                approved=True,
            )
        except ServiceError as e:
            print(e.message, file=sys.stderr)
            return 1
        print(f"Created user '{user.email}' (id={user.id}) with role '{args.role or '-'}'.")
        return 0
    finally:
        db.close()


if __name__ == "__main__":
    sys.exit(main())

"""
Create an account for a province (e.g. an extra admin). Run from project root:
  python -m app.scripts.create_user USERNAME EMAIL PASSWORD PROVINCE [role]
Example:
  python -m app.scripts.create_user maria maria@example.org a-secure-password Huambo admin
"""
import argparse
import sys

from app.core.config import get_settings
from app.core.database import build_engine, build_session_factory
from app.core.errors import AdminLimitExceeded
from app.core.security import PASSWORD_MAX_LEN, PASSWORD_MIN_LEN
from app.models import ROLES
from app.services.accounts import create_user, get_user_by_email, get_user_by_username
from app.services.provinces import get_province_by_name


def main() -> int:
    parser = argparse.ArgumentParser(description="Create a donor-registry account.")
    parser.add_argument("username", help="Username (1-255 chars)")
    parser.add_argument("email", help="Email address")
    parser.add_argument("password", help=f"Password ({PASSWORD_MIN_LEN}-{PASSWORD_MAX_LEN} chars)")
    parser.add_argument("province", help="Province name (e.g. Luanda)")
    parser.add_argument("role", nargs="?", default="leader", choices=list(ROLES))
    args = parser.parse_args()

    username = args.username.strip()
    if not username or len(username) > 255:
        print("Invalid username length.", file=sys.stderr)
        return 1
    if not PASSWORD_MIN_LEN <= len(args.password) <= PASSWORD_MAX_LEN:
        print(
            f"Password must be {PASSWORD_MIN_LEN}-{PASSWORD_MAX_LEN} characters.",
            file=sys.stderr,
        )
        return 1

    settings = get_settings()
    db = build_session_factory(build_engine(settings.DATABASE_URL))()
    try:
        province = get_province_by_name(db, args.province)
        if province is None:
            print(f"Province '{args.province}' not found.", file=sys.stderr)
            return 1
        if get_user_by_username(db, username) or get_user_by_email(db, args.email):
            print(f"User '{username}' or email '{args.email}' already exists.", file=sys.stderr)
            return 1
        try:
            create_user(
                db,
                username=username,
                email=args.email,
                password=args.password,
                name=username,
                role=args.role,
                province_id=province.id,
                is_provisional=False,
                max_admins=settings.MAX_ADMINS_PER_PROVINCE,
            )
        except AdminLimitExceeded as e:
            print(e.message, file=sys.stderr)
            return 1
        print(f"Created user '{username}' with role '{args.role}' in {province.name}.")
        return 0
    finally:
        db.close()


if __name__ == "__main__":
    sys.exit(main())

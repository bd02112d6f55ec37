"""
Create an admin account, or promote an existing user. Run from project root:
  python -m app.scripts.create_admin EMAIL PASSWORD "FULL NAME"
Example:
  python -m app.scripts.create_admin admin@example.com 'Sup3r$ecret' "Site Admin"
"""
import argparse
import sys

from app.database import SessionLocal, init_db
from app.models.user import ROLE_ADMIN
from app.services.password import get_password_hasher
from app.services.users import get_user_store
from app.services.validation import normalize_email, validate_email, validate_full_name, validate_password


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Create an Account Hub admin (no HTTP flow creates admins).")
    parser.add_argument("email", help="Admin email address")
    parser.add_argument("password", help="Password (must pass the strength policy)")
    parser.add_argument("full_name", help="Full name (2-100 chars)")
    args = parser.parse_args(argv)

    email = normalize_email(args.email)
    full_name = args.full_name.strip()
    if not validate_email(email):
        print("Invalid email format.", file=sys.stderr)
        return 1
    for result in (validate_password(args.password), validate_full_name(full_name)):
        if not result.is_valid:
            print(result.message, file=sys.stderr)
            return 1

    init_db()
    store = get_user_store()
    db = SessionLocal()
    try:
        existing = store.get_by_email(db, email)
        if existing:
            if existing.role == ROLE_ADMIN:
                print(f"User '{email}' is already an admin.", file=sys.stderr)
                return 1
            existing.role = ROLE_ADMIN
            store.save(db, existing)
            print(f"Promoted '{email}' to admin.")
            return 0
        store.create(
            db,
            email=email,
            full_name=full_name,
            password_hash=get_password_hasher().hash(args.password),
            role=ROLE_ADMIN,
        )
        print(f"Created admin '{email}'.")
        return 0
    finally:
        db.close()


if __name__ == "__main__":
    sys.exit(main())

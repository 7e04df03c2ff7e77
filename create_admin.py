"""
Script to bootstrap an administrator account.

Run this script from the project root:
    python create_admin.py --username admin --email admin@example.com

The password is prompted for unless --password is given.
"""

import argparse
import getpass
import os
import sys

# Add app to Python path
sys.path.append(os.path.dirname(os.path.abspath(__file__)))

from sqlalchemy.exc import IntegrityError

from app.core.database import SessionLocal, init_db
from app.crud import account as account_crud
from app.models.account import AccountRole


def create_admin(username: str, email: str, password: str) -> int:
    """Create an active admin account and return its id."""
    init_db()
    db = SessionLocal()

    try:
        existing = account_crud.get_by_login(db, username) or account_crud.get_by_login(db, email)
        if existing:
            print(f"Account already exists: {existing.username} (role: {existing.role.value})")
            return 1

        account = account_crud.create(db, username=username, email=email, password=password, role=AccountRole.ADMIN)
        db.commit()

        print(f"\n{'='*60}")
        print(f"Admin account created: {account.username} (id: {account.id})")
        print(f"{'='*60}\n")
        return 0

    except IntegrityError as e:
        db.rollback()
        print(f"Failed to create admin account: {e.orig}")
        return 1

    finally:
        db.close()


def main() -> int:
    parser = argparse.ArgumentParser(description="Create an administrator account")
    parser.add_argument("--username", required=True)
    parser.add_argument("--email", required=True)
    parser.add_argument("--password", help="Prompted for when omitted")
    args = parser.parse_args()

    password = args.password or getpass.getpass("Password: ")
    if len(password) < 8:
        print("Password must be at least 8 characters")
        return 1

    return create_admin(args.username, args.email, password)


if __name__ == "__main__":
    sys.exit(main())

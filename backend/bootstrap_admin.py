"""
Bootstrap an admin account.

Registration through the API only ever creates ``user`` accounts; run this
once per environment to create the first admin:

    python bootstrap_admin.py --name admin --password 'a-strong-password'

or with environment variables:

    ADMIN_NAME=admin ADMIN_PASSWORD='a-strong-password' python bootstrap_admin.py

If the account already exists it is promoted to admin, reactivated, and its
password reset (which signs it out everywhere).
"""
import argparse
import os
import sys
from typing import Tuple

from sqlalchemy.orm import Session

from teachme.database import SessionLocal
from teachme.errors import AuthServiceError
from teachme.models.account import Account
from teachme.security import credentials


def bootstrap_admin(db: Session, name: str, password: str) -> Tuple[Account, str]:
    """Create or promote ``name`` as an admin. Returns (account, 'created' | 'updated')."""
    # Reject a bad password before anything is committed
    credentials.check_password(password)

    existing = credentials.get_by_name(db, name)
    if existing is None:
        account = credentials.register(db, name, password, role="admin")
        return account, "created"

    credentials.set_password(db, existing, password)
    account = credentials.set_account_state(db, existing.account_id, is_active=True, role="admin")
    return account, "updated"


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Create or promote a teachme admin account")
    parser.add_argument("--name", default=os.getenv("ADMIN_NAME"), help="Login name (env: ADMIN_NAME)")
    parser.add_argument("--password", default=os.getenv("ADMIN_PASSWORD"), help="Password (env: ADMIN_PASSWORD)")
    args = parser.parse_args(argv)

    if not args.name or not args.password:
        parser.error("both --name and --password (or ADMIN_NAME / ADMIN_PASSWORD) are required")

    db = SessionLocal()
    try:
        account, status = bootstrap_admin(db, args.name, args.password)
        print(f"  Admin {status}: {account.name} ({account.account_id})")
    except AuthServiceError as exc:
        print(f"  ERROR: {exc.message}", file=sys.stderr)
        return 1
    finally:
        db.close()

    return 0


if __name__ == "__main__":
    sys.exit(main())

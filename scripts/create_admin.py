#!/usr/bin/env python3
"""Create an admin account, or reset the password of an existing one."""

import argparse
import getpass
import sys

from framerr.auth import hash_password
from framerr.core.constants import GROUP_ADMIN
from framerr.extensions import SessionLocal, engine
from framerr.models import Base, User


def main() -> int:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("username")
    parser.add_argument("--password", help="Prompted for when omitted")
    parser.add_argument("--display-name")
    args = parser.parse_args()

    password = args.password or getpass.getpass("Password: ")
    if not password:
        print("Password must not be empty", file=sys.stderr)
        return 1

    Base.metadata.create_all(bind=engine)
    with SessionLocal() as db:
        user = User.find_by_username(db, args.username)
        if user is None:
            user = User(username=args.username, is_setup_admin=True)
            db.add(user)
            action = "Created"
        else:
            action = "Updated"
        user.group = GROUP_ADMIN
        user.password_hash = hash_password(password)
        if args.display_name:
            user.display_name = args.display_name
        db.commit()
        print(f"{action} admin {user.username} (ID: {user.id})")
    return 0


if __name__ == "__main__":
    sys.exit(main())

#!/usr/bin/env python3
"""
Create the demo accounts (superadmin, admin, faculty, trainer, student) if they are missing.
Run from backend dir with project venv active: python scripts/seed_users.py
"""
import logging
import sys
from pathlib import Path

BACKEND = Path(__file__).resolve().parent.parent
if str(BACKEND) not in sys.path:
    sys.path.insert(0, str(BACKEND))


def main() -> int:
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")
    from faculty_portal.database import SessionLocal, check_connection, init_db
    from faculty_portal.services.users import DEMO_USERS, seed_demo_users

    if not check_connection():
        return 1
    init_db()
    db = SessionLocal()
    try:
        created = seed_demo_users(db)
    finally:
        db.close()
    passwords = {u["username"]: u["password"] for u in DEMO_USERS}
    for username in created:
        print(f"created {username} / {passwords[username]}")
    if not created:
        print("all demo users already exist")
    return 0


if __name__ == "__main__":
    sys.exit(main())

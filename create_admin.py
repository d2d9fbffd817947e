#!/usr/bin/env python3
"""
Admin Bootstrap Script

Creates the first administrator account, or promotes an existing user to admin.
Admin rights can't be granted through the API, so run this once after deployment.

Usage:
    python create_admin.py --email admin@ghumakkadyatri.com --name "Site Admin" --password <password>
    python create_admin.py --email existing.user@example.org --promote
"""

import argparse
import os
import sys

from src.database import SessionLocal, init_db
from src.models import UserRole
from src.auth.service import UserService
from src.exceptions import AppError

def create_or_promote(email: str, name: str = None, password: str = None, promote: bool = False) -> int:
    db = SessionLocal()
    try:
        user = UserService.get_user_by_email(db, email)
        if user:
            if user.is_admin:
                print(f"✅ {user.email} is already an admin, skipping...")
                return 0
            if not promote:
                print(f"❌ {user.email} already exists; pass --promote to grant admin rights")
                return 1
            UserService.set_role(db, user, UserRole.ADMIN)
            print(f"✅ Promoted {user.email} to admin")
            return 0

        if not name or not password:
            print("❌ --name and --password are required to create a new admin")
            return 1

        user = UserService.register(db, name=name, email=email, password=password, role=UserRole.ADMIN)
        print(f"✅ Created admin {user.email} (id {user.id})")
        return 0
    except AppError as e:
        print(f"❌ {e.message}")
        return 1
    finally:
        db.close()

def main():
    parser = argparse.ArgumentParser(description="Create or promote an administrator account")
    parser.add_argument("--email", default=os.getenv("ADMIN_EMAIL"), help="Admin email (or ADMIN_EMAIL)")
    parser.add_argument("--name", default=os.getenv("ADMIN_NAME"), help="Display name for a new admin")
    parser.add_argument("--password", default=os.getenv("ADMIN_PASSWORD"), help="Password for a new admin")
    parser.add_argument("--promote", action="store_true", help="Promote an existing user instead of failing")
    args = parser.parse_args()

    if not args.email:
        parser.error("--email is required")

    print("🔧 Ensuring database tables exist...")
    init_db()
    sys.exit(create_or_promote(args.email, args.name, args.password, args.promote))

if __name__ == "__main__":
    main()

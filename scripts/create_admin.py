"""
Create Admin User

Creates a fair director or website manager account. Admin accounts have no
role profile and are created pre-verified.

Usage:
    python scripts/create_admin.py admin@example.org --role director
    ADMIN_PASSWORD=... python scripts/create_admin.py admin@example.org

The password is read from ADMIN_PASSWORD, or prompted for when unset.
"""

import argparse
import asyncio
import getpass
import os
import sys
from pathlib import Path

# Add the src directory to the path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from symposium.core.config import settings
from symposium.core.database import create_engine, create_session_maker
from symposium.core.roles import ADMIN_ROLES, UserRole
from symposium.core.security import hash_password
from symposium.modules.users.repository import UserRepository


async def create_admin(email: str, password: str, role: UserRole) -> None:
    """Create the admin user if the email is not registered yet."""
    engine = create_engine(settings.database_url)
    session_maker = create_session_maker(engine)

    async with session_maker() as db:
        existing_user = await UserRepository.get_by_email(db, email)
        if existing_user:
            print(f"User already exists: {email}")
            print(f"  ID: {existing_user.id}")
            print(f"  Role: {existing_user.role.value}")
            await engine.dispose()
            return

        admin_user = await UserRepository.create(
            db,
            email=email.strip().lower(),
            password_hash=hash_password(password),
            role=role,
            email_verified=True,
        )
        await db.commit()

        print("Admin created successfully!")
        print(f"  Email: {admin_user.email}")
        print(f"  ID: {admin_user.id}")
        print(f"  Role: {admin_user.role.value}")

    await engine.dispose()


def main() -> None:
    parser = argparse.ArgumentParser(description="Create a director or manager account.")
    parser.add_argument("email")
    parser.add_argument(
        "--role",
        choices=sorted(role.value for role in ADMIN_ROLES),
        default=UserRole.DIRECTOR.value,
    )
    args = parser.parse_args()

    password = os.environ.get("ADMIN_PASSWORD") or getpass.getpass("Password: ")
    if len(password) < 8:
        parser.error("password must be at least 8 characters")

    asyncio.run(create_admin(args.email, password, UserRole(args.role)))


if __name__ == "__main__":
    main()

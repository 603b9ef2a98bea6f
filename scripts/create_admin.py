#!/usr/bin/env python3
"""Create (or promote) a user and print an access token for it.

Usage:
    python scripts/create_admin.py
    python scripts/create_admin.py --email ops@haulbook.in --name "Ops Desk"
    python scripts/create_admin.py --email rider@haulbook.in --role CUSTOMER
"""

import argparse
import asyncio

from sqlalchemy import select

from haulbook.core.permissions import UserRole
from haulbook.core.security import create_user_token
from haulbook.database import get_db_context
from haulbook.models.user import User


async def create_user(email: str, full_name: str, role: UserRole) -> str:
    """Create the user if it doesn't exist, then return a token for it."""
    async with get_db_context() as session:
        result = await session.execute(select(User).where(User.email == email.lower()))
        user = result.scalar_one_or_none()

        if user:
            user.role = role.value
            user.is_active = True
            user.full_name = full_name
            print(f"Updated existing user: {email}")
        else:
            user = User(email=email.lower(), full_name=full_name, role=role.value, is_active=True)
            session.add(user)
            print(f"Created user: {email}")

        await session.flush()
        token = create_user_token(str(user.id), user.email, user.role)

    print(f"ID: {user.id}")
    print(f"Role: {role.value}")
    return token


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Create a user and print a bearer token")
    parser.add_argument("--email", default="admin@haulbook.in", help="User email")
    parser.add_argument("--name", default="HaulBook Admin", help="Full name")
    parser.add_argument(
        "--role",
        default=UserRole.ADMIN.value,
        choices=[role.value for role in UserRole],
        help="User role",
    )

    args = parser.parse_args()

    token = asyncio.run(create_user(args.email, args.name, UserRole(args.role)))
    print(f"Token: {token}")

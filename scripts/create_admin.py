"""
Create an admin account, or promote an existing user to admin.

Admins get both the admin role (pet and application management) and the
fastapi-users superuser flag (the /api/auth/users/{id} routes).

Reads ADMIN_EMAIL, ADMIN_PASSWORD and ADMIN_NAME from the environment.
The password is only used when the account does not exist yet.

    ADMIN_EMAIL=admin@example.com ADMIN_PASSWORD=change-me python -m scripts.create_admin
"""
import asyncio
import os

from fastapi_users.password import PasswordHelper
from sqlalchemy import func, select

from app.database import async_session_maker
from app.models.enums import UserRole
from app.models.user import User


async def create_admin(email: str, password: str, name: str) -> None:
    password_helper = PasswordHelper()

    async with async_session_maker() as session:
        result = await session.execute(
            select(User).where(func.lower(User.email) == email.lower())
        )
        user = result.scalar_one_or_none()

        if user is not None:
            if user.role == UserRole.ADMIN.value and user.is_superuser:
                print(f"User {email} is already an admin")
                return
            user.role = UserRole.ADMIN.value
            user.is_superuser = True
            await session.commit()
            print(f"✓ Promoted {email} to admin")
            return

        if not password:
            print("✗ ADMIN_PASSWORD is required to create a new admin")
            return

        session.add(User(
            email=email,
            hashed_password=password_helper.hash(password),
            name=name,
            role=UserRole.ADMIN.value,
            is_active=True,
            is_superuser=True,
            is_verified=True,
        ))
        await session.commit()

        print(f"✓ Admin created: {email}")


if __name__ == "__main__":
    asyncio.run(create_admin(
        email=os.environ["ADMIN_EMAIL"],
        password=os.environ.get("ADMIN_PASSWORD", ""),
        name=os.environ.get("ADMIN_NAME", "Administrator"),
    ))

"""
Script to create an organization and an ADMIN user with a password for local testing.

    python -m app.scripts.create_local_admin --email admin@example.com --password secret123
"""

import argparse
import asyncio

import structlog
from sqlmodel import select

from app.core.auth import hash_password
from app.core.database import get_session_context, init_db
from app.models.organization import Organization
from app.models.user import User
from desk_planner_shared.schemas.common import UserRole

log = structlog.get_logger()


async def create_admin(email: str, password: str, org_name: str) -> User:
    await init_db()

    async with get_session_context() as session:
        result = await session.execute(select(Organization).where(Organization.name == org_name))
        org = result.scalars().first()
        if not org:
            org = Organization(name=org_name)
            session.add(org)
            await session.flush()
            log.info("org.created", org_id=org.id, name=org_name)

        result = await session.execute(select(User).where(User.email == email))
        user = result.scalar_one_or_none()
        if not user:
            user = User(email=email, name=email.split("@")[0])
            log.info("user.created", email=email)
        else:
            log.info("user.exists", email=email, user_id=user.id)

        user.password_hash = hash_password(password)
        user.user_role = UserRole.ADMIN
        user.organization_id = org.id
        session.add(user)
        await session.flush()

    log.info("user.admin_ready", email=email, user_id=user.id, org_id=org.id)
    return user


def main() -> None:
    parser = argparse.ArgumentParser(description="Create a local admin user.")
    parser.add_argument("--email", required=True, help="Email address for the user")
    parser.add_argument("--password", required=True, help="Password for the user")
    parser.add_argument("--org", default="Default Organization", help="Organization name")

    args = parser.parse_args()

    asyncio.run(create_admin(args.email, args.password, args.org))


if __name__ == "__main__":
    main()

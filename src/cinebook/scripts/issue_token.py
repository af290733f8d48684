"""Print a bearer token for an existing user.

Usage: python -m cinebook.scripts.issue_token demo@cinebook.dev
"""

import argparse
import asyncio
import logging

from sqlalchemy import select

from cinebook.database import AsyncSessionLocal
from cinebook.models import User
from cinebook.security import create_access_token

logging.basicConfig(level=logging.INFO, format="%(levelname)s %(message)s")
logger = logging.getLogger(__name__)


async def issue_token(email: str, expires_minutes: int | None = None) -> str | None:
    async with AsyncSessionLocal() as db:
        user = await db.scalar(select(User).where(User.email == email))

    if user is None:
        logger.error(f"No user with email {email!r}")
        return None

    return create_access_token({"userId": user.id, "email": user.email}, expires_minutes)


def main() -> None:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("email")
    parser.add_argument("--expires-minutes", type=int, default=None)
    args = parser.parse_args()

    token = asyncio.run(issue_token(args.email, args.expires_minutes))
    if token is None:
        raise SystemExit(1)
    print(token)


if __name__ == "__main__":
    main()

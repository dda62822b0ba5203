#!/usr/bin/env python3
"""
Create the `users` table if it is missing, optionally printing one account's
session state afterwards.
Usage:
    python -m scripts.init_db [email]
"""
import sys
import asyncio

from services import db
from services.users import SqlCredentialStore


async def init_db(email: str | None = None) -> None:
    await db.init_models()
    print("✓ users table ready")

    if email:
        store = SqlCredentialStore(await db.session_factory())
        user = await store.get(email)
        if user is None:
            print(f"· no account for {email}")
        else:
            print(
                f"· {email}: userId={user.user_id} "
                f"isLoggedIn={user.is_logged_in} lastLogin={user.last_login}"
            )
    await db.dispose_engine()


def main():
    if len(sys.argv) > 2:
        print("Usage: python -m scripts.init_db [email]")
        sys.exit(1)

    asyncio.run(init_db(sys.argv[1] if len(sys.argv) == 2 else None))


if __name__ == "__main__":
    main()

"""Reset a user's password from the command line.

Usage: python scripts/reset_password.py EMAIL NEW_PASSWORD
"""
import asyncio
import sys

sys.path.insert(0, ".")

from src.database import async_session_maker, close_db
from src.kernel.identity.converter import normalize_email
from src.kernel.identity.password import hash_password
from src.kernel.identity.repository import SqlAlchemyIdentityRepository


async def reset_password(email: str, new_password: str) -> bool:
    async with async_session_maker() as session:
        repository = SqlAlchemyIdentityRepository(session)
        user = await repository.find_by_email(normalize_email(email))
        if user is None:
            return False
        user.password_hash = hash_password(new_password)
        await repository.save(user)
        await session.commit()
    return True


async def main(argv: list[str]) -> int:
    if len(argv) != 3 or not argv[2]:
        print(__doc__.strip())
        return 2
    try:
        updated = await reset_password(argv[1], argv[2])
    finally:
        await close_db()
    if not updated:
        print(f"No user with email {argv[1]}")
        return 1
    print(f"Password updated for {argv[1]}")
    return 0


if __name__ == "__main__":
    sys.exit(asyncio.run(main(sys.argv)))

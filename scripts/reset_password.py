"""Reset a staff member's password.

Usage:
    python scripts/reset_password.py <email>
    python scripts/reset_password.py <email> --password <new_password>

If --password is not provided, a random 12-character password will be generated.
Works against whichever store STORE_BACKEND selects.
"""

import argparse
import asyncio
import secrets
import string
import sys

from schedulehub.auth.service import change_password, normalize_email
from schedulehub.scripting import open_store


def generate_random_password(length: int = 12) -> str:
    alphabet = string.ascii_letters + string.digits
    return "".join(secrets.choice(alphabet) for _ in range(length))


async def reset_password(email: str, new_password: str | None) -> int:
    async with open_store() as store:
        account = await store.staff.get_by_email(normalize_email(email))
        if account is None:
            print(f"[ERROR] Account not found: {email}")
            return 1

        password = new_password or generate_random_password()
        await change_password(store.staff, account.id, password)

    print(f"[OK] Password reset for {account.email}")
    print(f"     New password: {password}")
    print()
    print("Please provide this password to the staff member securely.")
    return 0


def main():
    parser = argparse.ArgumentParser(description="Reset a staff member's password")
    parser.add_argument("email", help="Staff email (e.g. john@schedule.com)")
    parser.add_argument("--password", "-p", help="New password (random if omitted)")
    args = parser.parse_args()

    if args.password and len(args.password) < 8:
        print("[ERROR] Password must be at least 8 characters.")
        sys.exit(1)

    sys.exit(asyncio.run(reset_password(args.email, args.password)))


if __name__ == "__main__":
    main()

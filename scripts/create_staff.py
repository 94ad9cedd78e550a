"""Create a staff or admin account from the command line.

Usage:
    python scripts/create_staff.py "Jane Smith" jane@schedule.com --role admin
    python scripts/create_staff.py "John Doe" john@schedule.com --password staff123

Useful for bootstrapping the first admin on a store started with
SEED_DEMO_DATA=false.
"""

import argparse
import asyncio
import secrets
import string
import sys

from schedulehub.auth.service import hash_password, normalize_email
from schedulehub.exceptions import DuplicateEmail
from schedulehub.schemas import Role
from schedulehub.scripting import open_store


def generate_random_password(length: int = 12) -> str:
    alphabet = string.ascii_letters + string.digits
    return "".join(secrets.choice(alphabet) for _ in range(length))


async def create_staff(name: str, email: str, role: str, password: str | None) -> int:
    password = password or generate_random_password()
    async with open_store() as store:
        try:
            staff_id = await store.staff.create(
                name=name.strip(),
                email=normalize_email(email),
                role=Role(role),
                password_hash=hash_password(password),
            )
        except DuplicateEmail:
            print(f"[ERROR] Email already exists: {email}")
            return 1

    print(f"[OK] Created {role} account #{staff_id} for {normalize_email(email)}")
    print(f"     Password: {password}")
    return 0


def main():
    parser = argparse.ArgumentParser(description="Create a staff account")
    parser.add_argument("name", help="Display name")
    parser.add_argument("email", help="Login email")
    parser.add_argument("--role", "-r", choices=[r.value for r in Role], default=Role.STAFF.value)
    parser.add_argument("--password", "-p", help="Password (random if omitted)")
    args = parser.parse_args()

    if args.password and len(args.password) < 8:
        print("[ERROR] Password must be at least 8 characters.")
        sys.exit(1)

    sys.exit(asyncio.run(create_staff(args.name, args.email, args.role, args.password)))


if __name__ == "__main__":
    main()

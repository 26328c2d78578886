#!/usr/bin/env python3
"""CLI script to create users.

Usage:
    uv run python scripts/create_user.py "Alice" alice@example.com password123
    uv run python scripts/create_user.py "Bob" bob@example.com password123 --activated
"""

import argparse
import asyncio
import sys
from pathlib import Path

# Add project root to path so we can import src
sys.path.insert(0, str(Path(__file__).parent.parent))

from pydantic import SecretStr
from pydantic import ValidationError as PydanticValidationError

from src.config import Settings
from src.infrastructure.database.connection import init_database
from src.infrastructure.observability import configure_logging
from src.modules.users.exceptions import UserError, ValidationError
from src.modules.users.repository import UserRepository
from src.modules.users.schemas import UserCreate
from src.modules.users.service import UserService


async def create_user(
    name: str, email: str, password: str, *, activated: bool = False
) -> int:
    """Create a user in the database.

    Args:
        name: Display name.
        email: User's email address.
        password: User's password (will be hashed).
        activated: Whether to activate the account right away.

    Returns:
        Process exit code.
    """
    settings = Settings()
    configure_logging(settings.log_level, json_logs=settings.log_json)

    db = await init_database(settings.database_path)

    try:
        repo = UserRepository(db, timeout_seconds=settings.database_timeout_seconds)
        service = UserService(repo, bcrypt_rounds=settings.bcrypt_rounds)

        user = await service.register(
            UserCreate(name=name, email=email, password=SecretStr(password))
        )

        if activated:
            user.activated = True
            await repo.update(user)

        state = "active" if user.activated else "pending activation"
        print(f"✓ Created user: {user.email} ({state})")
        print(f"  User ID: {user.id}")
        print(f"  Created at: {user.created_at}")
        return 0

    except PydanticValidationError as e:
        for error in e.errors():
            field = ".".join(str(part) for part in error["loc"])
            print(f"✗ {field}: {error['msg']}", file=sys.stderr)
        return 1
    except ValidationError as e:
        for field, reason in e.errors.items():
            print(f"✗ {field}: {reason}", file=sys.stderr)
        return 1
    except UserError as e:
        print(f"✗ Error: {e}", file=sys.stderr)
        return 1
    finally:
        await db.disconnect()


def main() -> None:
    """Parse arguments and create user."""
    parser = argparse.ArgumentParser(
        description="Create a user account",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Create a user awaiting activation
  uv run python scripts/create_user.py "Alice" alice@example.com mypassword

  # Create an already activated user
  uv run python scripts/create_user.py "Bob" bob@example.com mypassword --activated
        """,
    )

    parser.add_argument("name", help="User's display name")
    parser.add_argument("email", help="User's email address")
    parser.add_argument("password", help="User's password (8 to 72 bytes)")
    parser.add_argument(
        "--activated",
        action="store_true",
        help="Create the user already activated",
    )

    args = parser.parse_args()

    sys.exit(
        asyncio.run(
            create_user(args.name, args.email, args.password, activated=args.activated)
        )
    )


if __name__ == "__main__":
    main()

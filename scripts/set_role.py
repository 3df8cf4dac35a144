import argparse
import os
import sys
from pathlib import Path

from dotenv import load_dotenv

from socialfeed.domain.models import UserRole
from socialfeed.infrastructure.persistence.sqlite import SQLitePersistence


def main() -> int:
    load_dotenv()

    parser = argparse.ArgumentParser(description="Change the role of an existing account.")
    parser.add_argument("email", help="E-mail of the account to update")
    parser.add_argument("role", choices=[role.value for role in UserRole])
    args = parser.parse_args()

    database_path = Path(os.getenv("DATABASE_PATH", "data/socialfeed.db")).resolve()
    persistence = SQLitePersistence(database_path)
    try:
        user = persistence.get_user_by_email(args.email)
        if not user:
            print(f"No account registered with {args.email}.", file=sys.stderr)
            return 1
        updated = persistence.update_user_role(user.id, UserRole(args.role))
    finally:
        persistence.close()

    print(f"{updated.email} ({updated.username}) is now {updated.role.value}.")
    return 0


if __name__ == "__main__":
    sys.exit(main())

"""
Create a user without going through the HTTP API. Run from project root:
  python -m app.scripts.create_user USERNAME EMAIL PASSWORD
Example:
  python -m app.scripts.create_user alice alice@example.com your-secure-password
"""
import argparse
import logging
import sys

from app.core.database import SessionLocal
from app.core.errors import BlogError
from app.services.credentials import register

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
    datefmt="%Y-%m-%dT%H:%M:%SZ",
)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Create a Quill user.")
    parser.add_argument("username", help="Username (3-20 letters, digits or underscores)")
    parser.add_argument("email", help="Email address")
    parser.add_argument("password", help="Password (6-128 chars)")
    args = parser.parse_args(argv)

    db = SessionLocal()
    try:
        user = register(db, args.username, args.email, args.password)
    except BlogError as e:
        print(e.message, file=sys.stderr)
        return 1
    finally:
        db.close()
    print(f"Created user '{user.username}' <{user.email}> with id {user.id}.")
    return 0


if __name__ == "__main__":
    sys.exit(main())

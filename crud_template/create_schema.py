"""Create the database schema and insert the seed accounts.

Usage:
    python -m crud_template.create_schema
"""
import sys

from sqlalchemy.exc import SQLAlchemyError

from crud_template.migrations import ensure_user_schema


def main() -> None:
    try:
        inserted = ensure_user_schema()
    except SQLAlchemyError as exc:
        print("Schema creation failed:", exc, file=sys.stderr)
        sys.exit(1)
    print(f"Schema ready ({inserted} seed accounts inserted).")


if __name__ == "__main__":
    main()

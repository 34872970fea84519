#!/usr/bin/env python3
"""
Script to create a dining table in the database.
If a table with the same code exists, it is reused.
"""
import sys
from sqlmodel import Session

from crud.dining_tables import create_table, get_table_by_code
from db.session import SessionLocal, create_db_and_tables
from models.dining_tables import DiningTable
from schemas.dining_tables import DiningTableCreate


def get_or_create_table(
    db: Session,
    code: str,
    name: str | None = None,
    description: str | None = None
) -> tuple[DiningTable, bool]:
    """Get existing table or create a new one. Returns (table, created)."""
    existing_table = get_table_by_code(db, code)

    if existing_table:
        print(f"✓ Using existing table: {existing_table.code} (ID: {existing_table.id})")
        return existing_table, False

    table = create_table(
        db,
        DiningTableCreate(code=code, name=name, description=description)
    )
    print(f"✓ Created new table: {table.code} (ID: {table.id})")
    return table, True


def main():
    """Main function to create a dining table."""
    import argparse

    parser = argparse.ArgumentParser(
        description="Create a dining table in the database"
    )
    parser.add_argument(
        "--code",
        type=str,
        default="1",
        help="Short table code printed on the QR card (default: 1)"
    )
    parser.add_argument(
        "--name",
        type=str,
        default=None,
        help="Optional display name, e.g. 'Terraza 1'"
    )
    parser.add_argument(
        "--description",
        type=str,
        default=None,
        help="Optional free text description"
    )

    args = parser.parse_args()

    create_db_and_tables()
    db = SessionLocal()

    try:
        table, _ = get_or_create_table(
            db,
            code=args.code,
            name=args.name,
            description=args.description
        )

        print("\n" + "="*60)
        print("✓ Success! Dining table created/retrieved:")
        print("="*60)
        print(f"  Table ID: {table.id}")
        print(f"  Code: {table.code}")
        print(f"  Name: {table.name or '-'}")
        print(f"  Needs attention: {table.needs_attention}")
        print("="*60)
        print("\nYou can now print its QR card with create_table_qr.py:")
        print(f"  --table-id {table.id}")

    except Exception as e:
        print(f"✗ Error: {e}")
        db.rollback()
        sys.exit(1)
    finally:
        db.close()


if __name__ == "__main__":
    main()

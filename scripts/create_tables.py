#!/usr/bin/env python3
"""
Database Setup: Create the remote store tables

Creates charging_sessions, vehicle_expenses and profiles for signed-in users.

Usage:
    DATABASE_URL=postgresql://... python scripts/create_tables.py

This script is idempotent - safe to run multiple times.
"""

import os
import sys

sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "tracker"))

from config import Config  # noqa: E402
from models import ChargingSession, Profile, VehicleExpense, get_engine  # noqa: E402
from sqlalchemy import inspect  # noqa: E402

MODELS = (ChargingSession, VehicleExpense, Profile)


def create_table(engine, model):
    """Create one table unless it already exists."""
    table_name = model.__tablename__
    if inspect(engine).has_table(table_name):
        print(f"✓ {table_name} table already exists")
        return False

    print(f"📝 Creating {table_name} table...")
    model.__table__.create(engine, checkfirst=True)
    print(f"✅ Successfully created {table_name} table!")
    return True


def verify_tables(engine):
    """Print the column layout of each table."""
    inspector = inspect(engine)

    print("\n🔍 Verifying table structures...\n")

    for model in MODELS:
        columns = inspector.get_columns(model.__tablename__)
        if columns:
            print(f"✓ {model.__tablename__}:")
            for column in columns:
                print(f"  - {column['name']}: {column['type']}")
            print()
        else:
            print(f"⚠️  Warning: Could not verify {model.__tablename__} structure\n")


if __name__ == "__main__":
    try:
        print("=" * 60)
        print("Database Setup: EVC Track remote store")
        print("=" * 60)
        print()

        engine = get_engine(Config.DATABASE_URL)

        created_count = sum(create_table(engine, model) for model in MODELS)

        if created_count > 0:
            verify_tables(engine)
            print("\n" + "=" * 60)
            print(f"Setup complete! Created {created_count} new table(s)")
            print("=" * 60)
        else:
            print("\n" + "=" * 60)
            print("All tables already exist - nothing to do!")
            print("=" * 60)

    except Exception as e:
        print(f"\n❌ Error: {e}", file=sys.stderr)
        import traceback

        traceback.print_exc()
        sys.exit(1)

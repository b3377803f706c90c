# scripts/setup/init_db.py
"""
Initialize database: creates all tables, optionally loads the sample fleet.
Run once before first launch, or after adding new models.
Usage: python scripts/setup/init_db.py [--seed]
"""

import sys
import os
import argparse
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", ".."))

from sqlalchemy import inspect, text
from intake.database import create_tables, engine, SessionLocal
from intake.config import settings
from intake.fixtures.sample_fleet import seed_sample_fleet


def main():
    parser = argparse.ArgumentParser(description="Create intake tables")
    parser.add_argument("--seed", action="store_true", help="Load the sample fleet into an empty database")
    args = parser.parse_args()

    print("🗄️  Intake DB Initialization")
    print("=" * 40)
    print(f"📡 Database: {settings.DATABASE_URL}")

    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        print("✅ Database connection OK")
    except Exception as e:
        print(f"❌ Cannot connect to database: {e}")
        sys.exit(1)

    print("\n📋 Creating tables...")
    create_tables()
    print("✅ All tables created")

    if args.seed:
        db = SessionLocal()
        try:
            added = seed_sample_fleet(db)
        finally:
            db.close()
        print(f"🚗 Sample fleet: {added} vehicles added" if added else "🚗 Sample fleet skipped (data present)")

    tables = sorted(inspect(engine).get_table_names())
    print(f"\n📊 Tables in database ({len(tables)} total):")
    for t in tables:
        print(f"   ✓ {t}")

    print("\n🎉 Database ready! You can now start the backend:")
    print("   uvicorn intake.main:app --host 0.0.0.0 --port 8080 --reload")


if __name__ == "__main__":
    main()

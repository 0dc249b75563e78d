"""
Initialize database - creates all tables and seeds demo users + gates.
Run once before first launch, or after adding new models.
Usage: python scripts/setup/init_db.py [--no-seed]
"""

import argparse
import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", ".."))

from sqlalchemy import inspect, text
from app.database import SessionLocal, create_tables, engine
from app.config import settings
from app.services.repository import EntityRepository
from app.services.seed_service import seed_demo_data


def main():
    parser = argparse.ArgumentParser(description="Create tables and seed demo data")
    parser.add_argument("--no-seed", action="store_true", help="Skip demo users and gates")
    args = parser.parse_args()

    print("🗄️  Campus Gate DB Initialization")
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
    tables = sorted(inspect(engine).get_table_names())
    print(f"✅ Tables in database ({len(tables)} total):")
    for t in tables:
        print(f"   ✓ {t}")

    if not args.no_seed:
        db = SessionLocal()
        try:
            seeded = seed_demo_data(EntityRepository(db))
        finally:
            db.close()
        print("\n🌱 Demo users + gates seeded" if seeded else "\nℹ️  Existing data found - seed skipped")

    print("\n🎉 Database ready! You can now start the backend:")
    print(f"   uvicorn app.main:app --host {settings.BACKEND_IP} --port {settings.BACKEND_PORT} --reload")


if __name__ == "__main__":
    main()

# scripts/setup/init_db.py
"""
Initialize database: creates all tables.
Run once before first launch, or after adding new models.
Usage: python scripts/setup/init_db.py
"""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", ".."))

from sqlalchemy import inspect, text
from cybertaxi.database import create_tables, engine
from cybertaxi.config import settings


def main():
    print("CyberTaxi DB Initialization")
    print("=" * 40)
    print(f"Database: {engine.url.render_as_string(hide_password=True)}")

    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        print("Database connection OK")
    except Exception as e:
        print(f"Cannot connect to database: {e}")
        print("\nMake sure MySQL is running and the user exists:")
        print("  CREATE DATABASE cybertaxi_db CHARACTER SET utf8mb4;")
        print("  CREATE USER 'cybertaxi_user'@'localhost' IDENTIFIED BY '...';")
        print("  GRANT ALL PRIVILEGES ON cybertaxi_db.* TO 'cybertaxi_user'@'localhost';")
        sys.exit(1)

    print("\nCreating tables...")
    create_tables()

    tables = sorted(inspect(engine).get_table_names())
    print(f"\nTables in database ({len(tables)} total):")
    for t in tables:
        print(f"   - {t}")

    print("\nDatabase ready! Start the backend with:")
    print(f"   uvicorn cybertaxi.main:app --host {settings.BACKEND_IP} --port {settings.BACKEND_PORT} --reload")


if __name__ == "__main__":
    main()

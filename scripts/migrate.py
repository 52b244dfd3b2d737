# scripts/migrate.py
import sys
import os
import logging
sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))
from dotenv import load_dotenv

# Load env before building the engine
load_dotenv(".env.local")

from database.db import build_engine
from database.migrations import run_migrations, get_schema_version


def migrate():
    print("Running catalog migrations...")
    engine = build_engine()
    try:
        results = run_migrations(engine)
        refused = [r for r in results if not r.applied]
        for r in results:
            status = "✅ applied" if r.applied else f"❌ refused: {r.error}"
            print(f" - {r.migration_name}: {status}")
        print(f"Schema version: {get_schema_version(engine)}")
        if refused:
            sys.exit(1)
    finally:
        engine.dispose()


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    migrate()

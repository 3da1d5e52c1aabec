"""
Initialize the PostgreSQL schema and optionally load data into it.

    python scripts/init_postgres.py            # create tables
    python scripts/init_postgres.py --seed     # + default datasets for empty tables
    python scripts/init_postgres.py --import-local
                                               # + copy local fallback documents into the database
"""
import sys
import os
import argparse

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from core.database import engine, init_db, SessionLocal
from core.stores import COLLECTIONS, get_local_store
from utils.fallback_store import FallbackStore


def _remote_store(name: str) -> FallbackStore:
    model, seed, prefix = COLLECTIONS[name]
    return FallbackStore(name, local=get_local_store(), model=model, session_factory=SessionLocal, seed=seed, id_prefix=prefix)


def _count(model) -> int:
    db = SessionLocal()
    try:
        return db.query(model).count()
    finally:
        db.close()


def seed_tables():
    for name, (model, seed, _) in COLLECTIONS.items():
        if not seed:
            continue
        if _count(model):
            print(f"  - {name}: already has rows, skipped")
            continue
        _remote_store(name).replace_all(seed)
        print(f"  - {name}: {len(seed)} rows")


def import_local():
    local = get_local_store()
    for name, (model, _, _) in COLLECTIONS.items():
        docs = local.read(name)
        if not isinstance(docs, list) or not docs:
            continue
        store = _remote_store(name)
        for rec in docs:
            store.upsert(rec)
        print(f"  - {name}: {len(docs)} records imported")


def main():
    parser = argparse.ArgumentParser(description="Create tables and load data")
    parser.add_argument("--seed", action="store_true", help="load default datasets into empty tables")
    parser.add_argument("--import-local", action="store_true", help="copy local fallback documents into the database")
    args = parser.parse_args()

    if engine is None:
        print("✗ DATABASE_URL is not set")
        sys.exit(1)

    print("Creating PostgreSQL tables...")
    if not init_db():
        print("✗ Error creating tables (see log)")
        sys.exit(1)
    print("✓ Tables created successfully!")

    if args.seed:
        print("\nSeeding default data:")
        seed_tables()
    if args.import_local:
        print("\nImporting local fallback documents:")
        import_local()


if __name__ == "__main__":
    main()

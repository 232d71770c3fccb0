"""
E-mart - Database Initialization
=================================
Creates any missing tables and reports row counts per table.

Usage:
    python scripts/init_db.py
    python scripts/init_db.py --drop --yes   # Drop and recreate (refused without --yes)
"""

import sys
import os

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from sqlalchemy import func, select
from sqlalchemy.engine import make_url

from config.database import Base, engine
from config.settings import DATABASE_URL

# Registers every table on Base.metadata
from modules.catalog.models import Category, Product  # noqa
from modules.cart.models import CartItem  # noqa
from modules.wishlist.models import WishlistItem  # noqa
from modules.order.models import Order  # noqa


def init_db(drop_first: bool = False) -> dict:
    """Create the schema (optionally dropping it first). Returns {table: row_count}."""
    if drop_first:
        Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)

    counts = {}
    with engine.connect() as conn:
        for table in Base.metadata.sorted_tables:
            counts[table.name] = conn.execute(select(func.count()).select_from(table)).scalar()
    return counts


if __name__ == "__main__":
    drop = "--drop" in sys.argv
    if drop and "--yes" not in sys.argv:
        print("Refusing to drop tables without --yes.")
        sys.exit(1)

    target = make_url(DATABASE_URL).render_as_string(hide_password=True)
    print(f"{'Recreating' if drop else 'Creating'} schema on {target}")
    for name, rows in init_db(drop_first=drop).items():
        print(f"  {name:<16} {rows} rows")

"""
E-mart - Demo Data Seeder
==========================
Seeds categories and products with initial stock.

Usage:
    python scripts/seed.py          # Seed (skips products whose SKU exists)
    python scripts/seed.py --reset  # Drop all data and reseed
"""

import sys
import os

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from config.database import SessionLocal, Base, engine
from modules.catalog.models import Category, Product
from modules.catalog.service import catalog_service
from modules.cart.models import CartItem  # noqa: F401
from modules.wishlist.models import WishlistItem  # noqa: F401
from modules.order.models import Order  # noqa: F401


CATEGORIES = [
    ("Office Furniture", "Desks, chairs and storage for the workplace"),
    ("Electronics", "Peripherals and devices for business use"),
    ("Supplies", "Everyday office consumables"),
]

# (name, sku, price, stock, category name, description)
PRODUCTS = [
    ("Premium Office Chair", "OF-CHAIR-001", "299.99", 15, "Office Furniture", "Ergonomic mesh chair with lumbar support"),
    ("Standing Desk", "OF-DESK-002", "549.00", 8, "Office Furniture", "Electric height-adjustable desk"),
    ("Filing Cabinet", "OF-CAB-003", "189.50", 12, "Office Furniture", "Three-drawer lockable cabinet"),
    ("Wireless Keyboard", "EL-KEY-001", "89.99", 25, "Electronics", "Low-profile keyboard, USB receiver"),
    ("27in Monitor", "EL-MON-002", "329.00", 10, "Electronics", "QHD IPS display"),
    ("Noise-Cancelling Headset", "EL-HS-003", "149.00", 20, "Electronics", "Wireless headset for calls"),
    ("Copy Paper (5 reams)", "SU-PAP-001", "34.99", 100, "Supplies", "A4, 80 gsm"),
    ("Gel Pens (12 pack)", "SU-PEN-002", "12.49", 60, "Supplies", "Black ink, 0.7 mm"),
]


def seed(reset: bool = False):
    if reset:
        print("[0/2] Dropping all tables...")
        Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)

    db = SessionLocal()
    try:
        print("[1/2] Categories...")
        categories = {}
        for name, description in CATEGORIES:
            category = db.query(Category).filter(Category.name == name).first()
            if not category:
                category = catalog_service.create_category(db, name, description)
                print(f"  + {name}")
            categories[name] = category

        print("[2/2] Products...")
        for name, sku, price, stock, category_name, description in PRODUCTS:
            if db.query(Product).filter(Product.sku == sku).first():
                continue
            catalog_service.create_product(
                db,
                name=name,
                sku=sku,
                price=price,
                stock_quantity=stock,
                category_id=categories[category_name].id,
                description=description,
            )
            print(f"  + {sku} {name} ({stock} in stock)")

        db.commit()
        print("\nSeed complete.")
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()


if __name__ == "__main__":
    seed(reset="--reset" in sys.argv)

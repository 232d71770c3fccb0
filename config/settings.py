"""
E-mart - Centralized Configuration
===================================
All environment variables and constants are loaded here.
No other module should call os.getenv() directly.
"""

import os
import sys
from dotenv import load_dotenv

load_dotenv()


# ==========================================
# 🗄️ Database
# ==========================================
DATABASE_URL = os.getenv("DATABASE_URL")

if not DATABASE_URL:
    DB_USER = os.getenv("DB_USER")
    DB_PASSWORD = os.getenv("DB_PASSWORD")
    DB_HOST = os.getenv("DB_HOST", "localhost")
    DB_PORT = os.getenv("DB_PORT", "5432")
    DB_NAME = os.getenv("DB_NAME")

    if not all([DB_USER, DB_PASSWORD, DB_HOST, DB_NAME]):
        print("[ERROR] Critical: Database config missing in .env (DATABASE_URL or DB_USER, DB_PASSWORD, DB_HOST, DB_NAME)")
        sys.exit(1)

    DATABASE_URL = f"postgresql://{DB_USER}:{DB_PASSWORD}@{DB_HOST}:{DB_PORT}/{DB_NAME}"

# Seconds a SQLite writer waits for the database lock (dev/test only)
SQLITE_BUSY_TIMEOUT = int(os.getenv("SQLITE_BUSY_TIMEOUT", "30"))


# ==========================================
# 🔐 Identity Provider
# ==========================================
AUTH_JWT_SECRET = os.getenv("AUTH_JWT_SECRET")
AUTH_JWT_AUDIENCE = os.getenv("AUTH_JWT_AUDIENCE", "")

if not AUTH_JWT_SECRET:
    print("[ERROR] Critical: AUTH_JWT_SECRET missing in .env")
    sys.exit(1)

AUTH_JWT_ALGORITHM = os.getenv("AUTH_JWT_ALGORITHM", "HS256")
ACCESS_TOKEN_EXPIRE_MINUTES = 60 * 24 * 7  # 7 days


# ==========================================
# 🛒 Cart Reservation
# ==========================================
RESERVATION_MAX_RETRIES = int(os.getenv("RESERVATION_MAX_RETRIES", "3"))


# ==========================================
# 🛍️ Catalog
# ==========================================
BEST_SELLERS_LIMIT = 12
PRODUCTS_PER_PAGE = 24
RECENT_ORDERS_LIMIT = 5


# ==========================================
# 🔧 App
# ==========================================
DEBUG = os.getenv("DEBUG", "false").lower() == "true"
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

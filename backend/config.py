"""
Application settings.

Values are read from the environment (a local .env file is honoured) and
fall back to the defaults below. Currency and posting defaults are handed to
the services as explicit arguments, never read inside the business logic.
"""

from decimal import Decimal
from dotenv import load_dotenv
import os

load_dotenv()

# Database connection settings
POSTGRES_USER = os.getenv("POSTGRES_USER", "postgres")
POSTGRES_PASSWORD = os.getenv("POSTGRES_PASSWORD", "postgres")
POSTGRES_SERVER = os.getenv("POSTGRES_SERVER", "localhost")
POSTGRES_PORT = os.getenv("POSTGRES_PORT", "5432")
POSTGRES_DB = os.getenv("POSTGRES_DB", "inventory_ledger_db")

DATABASE_URL = os.getenv(
    "DATABASE_URL",
    f"postgresql+psycopg2://{POSTGRES_USER}:{POSTGRES_PASSWORD}@{POSTGRES_SERVER}:{POSTGRES_PORT}/{POSTGRES_DB}",
)

APP_TIMEZONE = os.getenv("APP_TIMEZONE", "Asia/Phnom_Penh")
LOG_DIR = os.getenv("LOG_DIR", "logs")

# Reporting currency defaults (rate is KHR per one USD)
SUPPORTED_CURRENCIES = ("USD", "KHR")
DEFAULT_REPORT_CURRENCY = os.getenv("DEFAULT_REPORT_CURRENCY", "USD")
DEFAULT_KHR_EXCHANGE_RATE = Decimal(os.getenv("DEFAULT_KHR_EXCHANGE_RATE", "4150"))

# Accounts used by the automatic purchase / sale postings
DEFAULT_CASH_ACCOUNT_NUMBER = os.getenv("DEFAULT_CASH_ACCOUNT_NUMBER", "1111020100")
DEFAULT_INVENTORY_ACCOUNT_NUMBER = os.getenv("DEFAULT_INVENTORY_ACCOUNT_NUMBER", "2100020000")
DEFAULT_SALES_ACCOUNT_NUMBER = os.getenv("DEFAULT_SALES_ACCOUNT_NUMBER", "4011010000")
DEFAULT_COGS_ACCOUNT_NUMBER = os.getenv("DEFAULT_COGS_ACCOUNT_NUMBER", "5011010000")
DEFAULT_EQUITY_ACCOUNT_NUMBER = os.getenv("DEFAULT_EQUITY_ACCOUNT_NUMBER", "3011010000")

# Bearer token verification
AUTH_SECRET_KEY = os.getenv("AUTH_SECRET_KEY", "change-me-in-production")
AUTH_ALGORITHM = os.getenv("AUTH_ALGORITHM", "HS256")

CORS_ALLOWED_ORIGINS = os.getenv(
    "CORS_ALLOWED_ORIGINS",
    "http://localhost:5173,http://127.0.0.1:5173"
)

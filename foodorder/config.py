"""
Runtime configuration for the ordering service
Values come from the environment (optionally a .env file loaded in main.py)
"""

import os


def _flag(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./foodorder.db")

# Auth
SECRET_KEY = os.getenv("SECRET_KEY", "your-secret-key-change-in-production")
ALGORITHM = "HS256"
ACCESS_TOKEN_EXPIRE_MINUTES = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", "30"))

RATE_LIMIT_ENABLED = _flag("RATE_LIMIT_ENABLED", "true")

# Ordering defaults
ORDER_TAX_RATE = os.getenv("ORDER_TAX_RATE", "0.13")
ORDER_DEFAULT_DELIVERY_FEE = os.getenv("ORDER_DEFAULT_DELIVERY_FEE", "0")
ORDER_DEFAULT_DELIVERY_MINUTES = int(os.getenv("ORDER_DEFAULT_DELIVERY_MINUTES", "45"))
ORDER_NUMBER_PREFIX = os.getenv("ORDER_NUMBER_PREFIX", "ORD")
DEFAULT_PAYMENT_METHOD = "cash_on_delivery"


def is_development() -> bool:
    """Whether error responses may carry internal details"""
    return os.getenv("ENVIRONMENT", "production").strip().lower() == "development"

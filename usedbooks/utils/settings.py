# usedbooks/utils/settings.py
import os
from decimal import Decimal
from dotenv import load_dotenv

load_dotenv()

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./usedbooks.db")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

SESSION_SECRET = os.getenv("SESSION_SECRET", "usedbooks-cart-secret-please-change-me-32chars")
SESSION_COOKIE = os.getenv("SESSION_COOKIE", "usedbooks_session")
SESSION_HTTPS_ONLY = os.getenv("SESSION_HTTPS_ONLY", "false").lower() in ("1", "true", "yes")

ADMIN_USER_ID = os.getenv("ADMIN_USER_ID", "Admin")
ADMIN_PASSWORD = os.getenv("ADMIN_PASSWORD", "")
TAX_RATE = Decimal(os.getenv("TAX_RATE", "0.07"))

CORS_ORIGINS = os.getenv("CORS_ORIGINS", "")
SITE_URL = os.getenv("SITE_URL", "")

CELERY_BROKER_URL = os.getenv("CELERY_BROKER_URL", "redis://redis:6379/1")
CELERY_RESULT_BACKEND = os.getenv("CELERY_RESULT_BACKEND", "redis://redis:6379/2")
CART_SWEEP_SECONDS = int(os.getenv("CART_SWEEP_SECONDS", 5*60))

OPENAI_API_KEY = os.getenv("OPENAI_API_KEY", "")
OPENAI_MODEL = os.getenv("OPENAI_MODEL", "gpt-4o-mini")
GOOGLE_BOOKS_API_KEY = os.getenv("GOOGLE_BOOKS_API_KEY", "")
HTTP_TIMEOUT_SECONDS = float(os.getenv("HTTP_TIMEOUT_SECONDS", 5))
CAMPUS_NAME = os.getenv("CAMPUS_NAME", "BMCC")

import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

BASE_DIR = Path(__file__).resolve().parent

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./venue_booking.db")
SQL_ECHO = os.getenv("SQL_ECHO", "false").lower() in {"1", "true", "yes"}

SECRET_KEY = os.getenv("SECRET_KEY", "change-me")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

TEMPLATES_DIR = BASE_DIR / "templates"
STATIC_DIR = Path(os.getenv("STATIC_DIR", "static"))
# Served under /static/images, so it must stay inside STATIC_DIR.
IMAGE_DIR = Path(os.getenv("IMAGE_DIR", str(STATIC_DIR / "images")))

PAGE_SIZE = int(os.getenv("PAGE_SIZE", 10))
MAX_PAGE_SIZE = 100

DEFAULT_ADMIN_USERNAME = os.getenv("DEFAULT_ADMIN_USERNAME", "admin")
DEFAULT_ADMIN_EMAIL = os.getenv("DEFAULT_ADMIN_EMAIL", "admin@venue.com")
DEFAULT_ADMIN_PASSWORD = os.getenv("DEFAULT_ADMIN_PASSWORD", "admin")

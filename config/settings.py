# config/settings.py
import os
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

# Database configuration
DB_URL = os.getenv("DB_URL", "sqlite:///./social.db")
DB_ECHO = os.getenv("DB_ECHO", "0") == "1"

# JWT & Security settings
# Accept either JWT_SECRET or SECRET_KEY, and default to a dev key if nothing provided
JWT_SECRET = os.getenv("JWT_SECRET") or os.getenv("SECRET_KEY") or "dev-secret-social-key"
# Allow either JWT_ALG or JWT_ALGORITHM
JWT_ALG = os.getenv("JWT_ALG") or os.getenv("JWT_ALGORITHM") or "HS256"
JWT_ISS = os.getenv("JWT_ISS", "")

ACCESS_TTL_MIN = int(os.getenv("ACCESS_TTL_MIN", 60 * 24 * 2))  # Access token validity (minutes)

# Application environment
APP_ENV = os.getenv("APP_ENV", "development")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

CORS_ORIGINS = [
    origin.strip()
    for origin in os.getenv(
        "CORS_ORIGINS",
        "http://localhost:3000,http://localhost:5173,http://127.0.0.1:5173",
    ).split(",")
    if origin.strip()
]

# Connections / feeds
DEFAULT_CONNECTIONS_LIMIT = int(os.getenv("DEFAULT_CONNECTIONS_LIMIT", 999))
LATEST_COMMENTS_PER_POST = int(os.getenv("LATEST_COMMENTS_PER_POST", 3))

# Notifications
NOTIFICATIONS_PAGE_SIZE = int(os.getenv("NOTIFICATIONS_PAGE_SIZE", 20))
UNREAD_NOTIFICATIONS_LIMIT = int(os.getenv("UNREAD_NOTIFICATIONS_LIMIT", 999))

# Admin dashboard
GROWTH_MONTHS = int(os.getenv("GROWTH_MONTHS", 5))
RECENT_ITEMS = int(os.getenv("RECENT_ITEMS", 5))

# Settings defaults applied when a user's settings row is created lazily
DEFAULT_LANGUAGE = os.getenv("DEFAULT_LANGUAGE", "en")
DEFAULT_THEME = os.getenv("DEFAULT_THEME", "dark")

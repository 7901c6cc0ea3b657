import os

# Database
DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./rcc_portal.db")

# Registration locks and the Celery broker
REDIS_URL = os.getenv("REDIS_URL", "redis://localhost:6379/0")

# Auth
SECRET_KEY = os.getenv("RCC_SECRET_KEY", "dev-secret-unsafe")
ALGORITHM = "HS256"
TOKEN_TTL_MINUTES = int(os.getenv("RCC_TOKEN_TTL_MINUTES", "1440"))
RESET_TOKEN_TTL_MINUTES = int(os.getenv("RCC_RESET_TOKEN_TTL_MINUTES", "30"))

# Media / uploads
MEDIA_DIR = os.getenv("RCC_MEDIA_DIR", "static")
MEDIA_URL = os.getenv("RCC_MEDIA_URL", "/static")
MAX_UPLOAD_BYTES = int(os.getenv("RCC_MAX_UPLOAD_BYTES", str(5 * 1024 * 1024)))

# Listings
DEFAULT_PAGE_SIZE = int(os.getenv("RCC_DEFAULT_PAGE_SIZE", "9"))

# Registration form: "permissive" or "conservative"
GUARDIAN_POLICY = os.getenv("RCC_GUARDIAN_POLICY", "permissive")

# Links placed in outgoing mail
SITE_URL = os.getenv("RCC_SITE_URL", "http://localhost:5173")

CORS_ORIGINS = [o.strip() for o in os.getenv("RCC_CORS_ORIGINS", "*").split(",") if o.strip()]

LOG_LEVEL = os.getenv("RCC_LOG_LEVEL", "INFO")


def get_database_url():
    return DATABASE_URL


def get_media_dir():
    return MEDIA_DIR


def get_redis_url():
    return REDIS_URL

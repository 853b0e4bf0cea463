"""
Django settings for the daily spin backend.

Every deploy-specific value is read from the environment so the same module
serves development, tests and production.
"""

import os
from pathlib import Path
from urllib.parse import parse_qs, urlparse

from django.core.exceptions import ImproperlyConfigured

BASE_DIR = Path(__file__).resolve().parent.parent


def _env_bool(name: str, default: bool = False) -> bool:
    raw = os.environ.get(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


def _env_list(name: str, default: str = "") -> list:
    raw = os.environ.get(name, default)
    return [item.strip() for item in raw.split(",") if item.strip()]


def _database_from_url(url: str) -> dict:
    parsed = urlparse(url)
    if parsed.scheme == "sqlite":
        name = parsed.path.lstrip("/") or str(BASE_DIR / "db.sqlite3")
        return {"ENGINE": "django.db.backends.sqlite3", "NAME": name}
    if parsed.scheme in {"mysql", "mariadb"}:
        qs = parse_qs(parsed.query)
        charset = (qs.get("charset", ["utf8mb4"]) or ["utf8mb4"])[0]
        return {
            "ENGINE": "django.db.backends.mysql",
            "NAME": (parsed.path or "/").lstrip("/"),
            "USER": parsed.username or "",
            "PASSWORD": parsed.password or "",
            "HOST": parsed.hostname or "localhost",
            "PORT": str(parsed.port or 3306),
            "OPTIONS": {"charset": charset},
        }
    raise ImproperlyConfigured("DATABASE_URL must use mysql://, mariadb:// or sqlite:///")


SECRET_KEY = os.environ.get("DJANGO_SECRET_KEY", "dev-insecure-daily-spin-key")
DEBUG = _env_bool("DJANGO_DEBUG", False)
ALLOWED_HOSTS = _env_list("DJANGO_ALLOWED_HOSTS", "localhost,127.0.0.1,testserver")

INSTALLED_APPS = [
    "django.contrib.admin",
    "django.contrib.auth",
    "django.contrib.contenttypes",
    "django.contrib.sessions",
    "django.contrib.messages",
    "django.contrib.staticfiles",
    "corsheaders",
    "prizewheel",
]

MIDDLEWARE = [
    "corsheaders.middleware.CorsMiddleware",
    "django.middleware.security.SecurityMiddleware",
    "django.contrib.sessions.middleware.SessionMiddleware",
    "django.middleware.common.CommonMiddleware",
    "django.middleware.csrf.CsrfViewMiddleware",
    "django.contrib.auth.middleware.AuthenticationMiddleware",
    "django.contrib.messages.middleware.MessageMiddleware",
    "django.middleware.clickjacking.XFrameOptionsMiddleware",
]

ROOT_URLCONF = "daily_spin.urls"
WSGI_APPLICATION = "daily_spin.wsgi.application"

TEMPLATES = [
    {
        "BACKEND": "django.template.backends.django.DjangoTemplates",
        "DIRS": [],
        "APP_DIRS": True,
        "OPTIONS": {
            "context_processors": [
                "django.template.context_processors.request",
                "django.contrib.auth.context_processors.auth",
                "django.contrib.messages.context_processors.messages",
            ],
        },
    },
]

DATABASES = {
    "default": _database_from_url(
        os.environ.get("DATABASE_URL", f"sqlite:///{BASE_DIR / 'db.sqlite3'}")
    )
}
DEFAULT_AUTO_FIELD = "django.db.models.BigAutoField"

# The calendar day used by the once-per-day gate follows this zone.
LANGUAGE_CODE = "fr-fr"
TIME_ZONE = os.environ.get("TIME_ZONE", "Europe/Paris")
USE_I18N = True
USE_TZ = True

STATIC_URL = "static/"

SECURE_CONTENT_TYPE_NOSNIFF = True
SECURE_REFERRER_POLICY = "same-origin"
X_FRAME_OPTIONS = "DENY"

_cors_origins = _env_list("CORS_ALLOWED_ORIGINS", "*")
CORS_ALLOW_ALL_ORIGINS = "*" in _cors_origins
CORS_ALLOWED_ORIGINS = [origin for origin in _cors_origins if origin != "*"]
CORS_ALLOW_METHODS = ("GET", "POST", "OPTIONS")

REDIS_URL = os.environ.get("REDIS_URL")

# Shopify Admin API used to mint discount codes.
SHOPIFY_STORE_DOMAIN = os.environ.get("SHOPIFY_STORE_DOMAIN")
SHOPIFY_ADMIN_API_ACCESS_TOKEN = os.environ.get("SHOPIFY_ADMIN_API_ACCESS_TOKEN")
SHOPIFY_API_VERSION = os.environ.get("SHOPIFY_API_VERSION", "2025-01")
SHOPIFY_TIMEOUT = int(os.environ.get("SHOPIFY_TIMEOUT", "10"))

PRIZEWHEEL_PRIZES = [
    {"value": "nothing", "weight": 45, "kind": "nothing"},
    {"value": "coupon10", "weight": 28, "kind": "discount", "discount_percent": 10},
    {"value": "coupon20", "weight": 15, "kind": "discount", "discount_percent": 20},
    {"value": "gift_bubblerush", "weight": 3, "kind": "gift", "discount_percent": 100},
    {"value": "gift_pokemon", "weight": 3, "kind": "gift", "discount_percent": 100},
    {"value": "gift_brosse", "weight": 3, "kind": "gift", "discount_percent": 100},
    {"value": "gift_bip", "weight": 3, "kind": "gift", "discount_percent": 100},
]
PRIZEWHEEL_RETRY_CAP = int(os.environ.get("PRIZEWHEEL_RETRY_CAP", "10"))
PRIZEWHEEL_RATE_LIMIT = int(os.environ.get("PRIZEWHEEL_RATE_LIMIT", "20"))
PRIZEWHEEL_RATE_WINDOW = int(os.environ.get("PRIZEWHEEL_RATE_WINDOW", "60"))
PRIZEWHEEL_REDIS_TIMEOUT = float(os.environ.get("PRIZEWHEEL_REDIS_TIMEOUT", "0.5"))
PRIZEWHEEL_COUPON_VALIDITY_DAYS = int(os.environ.get("PRIZEWHEEL_COUPON_VALIDITY_DAYS", "30"))
PRIZEWHEEL_COUPON_TITLE_PREFIX = os.environ.get("PRIZEWHEEL_COUPON_TITLE_PREFIX", "Jeu-Noel")

LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "simple": {"format": "%(asctime)s %(levelname)s %(name)s: %(message)s"},
    },
    "handlers": {
        "console": {"class": "logging.StreamHandler", "formatter": "simple"},
    },
    "root": {"handlers": ["console"], "level": os.environ.get("LOG_LEVEL", "INFO")},
    "loggers": {
        "django": {"handlers": ["console"], "level": "WARNING", "propagate": False},
    },
}

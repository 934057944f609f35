import logging
import os
from pathlib import Path

import structlog

BASE_DIR = Path(__file__).resolve().parent.parent

SECRET_KEY = os.environ.get("DJANGO_SECRET_KEY", "django-insecure-deckstudy-dev-key")
DEBUG = os.environ.get("DJANGO_DEBUG", "1") == "1"
ALLOWED_HOSTS = os.environ.get("DJANGO_ALLOWED_HOSTS", "localhost,127.0.0.1").split(",")

INSTALLED_APPS = [
    "django.contrib.contenttypes",
    "django.contrib.auth",
    "rest_framework",
    "scheduler",
]

MIDDLEWARE = [
    "django.middleware.security.SecurityMiddleware",
    "django.middleware.common.CommonMiddleware",
]

ROOT_URLCONF = "deckstudy.urls"
WSGI_APPLICATION = "deckstudy.wsgi.application"

DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": os.environ.get("DECKSTUDY_DB_PATH", str(BASE_DIR / "db.sqlite3")),
    }
}

DEFAULT_AUTO_FIELD = "django.db.models.BigAutoField"

USE_TZ = True
TIME_ZONE = os.environ.get("DECKSTUDY_TIME_ZONE", "UTC")

REST_FRAMEWORK = {
    "DEFAULT_AUTHENTICATION_CLASSES": [],
    "DEFAULT_PERMISSION_CLASSES": [],
    "UNAUTHENTICATED_USER": None,
    "DEFAULT_RENDERER_CLASSES": ["rest_framework.renderers.JSONRenderer"],
}

REDIS_URL = os.environ.get("REDIS_URL", "redis://localhost:6379/0")
CACHE_HEALTH_CHECK_ON_STARTUP = os.environ.get("DECKSTUDY_CACHE_HEALTH_CHECK", "1") == "1"

SRS = {
    # initial ease factor for every newly created card schedule
    "DEFAULT_EASE_FACTOR": float(os.environ.get("SRS_DEFAULT_EASE_FACTOR", "2.5")),
    "DEFAULT_INTERVAL": 0,
    # "every_grade" or "easy_only"
    "NEW_CARD_POLICY": os.environ.get("SRS_NEW_CARD_POLICY", "every_grade"),
    "CACHE_TIMEOUT_SECONDS": float(os.environ.get("SRS_CACHE_TIMEOUT", "1.0")),
}

LOG_LEVEL = os.environ.get("DECKSTUDY_LOG_LEVEL", "INFO")

logging.basicConfig(format="%(message)s", level=LOG_LEVEL)

structlog.configure(
    processors=[
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.dev.ConsoleRenderer() if DEBUG else structlog.processors.JSONRenderer(),
    ],
    wrapper_class=structlog.make_filtering_bound_logger(logging.getLevelName(LOG_LEVEL)),
    logger_factory=structlog.PrintLoggerFactory(),
    cache_logger_on_first_use=True,
)

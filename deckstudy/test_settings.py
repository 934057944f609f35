from .settings import *  # noqa: F401,F403

DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": ":memory:",
    }
}

CACHE_HEALTH_CHECK_ON_STARTUP = False
REDIS_URL = "redis://localhost:6379/15"

from django.conf import settings

MINUTES_PER_DAY = 24 * 60

NEW_CARD_INTERVAL = {
    0: 5,    # again
    1: 10,   # hard
    2: 20,   # easy
}
AGAIN_GROWTH = 1.5
AGAIN_RESET_INTERVAL = 10
REVIEW_QUALITY = {
    1: 3,    # hard
    2: 5,    # easy
}
MIN_EASE_FACTOR = 1.3
MAX_EASE_FACTOR = 2.7

DEFAULT_NEW_CARD_COUNT = 20
DEFAULT_REVIEW_CARD_COUNT = 100

QUEUE_TTL_SECONDS = 3600
DAILY_COUNTER_TTL_SECONDS = 24 * 3600
SETTINGS_TTL_SECONDS = 24 * 3600

QUEUE_LOW_WATER_MARK = 5
REFILL_MIN_QUEUE_SIZE = 20
FALLBACK_MIN_QUEUE_SIZE = 10
CARDS_PER_REQUEST = 10

SRS_DEFAULTS = {
    "DEFAULT_EASE_FACTOR": 2.5,
    "DEFAULT_INTERVAL": 0,
    "NEW_CARD_POLICY": "every_grade",
    "CACHE_TIMEOUT_SECONDS": 1.0,
}


def srs_setting(name):
    return getattr(settings, "SRS", {}).get(name, SRS_DEFAULTS[name])

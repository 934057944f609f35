from typing import Optional, Tuple

import structlog

from ..config import DAILY_COUNTER_TTL_SECONDS, SETTINGS_TTL_SECONDS
from ..data import repos
from ..domain.enums import CounterKind
from ..domain.state import Allowance, DailyCounters, StudySettings
from ..utils.time import day_key
from .client import fail_soft, non_critical

logger = structlog.get_logger()


def daily_key(user_id, deck_id, day: str) -> str:
    return f"deck:{deck_id}:user:{user_id}:daily:{day}"


def settings_key(user_id, deck_id) -> str:
    return f"deck:{deck_id}:user:{user_id}:settings"


class DailyLimitTracker:
    """Per-day study counters and the cached copy of deck study settings.

    Counters live only in the cache and expire a day after their last
    increment. Settings are owned by the database; the cache copy is
    read-through and refreshed after every database write.
    """

    def __init__(self, client):
        self.client = client

    @fail_soft(DailyCounters)
    def get_counters(self, user_id, deck_id, day: Optional[str] = None) -> DailyCounters:
        raw = self.client.hgetall(daily_key(user_id, deck_id, day or day_key()))
        return DailyCounters.from_mapping(raw)

    def increment(self, user_id, deck_id, kind: CounterKind) -> None:
        key = daily_key(user_id, deck_id, day_key())
        with self.client.pipeline(transaction=True) as pipe:
            pipe.hincrby(key, CounterKind(kind).field, 1)
            pipe.expire(key, DAILY_COUNTER_TTL_SECONDS)
            pipe.execute()

    def check_allowance(
        self,
        user_id,
        deck_id,
        settings: Optional[StudySettings] = None,
        counters: Optional[DailyCounters] = None,
    ) -> Allowance:
        if settings is None:
            settings = self.get_settings(user_id, deck_id)
        if counters is None:
            counters = self.get_counters(user_id, deck_id)
        return Allowance(
            can_study_new=counters.new_cards_studied < settings.new_card_count,
            can_study_review=counters.review_cards_studied < settings.review_card_count,
        )

    @staticmethod
    def remaining(settings: StudySettings, counters: DailyCounters) -> Tuple[int, int]:
        """How many new and review cards may still be served today."""
        return (
            max(0, settings.new_card_count - counters.new_cards_studied),
            max(0, settings.review_card_count - counters.review_cards_studied),
        )

    # settings

    @fail_soft(None)
    def cached_settings(self, user_id, deck_id) -> Optional[StudySettings]:
        return StudySettings.from_mapping(self.client.hgetall(settings_key(user_id, deck_id)))

    def cache_settings(self, user_id, deck_id, settings: StudySettings) -> None:
        key = settings_key(user_id, deck_id)
        with self.client.pipeline(transaction=True) as pipe:
            pipe.delete(key)
            pipe.hset(key, mapping=settings.to_mapping())
            pipe.expire(key, SETTINGS_TTL_SECONDS)
            pipe.execute()

    @fail_soft(False)
    def invalidate_settings(self, user_id, deck_id) -> bool:
        self.client.delete(settings_key(user_id, deck_id))
        return True

    def get_settings(self, user_id, deck_id) -> StudySettings:
        settings = self.cached_settings(user_id, deck_id)
        if settings is not None:
            return settings

        settings = repos.get_deck_settings(user_id, deck_id)
        if settings is None:
            return StudySettings()
        with non_critical("cache_settings", user_id=str(user_id), deck_id=str(deck_id)):
            self.cache_settings(user_id, deck_id, settings)
        return settings

    def set_settings(self, user_id, deck_id, settings: StudySettings) -> StudySettings:
        repos.upsert_deck_settings(user_id, deck_id, settings)
        with non_critical("cache_settings", user_id=str(user_id), deck_id=str(deck_id)):
            self.cache_settings(user_id, deck_id, settings)
        logger.info(
            "deck_settings_updated",
            user_id=str(user_id),
            deck_id=str(deck_id),
            new_card_count=settings.new_card_count,
            review_card_count=settings.review_card_count,
        )
        return settings

"""Serving cards to a study session.

The cache path keeps a shuffled queue per (user, deck) in Redis and refills it
from the database when it runs low. Every cache round trip shares one deadline.
Whenever that path errors, runs past the deadline, or comes back empty without
today's limits explaining it, the queue is recomputed straight from the
database instead; both paths share the classification code.
"""
import time

import redis
import structlog
from django.utils import timezone

from ..cache.client import DeadlineClient, get_client
from ..cache.limits import DailyLimitTracker
from ..cache.queue import StudyQueue
from ..config import (
    CARDS_PER_REQUEST,
    FALLBACK_MIN_QUEUE_SIZE,
    QUEUE_LOW_WATER_MARK,
    REFILL_MIN_QUEUE_SIZE,
    srs_setting,
)
from ..data import repos
from ..domain.classifier import build_study_queue, select_due_cards, select_new_cards
from ..domain.state import StudySettings
from ..errors import CacheUnavailable

logger = structlog.get_logger()


def plan_study_queue(states, new_limit, review_limit, min_size, now=None):
    now = now or timezone.now()
    new_ids = select_new_cards(states, new_limit)
    due_ids = select_due_cards(states, review_limit, now=now)
    return build_study_queue(new_ids, due_ids, min_size)


def serialize_card(sched):
    return {
        "id": str(sched.card_id),
        "front": sched.card.front,
        "back": sched.card.back,
        "srs_metadata": {
            "repetitions": sched.repetitions,
            "ease_factor": sched.ease_factor,
            "interval": sched.interval_minutes,
            "last_reviewed": sched.last_reviewed,
            "next_review": sched.next_review,
        },
    }


def get_next_cards(user_id, deck_id):
    deck = repos.get_deck(deck_id)
    repos.ensure_deck_access(user_id, deck)

    timeout = srs_setting("CACHE_TIMEOUT_SECONDS")
    try:
        result = _next_cards_from_cache(user_id, deck_id, time.monotonic() + timeout)
    except (CacheUnavailable, redis.RedisError) as e:
        logger.warning(
            "cache_path_failed",
            user_id=str(user_id),
            deck_id=str(deck_id),
            error=str(e),
        )
    else:
        if result is not None:
            return result
        logger.info("cache_path_empty", user_id=str(user_id), deck_id=str(deck_id))

    return _next_cards_from_db(user_id, deck_id)


def get_next_cards_fallback(user_id, deck_id):
    deck = repos.get_deck(deck_id)
    repos.ensure_deck_access(user_id, deck)
    return _next_cards_from_db(user_id, deck_id)


def refill_queue(queue, tracker, user_id, deck_id):
    settings = tracker.get_settings(user_id, deck_id)
    counters = tracker.get_counters(user_id, deck_id)
    allowance = tracker.check_allowance(user_id, deck_id, settings, counters)
    new_left, review_left = tracker.remaining(settings, counters)

    card_ids = plan_study_queue(
        repos.load_deck_states(user_id, deck_id),
        new_limit=new_left if allowance.can_study_new else 0,
        review_limit=review_left if allowance.can_study_review else 0,
        min_size=REFILL_MIN_QUEUE_SIZE,
    )
    if not queue.set(card_ids):
        raise CacheUnavailable("study queue could not be stored")
    logger.info(
        "study_queue_refilled",
        user_id=str(user_id),
        deck_id=str(deck_id),
        can_study_new=allowance.can_study_new,
        can_study_review=allowance.can_study_review,
        queue_length=len(card_ids),
    )
    return card_ids


def _next_cards_from_cache(user_id, deck_id, deadline):
    """Serve from the cached queue, or None when it yielded nothing it should have.

    An empty result is only trusted when a refill just ran and planned
    nothing, i.e. today's limits leave nothing to study.
    """
    client = DeadlineClient(get_client(), deadline)
    queue = StudyQueue(client, user_id, deck_id)

    refilled = None
    if queue.length() < QUEUE_LOW_WATER_MARK:
        refilled = refill_queue(queue, DailyLimitTracker(client), user_id, deck_id)

    card_ids = []
    for _ in range(CARDS_PER_REQUEST):
        card_id = queue.pop_next()
        if card_id is None:
            break
        card_ids.append(card_id)

    cards = [serialize_card(sched) for sched in repos.load_cards(user_id, card_ids)]
    queue_length = queue.length()
    # a result that arrives after the deadline is discarded
    _check_deadline(deadline)

    if not cards and (refilled is None or refilled):
        return None

    logger.info(
        "next_cards_served",
        user_id=str(user_id),
        deck_id=str(deck_id),
        source="cache",
        card_count=len(cards),
        queue_length=queue_length,
    )
    return {"cards": cards, "queue_length": queue_length}


def _next_cards_from_db(user_id, deck_id):
    settings = repos.get_deck_settings(user_id, deck_id) or StudySettings()
    card_ids = plan_study_queue(
        repos.load_deck_states(user_id, deck_id),
        new_limit=settings.new_card_count,
        review_limit=settings.review_card_count,
        min_size=FALLBACK_MIN_QUEUE_SIZE,
    )
    cards = [
        serialize_card(sched)
        for sched in repos.load_cards(user_id, card_ids[:CARDS_PER_REQUEST])
    ]
    logger.info(
        "next_cards_served",
        user_id=str(user_id),
        deck_id=str(deck_id),
        source="database",
        card_count=len(cards),
    )
    return {"cards": cards, "queue_length": len(cards)}


def _check_deadline(deadline):
    if time.monotonic() > deadline:
        raise CacheUnavailable("cache path ran past its deadline")

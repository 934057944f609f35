from django.db import transaction

from ..config import srs_setting
from ..domain.state import ScheduledCard, SchedulingState, StudySettings
from ..errors import NotFound
from .models import CardSchedule, Deck, DeckSettings, Flashcard


def get_deck(deck_id):
    try:
        return Deck.objects.get(pk=deck_id)
    except Deck.DoesNotExist:
        raise NotFound("deck", deck_id) from None


def get_card(card_id):
    try:
        return Flashcard.objects.get(pk=card_id)
    except Flashcard.DoesNotExist:
        raise NotFound("card", card_id) from None


def ensure_deck_access(user_id, deck):
    """
    Create the user's settings for the deck and a new-card schedule for every
    card that lacks one. Safe to race: conflicting inserts are ignored.
    """
    with transaction.atomic():
        DeckSettings.objects.get_or_create(user_id=user_id, deck=deck)
        have = set(
            CardSchedule.objects.filter(user_id=user_id, card__deck=deck)
            .values_list("card_id", flat=True)
        )
        missing = [
            CardSchedule(
                user_id=user_id,
                card_id=card_id,
                repetitions=-1,
                ease_factor=srs_setting("DEFAULT_EASE_FACTOR"),
                interval_minutes=srs_setting("DEFAULT_INTERVAL"),
            )
            for card_id in deck.flashcards.values_list("id", flat=True)
            if card_id not in have
        ]
        if missing:
            CardSchedule.objects.bulk_create(missing, ignore_conflicts=True)
    return len(missing)


def to_state(sched):
    return SchedulingState(
        repetitions=sched.repetitions,
        ease_factor=sched.ease_factor,
        interval=sched.interval_minutes,
        last_reviewed=sched.last_reviewed,
        next_review=sched.next_review,
    )


def load_deck_schedules(user_id, deck_id):
    return list(
        CardSchedule.objects.filter(user_id=user_id, card__deck_id=deck_id)
        .select_related("card")
        .order_by("card__created_at", "card__id")
    )


def load_deck_states(user_id, deck_id):
    """All of the user's card states for the deck, in card creation order."""
    return [
        ScheduledCard(card_id=str(sched.card_id), state=to_state(sched))
        for sched in load_deck_schedules(user_id, deck_id)
    ]


def load_cards(user_id, card_ids):
    """Cards with the user's schedule, in the order of ``card_ids``.

    IDs without a card or schedule (e.g. deleted since being queued) are
    skipped.
    """
    schedules = {
        str(sched.card_id): sched
        for sched in CardSchedule.objects.filter(
            user_id=user_id, card_id__in=list(card_ids)
        ).select_related("card")
    }
    return [schedules[str(card_id)] for card_id in card_ids if str(card_id) in schedules]


def get_card_schedule(user_id, card_id):
    try:
        return CardSchedule.objects.select_related("card").get(user_id=user_id, card_id=card_id)
    except CardSchedule.DoesNotExist:
        raise NotFound("card schedule", card_id) from None


def save_card_schedule(sched, state):
    sched.repetitions = state.repetitions
    sched.ease_factor = state.ease_factor
    sched.interval_minutes = state.interval
    sched.last_reviewed = state.last_reviewed
    sched.next_review = state.next_review
    sched.save(
        update_fields=[
            "repetitions",
            "ease_factor",
            "interval_minutes",
            "last_reviewed",
            "next_review",
        ]
    )
    return sched


def get_deck_settings(user_id, deck_id):
    row = DeckSettings.objects.filter(user_id=user_id, deck_id=deck_id).first()
    if row is None:
        return None
    return StudySettings(
        new_card_count=row.new_card_count, review_card_count=row.review_card_count
    )


def upsert_deck_settings(user_id, deck_id, settings):
    DeckSettings.objects.update_or_create(
        user_id=user_id,
        deck_id=deck_id,
        defaults={
            "new_card_count": settings.new_card_count,
            "review_card_count": settings.review_card_count,
        },
    )
    return settings

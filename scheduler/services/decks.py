from django.utils import timezone

from ..cache.client import get_client
from ..cache.limits import DailyLimitTracker
from ..data import repos
from ..domain.state import StudySettings
from ..utils.time import start_of_day


def get_deck_stats(user_id, deck_id, now=None):
    deck = repos.get_deck(deck_id)
    repos.ensure_deck_access(user_id, deck)
    now = now or timezone.now()
    day_start = start_of_day(now)

    stats = {
        "total_cards": 0,
        "new_cards": 0,
        "due_cards": 0,
        "future_cards": 0,
        "studied_today": 0,
    }
    for card in repos.load_deck_states(user_id, deck_id):
        state = card.state
        stats["total_cards"] += 1
        if state.is_new:
            stats["new_cards"] += 1
        elif state.next_review is not None and state.next_review <= now:
            stats["due_cards"] += 1
        else:
            stats["future_cards"] += 1
        if state.last_reviewed is not None and state.last_reviewed >= day_start:
            stats["studied_today"] += 1
    return stats


def get_deck_settings(user_id, deck_id):
    repos.get_deck(deck_id)
    return DailyLimitTracker(get_client()).get_settings(user_id, deck_id)


def update_deck_settings(user_id, deck_id, settings: StudySettings):
    repos.get_deck(deck_id)
    return DailyLimitTracker(get_client()).set_settings(user_id, deck_id, settings)

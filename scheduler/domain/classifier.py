import random
from typing import Iterable, List, Optional, Sequence

from django.utils import timezone

from ..config import FALLBACK_MIN_QUEUE_SIZE
from ..utils.time import end_of_day
from .state import ScheduledCard


def select_new_cards(cards: Iterable[ScheduledCard], limit: int) -> List[str]:
    """Never-studied cards, in the order given, at most ``limit``."""
    if limit <= 0:
        return []
    selected = [card.card_id for card in cards if card.state.is_new]
    return selected[:limit]


def select_due_cards(
    cards: Iterable[ScheduledCard], limit: int, now=None
) -> List[str]:
    """Reviewed cards due by the end of today, earliest first, at most ``limit``."""
    if limit <= 0:
        return []
    cutoff = end_of_day(now or timezone.now())
    due = [
        card
        for card in cards
        if card.repetitions >= 0
        and card.next_review is not None
        and card.next_review <= cutoff
    ]
    due.sort(key=lambda card: card.next_review)
    return [card.card_id for card in due[:limit]]


def build_study_queue(
    new_ids: Sequence[str],
    due_ids: Sequence[str],
    min_size: int = FALLBACK_MIN_QUEUE_SIZE,
    rng: Optional[random.Random] = None,
) -> List[str]:
    """Shuffle new and due cards together into one study order.

    ``min_size`` is the caller's preferred lower bound; the queue is never
    padded, so fewer cards than that simply yield a shorter queue.
    """
    queue = list(dict.fromkeys([*new_ids, *due_ids]))
    (rng or random).shuffle(queue)
    return queue[: max(min_size, len(queue))]

from django.utils import timezone
import structlog
from ..cache.client import get_client, non_critical
from ..cache.limits import DailyLimitTracker
from ..config import srs_setting
from ..data.repos import get_card_schedule, save_card_schedule, to_state
from ..domain.enums import CounterKind, Grade, NewCardPolicy
from ..domain.srs import compute_next_state
from ..utils.time import to_local_iso

logger = structlog.get_logger()

def update_card_srs(user_id, card_id, grade):
    grade = Grade.parse(grade)
    logger.info("review_received",
        user_id=str(user_id),
        card_id=str(card_id),
        grade=int(grade),
    )

    sched = get_card_schedule(user_id, card_id)
    policy = NewCardPolicy(srs_setting("NEW_CARD_POLICY"))

    update = compute_next_state(to_state(sched), grade, now=timezone.now(), policy=policy)
    save_card_schedule(sched, update.state)

    # Daily counters are best effort; the schedule above is already durable
    if update.was_new:
        kind = CounterKind.NEW if update.counts_against_new_limit else None
    else:
        kind = CounterKind.REVIEW
    if kind is not None:
        with non_critical("increment_daily_counter",
                          user_id=str(user_id), card_id=str(card_id), kind=kind.value):
            DailyLimitTracker(get_client()).increment(user_id, sched.card.deck_id, kind)

    state = update.state
    logger.info("review_scheduled",
        user_id=str(user_id),
        card_id=str(card_id),
        was_new=update.was_new,
        repetitions=state.repetitions,
        ease_factor=state.ease_factor,
        interval_minutes=state.interval,
        next_review_utc=state.next_review.isoformat(),
        next_review_local=to_local_iso(state.next_review),
    )

    return {
        "next_review": state.next_review,
        "interval": state.interval,
        "repetitions": state.repetitions,
        "ease_factor": state.ease_factor,
    }

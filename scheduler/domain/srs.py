"""Next-state computation for a graded card.

Three branches, selected by the card's state and the grade:

* a new card (``repetitions == -1``) gets a fixed short interval per grade
  and leaves the new pool;
* a review card graded Again grows a sub-day interval by half or drops a
  longer one back to ten minutes, never scheduling past the end of the day
  it was due;
* a review card graded Hard or Easy follows SM-2: the ease factor moves with
  the quality and the interval (at least one day) is scaled by it.

Intervals are whole minutes. Review branches anchor the next review on when
the card was due, not when it was graded.
"""
import math
from dataclasses import dataclass, replace
from datetime import timedelta

from django.utils import timezone

from ..config import (
    AGAIN_GROWTH,
    AGAIN_RESET_INTERVAL,
    MAX_EASE_FACTOR,
    MIN_EASE_FACTOR,
    MINUTES_PER_DAY,
    NEW_CARD_INTERVAL,
    REVIEW_QUALITY,
)
from ..utils.time import end_of_day
from .enums import Grade, NewCardPolicy
from .state import SchedulingState


@dataclass(frozen=True)
class SrsUpdate:
    state: SchedulingState
    was_new: bool
    counts_against_new_limit: bool


def clamp_ease(ease_factor: float) -> float:
    return min(MAX_EASE_FACTOR, max(MIN_EASE_FACTOR, ease_factor))


def next_ease(ease_factor: float, quality: int) -> float:
    return clamp_ease(ease_factor - 0.8 + 0.2 * quality + 0.02 * quality * quality)


def compute_next_state(
    state: SchedulingState,
    grade: Grade,
    now=None,
    policy: NewCardPolicy = NewCardPolicy.EVERY_GRADE,
) -> SrsUpdate:
    grade = Grade.parse(grade)
    now = now or timezone.now()
    state = _sanitize(state)

    if state.is_new:
        interval = NEW_CARD_INTERVAL[int(grade)]
        return SrsUpdate(
            state=replace(
                state,
                repetitions=1,
                interval=interval,
                last_reviewed=now,
                next_review=now + timedelta(minutes=interval),
            ),
            was_new=True,
            counts_against_new_limit=policy.counts(grade),
        )

    anchor = state.next_review or now

    if grade == Grade.AGAIN:
        if state.interval < MINUTES_PER_DAY:
            interval = math.floor(state.interval * AGAIN_GROWTH)
        else:
            interval = AGAIN_RESET_INTERVAL
        next_review = min(anchor + timedelta(minutes=interval), end_of_day(anchor))
        new_state = replace(
            state,
            repetitions=state.repetitions + 1,
            interval=interval,
            last_reviewed=anchor,
            next_review=next_review,
        )
    else:
        ease = next_ease(state.ease_factor, REVIEW_QUALITY[int(grade)])
        interval = math.floor(max(state.interval, MINUTES_PER_DAY) * ease)
        new_state = replace(
            state,
            repetitions=state.repetitions + 1,
            ease_factor=ease,
            interval=interval,
            last_reviewed=anchor,
            next_review=anchor + timedelta(minutes=interval),
        )

    return SrsUpdate(state=new_state, was_new=False, counts_against_new_limit=False)


def _sanitize(state: SchedulingState) -> SchedulingState:
    # out-of-range stored values are pulled back into their domains
    repetitions = state.repetitions if state.repetitions >= -1 else -1
    return replace(
        state,
        repetitions=repetitions,
        ease_factor=clamp_ease(state.ease_factor),
        interval=max(0, int(state.interval)),
    )

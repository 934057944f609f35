from dataclasses import dataclass, field
from datetime import datetime
from typing import Mapping, Optional

from ..config import DEFAULT_NEW_CARD_COUNT, DEFAULT_REVIEW_CARD_COUNT

NEW_CARD_REPETITIONS = -1


@dataclass(frozen=True)
class SchedulingState:
    repetitions: int
    ease_factor: float
    interval: int  # minutes
    last_reviewed: Optional[datetime] = None
    next_review: Optional[datetime] = None

    @classmethod
    def new(cls, ease_factor: float, interval: int = 0) -> "SchedulingState":
        return cls(repetitions=NEW_CARD_REPETITIONS, ease_factor=ease_factor, interval=interval)

    @property
    def is_new(self) -> bool:
        return self.repetitions == NEW_CARD_REPETITIONS


@dataclass(frozen=True)
class ScheduledCard:
    card_id: str
    state: SchedulingState = field(compare=False)

    @property
    def repetitions(self) -> int:
        return self.state.repetitions

    @property
    def next_review(self) -> Optional[datetime]:
        return self.state.next_review


@dataclass(frozen=True)
class StudySettings:
    """Daily caps for one user's study of one deck.

    Stored in the cache as a hash of string fields; ``to_mapping`` and
    ``from_mapping`` are the only (de)serialization points.
    """

    new_card_count: int = DEFAULT_NEW_CARD_COUNT
    review_card_count: int = DEFAULT_REVIEW_CARD_COUNT

    def to_mapping(self) -> dict:
        return {
            "newCardCount": str(self.new_card_count),
            "reviewCardCount": str(self.review_card_count),
        }

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, str]) -> Optional["StudySettings"]:
        if not mapping:
            return None
        return cls(
            new_card_count=_parse_count(mapping.get("newCardCount"), DEFAULT_NEW_CARD_COUNT),
            review_card_count=_parse_count(
                mapping.get("reviewCardCount"), DEFAULT_REVIEW_CARD_COUNT
            ),
        )


@dataclass(frozen=True)
class DailyCounters:
    new_cards_studied: int = 0
    review_cards_studied: int = 0

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, str]) -> "DailyCounters":
        return cls(
            new_cards_studied=_parse_count(mapping.get("newCardsStudied"), 0),
            review_cards_studied=_parse_count(mapping.get("reviewCardsStudied"), 0),
        )


@dataclass(frozen=True)
class Allowance:
    can_study_new: bool
    can_study_review: bool


def _parse_count(raw, default: int) -> int:
    try:
        value = int(raw)
    except (TypeError, ValueError):
        return default
    return value if value >= 0 else default

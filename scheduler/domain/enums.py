from enum import Enum, IntEnum

from ..errors import InvalidGrade


class Grade(IntEnum):
    AGAIN = 0
    HARD = 1
    EASY = 2

    @classmethod
    def parse(cls, value):
        if isinstance(value, bool) or not isinstance(value, int):
            raise InvalidGrade(value)
        try:
            return cls(value)
        except ValueError:
            raise InvalidGrade(value) from None


GRADE_LABELS = {
    Grade.AGAIN: "again",
    Grade.HARD: "hard",
    Grade.EASY: "easy",
}


class NewCardPolicy(str, Enum):
    """When grading a new card spends today's new-card allowance."""

    EVERY_GRADE = "every_grade"
    EASY_ONLY = "easy_only"

    def counts(self, grade: Grade) -> bool:
        if self is NewCardPolicy.EASY_ONLY:
            return grade == Grade.EASY
        return True


class CounterKind(str, Enum):
    NEW = "new"
    REVIEW = "review"

    @property
    def field(self) -> str:
        return "newCardsStudied" if self is CounterKind.NEW else "reviewCardsStudied"

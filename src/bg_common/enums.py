"""Global enums: values are persisted verbatim in store documents."""

from enum import Enum


class GuessDirection(str, Enum):
    UP = "UP"
    DOWN = "DOWN"


class GuessOutcome(str, Enum):
    """Tagged replacement for the nullable ``isCorrect`` attribute.

    Persisted as ``isCorrect``: UNRESOLVED -> null (or absent),
    CORRECT -> true, INCORRECT -> false.
    """

    UNRESOLVED = "UNRESOLVED"
    CORRECT = "CORRECT"
    INCORRECT = "INCORRECT"

    @classmethod
    def from_is_correct(cls, value: bool | None) -> "GuessOutcome":
        if value is None:
            return cls.UNRESOLVED
        return cls.CORRECT if value else cls.INCORRECT

    @property
    def is_correct(self) -> bool | None:
        if self is GuessOutcome.UNRESOLVED:
            return None
        return self is GuessOutcome.CORRECT


class CycleStatus(str, Enum):
    """Terminal state of one resolution cycle."""

    COMPLETED = "COMPLETED"
    FEED_FAILED = "FEED_FAILED"
    PERSIST_FAILED = "PERSIST_FAILED"
    ENUMERATE_FAILED = "ENUMERATE_FAILED"
    SKIPPED = "SKIPPED"    # single-flight guard or lease held elsewhere
    ERRORED = "ERRORED"    # unexpected exception caught by the scheduler

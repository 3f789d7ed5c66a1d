"""Verdict policy for a single guess: pure functions, no I/O.

    price_went_up = current_price > reference_price      (strict)
    UP   is correct iff price_went_up
    DOWN is correct iff not price_went_up

There is no "unchanged" outcome: an equal price resolves in favour of DOWN.
"""

from src.bg_common.enums import GuessDirection, GuessOutcome

CORRECT_DELTA = 1
INCORRECT_DELTA = -1


def judge(
    direction: GuessDirection,
    reference_price: float,
    current_price: float,
) -> GuessOutcome:
    price_went_up = current_price > reference_price
    if direction is GuessDirection.UP:
        correct = price_went_up
    else:
        correct = not price_went_up
    return GuessOutcome.CORRECT if correct else GuessOutcome.INCORRECT


def score_delta(outcome: GuessOutcome) -> int:
    if outcome is GuessOutcome.CORRECT:
        return CORRECT_DELTA
    if outcome is GuessOutcome.INCORRECT:
        return INCORRECT_DELTA
    raise ValueError("An unresolved guess carries no score delta")

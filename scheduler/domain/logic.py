import math
from dataclasses import replace
from datetime import datetime

from ..config import (
    EASE_DELTA,
    EASY_BONUS,
    HARD_GROWTH,
    MAX_INTERVAL_DAYS,
    MASTERED_THRESHOLD_DAYS,
    MIN_EASE_FACTOR,
    MIN_INTERVAL_DAYS,
    REVIEW_THRESHOLD_DAYS,
)
from ..utils.time import add_calendar_days
from .enums import CardStatus, Grade
from .errors import InvalidGrade
from .state import ReviewCard, ReviewEntry


def parse_grade(grade) -> Grade:
    if isinstance(grade, Grade):
        return grade
    try:
        return Grade(grade)
    except (ValueError, TypeError):
        raise InvalidGrade(f"unrecognized grade: {grade!r}") from None


def status_for(interval: int) -> CardStatus:
    if interval >= MASTERED_THRESHOLD_DAYS:
        return CardStatus.MASTERED
    if interval >= REVIEW_THRESHOLD_DAYS:
        return CardStatus.REVIEW
    return CardStatus.LEARNING


def _ceil_days(value: float) -> int:
    # Drop binary representation error before rounding up to whole days
    return math.ceil(round(value, 6))


def next_interval(grade: Grade, interval: int, ease_factor: float) -> int:
    if grade is Grade.AGAIN:
        days = 1
    elif grade is Grade.HARD:
        days = _ceil_days(interval * HARD_GROWTH)
    elif grade is Grade.GOOD:
        days = _ceil_days(interval * ease_factor)
    else:
        days = _ceil_days(interval * ease_factor * EASY_BONUS)
    return max(MIN_INTERVAL_DAYS, min(MAX_INTERVAL_DAYS, days))


def next_ease_factor(grade: Grade, ease_factor: float) -> float:
    if grade is Grade.GOOD:
        return ease_factor
    updated = round(ease_factor + EASE_DELTA[grade.value], 2)
    if grade is Grade.EASY:
        return updated
    return max(MIN_EASE_FACTOR, updated)


def apply_review(card: ReviewCard, grade, now: datetime) -> ReviewCard:
    """
    Return ``card`` as it stands after one review graded ``grade`` at ``now``.

    The input card is never modified; interval, ease factor, due date, status
    and history all change together in the returned value.
    """
    grade = parse_grade(grade)
    interval = next_interval(grade, card.interval, card.ease_factor)
    return replace(
        card,
        interval=interval,
        ease_factor=next_ease_factor(grade, card.ease_factor),
        next_review_at=add_calendar_days(now, interval),
        status=status_for(interval),
        review_history=card.review_history + (ReviewEntry(now, grade),),
    )

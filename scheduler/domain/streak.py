from dataclasses import replace
from datetime import datetime
from typing import Dict, Iterable, Optional

from ..utils.time import day_gap, same_day
from .errors import InvalidDuration, LanguageMismatch
from .state import ActivityLedger


def next_streak(streak_days: int, last_activity: Optional[datetime], now: datetime) -> int:
    if last_activity is None:
        return 1
    gap = day_gap(last_activity, now)
    if gap == 0:
        return streak_days
    if gap == 1:
        return streak_days + 1
    # Gaps of 2+ days and clocks running backwards both break the streak
    return 1


def record_activity(
    ledger: Optional[ActivityLedger],
    language: str,
    minutes_spent: Optional[int],
    now: datetime,
) -> ActivityLedger:
    """
    Fold one qualifying activity into the (user, language) ledger.

    ``ledger`` may be ``None`` for a language with no previous activity; a
    fresh ledger is started in that case.
    """
    minutes = 0 if minutes_spent is None else minutes_spent
    if minutes < 0:
        raise InvalidDuration(f"time spent must not be negative: {minutes_spent!r}")
    if ledger is None:
        ledger = ActivityLedger(language=language)
    elif ledger.language != language:
        raise LanguageMismatch(f"ledger is for {ledger.language!r}, not {language!r}")

    return replace(
        ledger,
        total_time_spent=ledger.total_time_spent + minutes,
        streak_days=next_streak(ledger.streak_days, ledger.last_activity, now),
        last_activity=now,
    )


def current_streak(ledgers: Iterable[ActivityLedger]) -> int:
    return max((ledger.streak_days for ledger in ledgers), default=0)


def has_activity_today(ledgers: Iterable[ActivityLedger], now: datetime) -> bool:
    return any(
        ledger.last_activity is not None and same_day(ledger.last_activity, now)
        for ledger in ledgers
    )


def learning_statistics(ledgers: Iterable[ActivityLedger]) -> Dict:
    ledgers = list(ledgers)
    by_language = {}
    overall = {
        "total_vocabulary_learned": 0,
        "total_vocabulary_mastered": 0,
        "total_exercises_completed": 0,
        "total_tests_passed": 0,
        "total_time_spent": 0,
    }
    for ledger in ledgers:
        by_language[ledger.language] = {
            "vocabulary_learned": ledger.vocabulary_learned,
            "vocabulary_mastered": ledger.vocabulary_mastered,
            "exercises_completed": ledger.exercises_done,
            "tests_passed": ledger.tests_done,
            "streak_days": ledger.streak_days,
            "time_spent": ledger.total_time_spent,
        }
        overall["total_vocabulary_learned"] += ledger.vocabulary_learned
        overall["total_vocabulary_mastered"] += ledger.vocabulary_mastered
        overall["total_exercises_completed"] += ledger.exercises_done
        overall["total_tests_passed"] += ledger.tests_done
        overall["total_time_spent"] += ledger.total_time_spent
    overall["current_streak"] = current_streak(ledgers)
    return {"by_language": by_language, "overall": overall}

import structlog

from ..config import SAVE_ATTEMPTS
from ..data.repos import find_ledger, list_ledgers, load_ledger, save_ledger
from ..domain.errors import ConflictError
from ..domain.streak import (
    current_streak,
    has_activity_today,
    learning_statistics,
    record_activity,
)
from ..utils.time import Clock, system_clock, to_utc_iso

logger = structlog.get_logger()


def record_daily_activity(user_id, language, minutes_spent=None, clock: Clock = system_clock):
    now = clock()

    for attempt in range(1, SAVE_ATTEMPTS + 1):
        ledger = find_ledger(user_id, language)
        updated = record_activity(ledger, language, minutes_spent, now)
        try:
            saved = save_ledger(user_id, updated)
        except ConflictError:
            logger.warning("activity_conflict",
                user_id=str(user_id),
                language=language,
                attempt=attempt,
            )
            if attempt == SAVE_ATTEMPTS:
                raise
            continue

        logger.info("activity_recorded",
            user_id=str(user_id),
            language=language,
            minutes_spent=minutes_spent or 0,
            streak_days=saved.streak_days,
            total_time_spent=saved.total_time_spent,
            last_activity_utc=to_utc_iso(saved.last_activity),
        )
        return saved


def user_progress(user_id):
    return list_ledgers(user_id)


def language_progress(user_id, language):
    return load_ledger(user_id, language)


def streak_summary(user_id, clock: Clock = system_clock):
    ledgers = list_ledgers(user_id)
    return {
        "current_streak": current_streak(ledgers),
        "has_activity_today": has_activity_today(ledgers, clock()),
    }


def statistics(user_id):
    return learning_statistics(list_ledgers(user_id))

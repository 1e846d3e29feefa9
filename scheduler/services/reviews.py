import structlog

from ..config import SAVE_ATTEMPTS
from ..data.repos import create_card, due_cards, list_cards, load_card, save_card
from ..domain.errors import ConflictError
from ..domain.logic import apply_review, parse_grade
from ..utils.time import Clock, system_clock, to_utc_iso

logger = structlog.get_logger()


def add_flashcard(user_id, vocabulary_id, clock: Clock = system_clock):
    card = create_card(user_id, vocabulary_id, clock())
    logger.info("flashcard_created",
        user_id=str(user_id),
        vocabulary_id=str(vocabulary_id),
        next_review_utc=to_utc_iso(card.next_review_at),
    )
    return card


def record_review(user_id, vocabulary_id, grade, clock: Clock = system_clock):
    grade = parse_grade(grade)
    now = clock()
    logger.info("review_received",
        user_id=str(user_id),
        vocabulary_id=str(vocabulary_id),
        grade=grade.value,
    )

    for attempt in range(1, SAVE_ATTEMPTS + 1):
        card = load_card(user_id, vocabulary_id)
        updated = apply_review(card, grade, now)
        try:
            saved = save_card(user_id, updated)
        except ConflictError:
            logger.warning("review_conflict",
                user_id=str(user_id),
                vocabulary_id=str(vocabulary_id),
                attempt=attempt,
            )
            if attempt == SAVE_ATTEMPTS:
                raise
            continue

        logger.info("review_scheduled",
            user_id=str(user_id),
            vocabulary_id=str(vocabulary_id),
            interval_days=saved.interval,
            ease_factor=saved.ease_factor,
            status=saved.status.value,
            next_review_utc=to_utc_iso(saved.next_review_at),
        )
        return saved


def user_flashcards(user_id):
    return list_cards(user_id)


def cards_due(user_id, until=None, clock: Clock = system_clock):
    until = until or clock()
    return due_cards(user_id, until)

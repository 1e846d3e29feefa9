from dataclasses import replace
from typing import Iterator, List, Optional

from django.db import IntegrityError, transaction
from django.db.models import F

from ..config import DUE_PAGE_SIZE
from ..domain.enums import CardStatus, Grade
from ..domain.errors import AlreadyExists, ConflictError, NotFound
from ..domain.state import ActivityLedger, ReviewCard, ReviewEntry
from .models import Flashcard, LanguageProgress, ReviewLog


def _to_card(row: Flashcard) -> ReviewCard:
    return ReviewCard(
        id=row.pk,
        vocabulary_id=row.vocabulary_id,
        ease_factor=row.ease_factor,
        interval=row.interval,
        next_review_at=row.next_review_at,
        status=CardStatus(row.status),
        review_history=tuple(
            ReviewEntry(r.reviewed_at, Grade(r.grade)) for r in row.reviews.all()
        ),
        version=row.version,
    )


def _to_ledger(row: LanguageProgress) -> ActivityLedger:
    return ActivityLedger(
        id=row.pk,
        language=row.language,
        streak_days=row.streak_days,
        last_activity=row.last_activity,
        total_time_spent=row.total_time_spent,
        vocabulary_learned=row.vocabulary_learned,
        vocabulary_mastered=row.vocabulary_mastered,
        exercises_done=row.exercises_done,
        tests_done=row.tests_done,
        version=row.version,
    )


# Cards

def load_card(user_id, vocabulary_id) -> ReviewCard:
    try:
        row = (Flashcard.objects
               .prefetch_related("reviews")
               .get(user_id=user_id, vocabulary_id=vocabulary_id))
    except Flashcard.DoesNotExist:
        raise NotFound(f"no flashcard for vocabulary {vocabulary_id}") from None
    return _to_card(row)


def create_card(user_id, vocabulary_id, now) -> ReviewCard:
    try:
        with transaction.atomic():
            row = Flashcard.objects.create(
                user_id=user_id, vocabulary_id=vocabulary_id,
                next_review_at=now, created_at=now,
            )
    except IntegrityError:
        raise AlreadyExists(f"flashcard for vocabulary {vocabulary_id} already exists") from None
    return _to_card(row)


def save_card(user_id, card: ReviewCard) -> ReviewCard:
    """
    Compare-and-swap the card on its version and append any new history
    entries, all in one transaction. Raises ConflictError if another writer
    got there first; nothing is written in that case.
    """
    with transaction.atomic():
        updated = (Flashcard.objects
                   .filter(pk=card.id, user_id=user_id, version=card.version)
                   .update(
                       ease_factor=card.ease_factor,
                       interval=card.interval,
                       next_review_at=card.next_review_at,
                       status=card.status.value,
                       version=F("version") + 1,
                   ))
        if not updated:
            raise ConflictError(f"flashcard {card.id} changed since version {card.version}")

        stored = ReviewLog.objects.filter(card_id=card.id).count()
        ReviewLog.objects.bulk_create([
            ReviewLog(card_id=card.id, grade=e.grade.value, reviewed_at=e.reviewed_at)
            for e in card.review_history[stored:]
        ])
    return replace(card, version=card.version + 1)


def list_cards(user_id) -> List[ReviewCard]:
    rows = (Flashcard.objects
            .filter(user_id=user_id)
            .prefetch_related("reviews")
            .order_by("next_review_at", "id"))
    return [_to_card(r) for r in rows]


def due_cards(user_id, now, limit: int = DUE_PAGE_SIZE) -> Iterator[ReviewCard]:
    # Evaluated here, so later writes never leak into the returned sequence
    rows = list(
        Flashcard.objects
        .filter(user_id=user_id, next_review_at__lte=now)
        .prefetch_related("reviews")
        .order_by("next_review_at", "id")[:limit]
    )
    return (_to_card(r) for r in rows)


# Activity ledgers

def find_ledger(user_id, language) -> Optional[ActivityLedger]:
    row = LanguageProgress.objects.filter(user_id=user_id, language=language).first()
    return _to_ledger(row) if row else None


def load_ledger(user_id, language) -> ActivityLedger:
    ledger = find_ledger(user_id, language)
    if ledger is None:
        raise NotFound(f"no progress for language {language!r}")
    return ledger


def list_ledgers(user_id) -> List[ActivityLedger]:
    rows = LanguageProgress.objects.filter(user_id=user_id).order_by("language")
    return [_to_ledger(r) for r in rows]


def save_ledger(user_id, ledger: ActivityLedger) -> ActivityLedger:
    """
    Persist the tracker-owned fields of ``ledger``. The activity counters are
    maintained elsewhere and are never written from here.
    """
    if ledger.id is None:
        try:
            with transaction.atomic():
                row = LanguageProgress.objects.create(
                    user_id=user_id,
                    language=ledger.language,
                    streak_days=ledger.streak_days,
                    last_activity=ledger.last_activity,
                    total_time_spent=ledger.total_time_spent,
                    version=1,
                )
        except IntegrityError:
            # A concurrent first activity created the ledger
            raise ConflictError(f"progress for {ledger.language!r} created concurrently") from None
        return _to_ledger(row)

    with transaction.atomic():
        updated = (LanguageProgress.objects
                   .filter(pk=ledger.id, user_id=user_id, version=ledger.version)
                   .update(
                       streak_days=ledger.streak_days,
                       last_activity=ledger.last_activity,
                       total_time_spent=ledger.total_time_spent,
                       version=F("version") + 1,
                   ))
        if not updated:
            raise ConflictError(f"progress {ledger.id} changed since version {ledger.version}")
    return replace(ledger, version=ledger.version + 1)

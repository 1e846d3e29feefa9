import uuid
from datetime import datetime, timedelta, timezone

import pytest

from scheduler.data import repos
from scheduler.data.models import LanguageProgress, ReviewLog
from scheduler.domain.enums import CardStatus, Grade
from scheduler.domain.errors import AlreadyExists, ConflictError, InvalidGrade, NotFound
from scheduler.domain.logic import apply_review
from scheduler.domain.streak import record_activity
from scheduler.services import activity, reviews

NOW = datetime(2024, 3, 10, 9, 30, tzinfo=timezone.utc)


def fixed(now):
    return lambda: now


# Cards

@pytest.mark.django_db
def test_new_card_is_due_immediately():
    user_id, vocab_id = uuid.uuid4(), uuid.uuid4()
    card = repos.create_card(user_id, vocab_id, NOW)

    assert card.status is CardStatus.NEW
    assert card.interval == 1
    assert card.ease_factor == pytest.approx(2.5)
    assert card.next_review_at == NOW
    assert card.review_history == ()
    assert card.version == 0


@pytest.mark.django_db
def test_duplicate_card_rejected():
    user_id, vocab_id = uuid.uuid4(), uuid.uuid4()
    repos.create_card(user_id, vocab_id, NOW)
    with pytest.raises(AlreadyExists):
        repos.create_card(user_id, vocab_id, NOW)


@pytest.mark.django_db
def test_missing_card_raises_not_found():
    with pytest.raises(NotFound):
        repos.load_card(uuid.uuid4(), uuid.uuid4())


@pytest.mark.django_db
def test_saved_review_round_trips():
    user_id, vocab_id = uuid.uuid4(), uuid.uuid4()
    repos.create_card(user_id, vocab_id, NOW)

    card = repos.load_card(user_id, vocab_id)
    saved = repos.save_card(user_id, apply_review(card, "good", NOW))
    reloaded = repos.load_card(user_id, vocab_id)

    assert saved.version == 1
    assert reloaded.version == 1
    assert reloaded.interval == 3
    assert reloaded.status is CardStatus.LEARNING
    assert reloaded.next_review_at == NOW + timedelta(days=3)
    assert [(e.reviewed_at, e.grade) for e in reloaded.review_history] == [(NOW, Grade.GOOD)]


@pytest.mark.django_db
def test_stale_save_raises_conflict_and_writes_nothing():
    user_id, vocab_id = uuid.uuid4(), uuid.uuid4()
    repos.create_card(user_id, vocab_id, NOW)

    first = repos.load_card(user_id, vocab_id)
    second = repos.load_card(user_id, vocab_id)
    repos.save_card(user_id, apply_review(first, "easy", NOW))

    with pytest.raises(ConflictError):
        repos.save_card(user_id, apply_review(second, "again", NOW))

    current = repos.load_card(user_id, vocab_id)
    assert current.interval == 4
    assert [e.grade for e in current.review_history] == [Grade.EASY]
    assert ReviewLog.objects.count() == 1


@pytest.mark.django_db
def test_save_is_scoped_to_owner():
    user_id, vocab_id = uuid.uuid4(), uuid.uuid4()
    repos.create_card(user_id, vocab_id, NOW)
    card = repos.load_card(user_id, vocab_id)

    with pytest.raises(ConflictError):
        repos.save_card(uuid.uuid4(), apply_review(card, "good", NOW))


@pytest.mark.django_db
def test_due_cards_caps_and_orders():
    user_id = uuid.uuid4()
    for i in range(25):
        repos.create_card(user_id, uuid.uuid4(), NOW - timedelta(hours=i))

    due = list(repos.due_cards(user_id, NOW))

    assert len(due) == 20
    dates = [c.next_review_at for c in due]
    assert dates == sorted(dates)
    assert dates[0] == NOW - timedelta(hours=24)


@pytest.mark.django_db
def test_due_cards_excludes_future_and_other_users():
    user_id = uuid.uuid4()
    due_vocab = uuid.uuid4()
    repos.create_card(user_id, due_vocab, NOW - timedelta(minutes=1))
    repos.create_card(user_id, uuid.uuid4(), NOW + timedelta(minutes=1))
    repos.create_card(uuid.uuid4(), uuid.uuid4(), NOW - timedelta(days=1))

    due = list(repos.due_cards(user_id, NOW))

    assert [c.vocabulary_id for c in due] == [due_vocab]


@pytest.mark.django_db
def test_due_cards_is_a_snapshot_consumed_once():
    user_id = uuid.uuid4()
    repos.create_card(user_id, uuid.uuid4(), NOW - timedelta(hours=1))

    due = repos.due_cards(user_id, NOW)
    repos.create_card(user_id, uuid.uuid4(), NOW - timedelta(hours=2))

    assert len(list(due)) == 1
    assert list(due) == []


# Ledgers

@pytest.mark.django_db
def test_first_ledger_save_creates_row():
    user_id = uuid.uuid4()
    saved = repos.save_ledger(user_id, record_activity(None, "nl", 10, NOW))

    assert saved.id is not None
    assert saved.version == 1
    assert repos.load_ledger(user_id, "nl").streak_days == 1


@pytest.mark.django_db
def test_missing_ledger_raises_not_found():
    assert repos.find_ledger(uuid.uuid4(), "nl") is None
    with pytest.raises(NotFound):
        repos.load_ledger(uuid.uuid4(), "nl")


@pytest.mark.django_db
def test_stale_ledger_save_raises_conflict():
    user_id = uuid.uuid4()
    repos.save_ledger(user_id, record_activity(None, "nl", 10, NOW))
    a = repos.load_ledger(user_id, "nl")
    b = repos.load_ledger(user_id, "nl")

    repos.save_ledger(user_id, record_activity(a, "nl", 5, NOW))
    with pytest.raises(ConflictError):
        repos.save_ledger(user_id, record_activity(b, "nl", 7, NOW))

    assert repos.load_ledger(user_id, "nl").total_time_spent == 15


@pytest.mark.django_db
def test_concurrent_first_activity_is_a_conflict():
    user_id = uuid.uuid4()
    repos.save_ledger(user_id, record_activity(None, "nl", 10, NOW))
    with pytest.raises(ConflictError):
        repos.save_ledger(user_id, record_activity(None, "nl", 10, NOW))


@pytest.mark.django_db
def test_ledger_save_leaves_counters_alone():
    user_id = uuid.uuid4()
    repos.save_ledger(user_id, record_activity(None, "nl", 10, NOW))
    ledger = repos.load_ledger(user_id, "nl")

    LanguageProgress.objects.filter(user_id=user_id).update(vocabulary_learned=8, tests_done=2)
    repos.save_ledger(user_id, record_activity(ledger, "nl", 10, NOW + timedelta(days=1)))

    row = LanguageProgress.objects.get(user_id=user_id)
    assert (row.vocabulary_learned, row.tests_done) == (8, 2)
    assert row.streak_days == 2


# Services

@pytest.mark.django_db
def test_record_review_retries_after_conflict(monkeypatch):
    user_id, vocab_id = uuid.uuid4(), uuid.uuid4()
    repos.create_card(user_id, vocab_id, NOW)

    real_save = repos.save_card
    calls = []

    def racing_save(uid, card):
        calls.append(card.version)
        if len(calls) == 1:
            # Someone else reviews the card first
            other = repos.load_card(uid, vocab_id)
            real_save(uid, apply_review(other, "again", NOW))
        return real_save(uid, card)

    monkeypatch.setattr(reviews, "save_card", racing_save)

    card = reviews.record_review(user_id, vocab_id, "good", clock=fixed(NOW))

    assert calls == [0, 1]
    assert card.version == 2
    assert [e.grade for e in card.review_history] == [Grade.AGAIN, Grade.GOOD]


@pytest.mark.django_db
def test_record_review_gives_up_after_repeated_conflicts(monkeypatch):
    user_id, vocab_id = uuid.uuid4(), uuid.uuid4()
    repos.create_card(user_id, vocab_id, NOW)

    def always_conflict(uid, card):
        raise ConflictError("busy")

    monkeypatch.setattr(reviews, "save_card", always_conflict)

    with pytest.raises(ConflictError):
        reviews.record_review(user_id, vocab_id, "good", clock=fixed(NOW))
    assert repos.load_card(user_id, vocab_id).version == 0


@pytest.mark.django_db
def test_record_review_rejects_unknown_grade_before_loading():
    with pytest.raises(InvalidGrade):
        reviews.record_review(uuid.uuid4(), uuid.uuid4(), "meh", clock=fixed(NOW))


@pytest.mark.django_db
def test_daily_activity_service_tracks_streak():
    user_id = uuid.uuid4()
    activity.record_daily_activity(user_id, "nl", 10, clock=fixed(NOW))
    activity.record_daily_activity(user_id, "nl", 10, clock=fixed(NOW + timedelta(hours=2)))
    saved = activity.record_daily_activity(user_id, "nl", None, clock=fixed(NOW + timedelta(days=1)))

    assert saved.streak_days == 2
    assert saved.total_time_spent == 20
    assert saved.last_activity == NOW + timedelta(days=1)

    summary = activity.streak_summary(user_id, clock=fixed(NOW + timedelta(days=1, hours=3)))
    assert summary == {"current_streak": 2, "has_activity_today": True}
    summary = activity.streak_summary(user_id, clock=fixed(NOW + timedelta(days=2)))
    assert summary == {"current_streak": 2, "has_activity_today": False}

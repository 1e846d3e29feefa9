from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Tuple
import uuid

from ..config import DEFAULT_EASE_FACTOR, DEFAULT_INTERVAL_DAYS
from .enums import CardStatus, Grade


@dataclass(frozen=True)
class ReviewEntry:
    reviewed_at: datetime
    grade: Grade


@dataclass(frozen=True)
class ReviewCard:
    vocabulary_id: uuid.UUID
    next_review_at: datetime
    ease_factor: float = DEFAULT_EASE_FACTOR
    interval: int = DEFAULT_INTERVAL_DAYS
    status: CardStatus = CardStatus.NEW
    review_history: Tuple[ReviewEntry, ...] = ()
    version: int = 0
    id: Optional[int] = None


@dataclass(frozen=True)
class ActivityLedger:
    language: str
    streak_days: int = 0
    last_activity: Optional[datetime] = None
    total_time_spent: int = 0
    vocabulary_learned: int = 0
    vocabulary_mastered: int = 0
    exercises_done: int = 0
    tests_done: int = 0
    version: int = 0
    id: Optional[int] = None

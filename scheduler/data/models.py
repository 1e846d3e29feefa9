from django.db import models
from django.utils import timezone

from ..config import DEFAULT_EASE_FACTOR, DEFAULT_INTERVAL_DAYS
from ..domain.enums import GRADE_CHOICES, STATUS_CHOICES, CardStatus


class Flashcard(models.Model):
    user_id = models.UUIDField()
    vocabulary_id = models.UUIDField()
    ease_factor = models.FloatField(default=DEFAULT_EASE_FACTOR)
    interval = models.PositiveIntegerField(default=DEFAULT_INTERVAL_DAYS)  # days
    status = models.CharField(
        max_length=16, choices=STATUS_CHOICES, default=CardStatus.NEW.value
    )
    next_review_at = models.DateTimeField(default=timezone.now)  # UTC
    version = models.PositiveIntegerField(default=0)
    created_at = models.DateTimeField(default=timezone.now)

    class Meta:
        unique_together = (("user_id", "vocabulary_id"),)
        indexes = [
            models.Index(fields=["user_id", "next_review_at"], name="flashcard_user_due_idx"),
        ]


class ReviewLog(models.Model):
    card = models.ForeignKey(
        Flashcard, on_delete=models.CASCADE, related_name="reviews"
    )
    grade = models.CharField(max_length=8, choices=GRADE_CHOICES)
    reviewed_at = models.DateTimeField()

    class Meta:
        ordering = ["id"]


class LanguageProgress(models.Model):
    user_id = models.UUIDField()
    language = models.CharField(max_length=32)
    streak_days = models.PositiveIntegerField(default=0)
    last_activity = models.DateTimeField(null=True, blank=True)
    total_time_spent = models.PositiveIntegerField(default=0)  # minutes
    vocabulary_learned = models.PositiveIntegerField(default=0)
    vocabulary_mastered = models.PositiveIntegerField(default=0)
    exercises_done = models.PositiveIntegerField(default=0)
    tests_done = models.PositiveIntegerField(default=0)
    version = models.PositiveIntegerField(default=0)
    created_at = models.DateTimeField(default=timezone.now)

    class Meta:
        unique_together = (("user_id", "language"),)

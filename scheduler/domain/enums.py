from enum import Enum


class Grade(str, Enum):
    AGAIN = "again"
    HARD = "hard"
    GOOD = "good"
    EASY = "easy"


class CardStatus(str, Enum):
    NEW = "new"
    LEARNING = "learning"
    REVIEW = "review"
    MASTERED = "mastered"


GRADE_CHOICES = [(g.value, g.value) for g in Grade]
STATUS_CHOICES = [(s.value, s.value) for s in CardStatus]

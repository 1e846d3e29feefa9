from django.urls import path
from .views import (
    ActivityView,
    DueCardsView,
    FlashcardView,
    LanguageProgressView,
    ProgressView,
    ReviewView,
    StatisticsView,
    StreakView,
    UserFlashcardsView,
)

urlpatterns = [
    path("flashcards", FlashcardView.as_view(), name="flashcards"),
    path("reviews", ReviewView.as_view(), name="review"),
    path("activity", ActivityView.as_view(), name="activity"),
    path("users/<uuid:user_id>/flashcards", UserFlashcardsView.as_view(), name="user-flashcards"),
    path("users/<uuid:user_id>/due-cards", DueCardsView.as_view(), name="due-cards"),
    path("users/<uuid:user_id>/progress", ProgressView.as_view(), name="progress"),
    path("users/<uuid:user_id>/progress/<str:language>", LanguageProgressView.as_view(), name="language-progress"),
    path("users/<uuid:user_id>/streak", StreakView.as_view(), name="streak"),
    path("users/<uuid:user_id>/statistics", StatisticsView.as_view(), name="statistics"),
]

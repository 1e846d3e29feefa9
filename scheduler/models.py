from .data.models import Flashcard, LanguageProgress, ReviewLog  # noqa: F401

from rest_framework import views, status
from rest_framework.response import Response
import structlog
import uuid
from ..domain.errors import (
    AlreadyExists,
    ConflictError,
    InvalidDuration,
    InvalidGrade,
    LanguageMismatch,
    NotFound,
    SchedulerError,
)
from ..services import activity, reviews
from ..utils.time import system_clock, to_utc_iso
from .serializers import (
    ActivityInSerializer,
    CardOutSerializer,
    DueQuerySerializer,
    FlashcardInSerializer,
    LedgerOutSerializer,
    ReviewInSerializer,
)

base_logger = structlog.get_logger()

ERROR_STATUS = {
    InvalidGrade: status.HTTP_400_BAD_REQUEST,
    InvalidDuration: status.HTTP_400_BAD_REQUEST,
    LanguageMismatch: status.HTTP_400_BAD_REQUEST,
    NotFound: status.HTTP_404_NOT_FOUND,
    AlreadyExists: status.HTTP_409_CONFLICT,
    ConflictError: status.HTTP_409_CONFLICT,
}


def error_response(logger, exc: SchedulerError):
    status_code = ERROR_STATUS.get(type(exc), status.HTTP_400_BAD_REQUEST)
    logger.warning("request_rejected", error=type(exc).__name__, detail=str(exc), status=status_code)
    return Response({"error": str(exc)}, status=status_code)


class ClockedView(views.APIView):
    clock = staticmethod(system_clock)

    def initial(self, request, *args, **kwargs):
        super().initial(request, *args, **kwargs)
        # Create a unique request_id
        self.logger = base_logger.bind(request_id=str(uuid.uuid4()))


class FlashcardView(ClockedView):
    def post(self, request):
        s = FlashcardInSerializer(data=request.data)
        s.is_valid(raise_exception=True)
        user_id = s.validated_data["user_id"]
        vocabulary_id = s.validated_data["vocabulary_id"]

        try:
            card = reviews.add_flashcard(user_id, vocabulary_id, clock=self.clock)
        except SchedulerError as e:
            return error_response(self.logger, e)

        return Response(CardOutSerializer(card).data, status=status.HTTP_201_CREATED)


class UserFlashcardsView(ClockedView):
    def get(self, request, user_id):
        cards = reviews.user_flashcards(user_id)
        return Response(CardOutSerializer(cards, many=True).data)


class DueCardsView(ClockedView):
    def get(self, request, user_id):
        qs = DueQuerySerializer(data=request.query_params)
        qs.is_valid(raise_exception=True)
        until = qs.validated_data.get("until") or self.clock()

        results = list(reviews.cards_due(user_id, until))

        self.logger.info(
            "due_cards_api_response",
            user_id=str(user_id),
            until_utc=to_utc_iso(until),
            card_count=len(results),
        )

        return Response(
            {
                "user_id": str(user_id),
                "until_utc": to_utc_iso(until),
                "cards": CardOutSerializer(results, many=True).data,
            }
        )


class ReviewView(ClockedView):
    def post(self, request):
        s = ReviewInSerializer(data=request.data)
        s.is_valid(raise_exception=True)

        user_id = s.validated_data["user_id"]
        vocabulary_id = s.validated_data["vocabulary_id"]
        grade = s.validated_data["grade"]

        try:
            card = reviews.record_review(user_id, vocabulary_id, grade, clock=self.clock)
        except SchedulerError as e:
            return error_response(self.logger, e)

        # Log with request_id & relevant context
        self.logger.info(
            "review_api_response",
            user_id=str(user_id),
            vocabulary_id=str(vocabulary_id),
            grade=grade,
            interval_days=card.interval,
            status=card.status.value,
            next_review_utc=to_utc_iso(card.next_review_at),
        )

        return Response(CardOutSerializer(card).data)


class ActivityView(ClockedView):
    def post(self, request):
        s = ActivityInSerializer(data=request.data)
        s.is_valid(raise_exception=True)

        try:
            ledger = activity.record_daily_activity(
                s.validated_data["user_id"],
                s.validated_data["language"],
                s.validated_data.get("minutes_spent"),
                clock=self.clock,
            )
        except SchedulerError as e:
            return error_response(self.logger, e)

        return Response(LedgerOutSerializer(ledger).data)


class ProgressView(ClockedView):
    def get(self, request, user_id):
        return Response(LedgerOutSerializer(activity.user_progress(user_id), many=True).data)


class LanguageProgressView(ClockedView):
    def get(self, request, user_id, language):
        try:
            ledger = activity.language_progress(user_id, language)
        except SchedulerError as e:
            return error_response(self.logger, e)
        return Response(LedgerOutSerializer(ledger).data)


class StreakView(ClockedView):
    def get(self, request, user_id):
        return Response(activity.streak_summary(user_id, clock=self.clock))


class StatisticsView(ClockedView):
    def get(self, request, user_id):
        return Response(activity.statistics(user_id))

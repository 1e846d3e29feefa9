from rest_framework import serializers

class FlashcardInSerializer(serializers.Serializer):
    user_id = serializers.UUIDField()
    vocabulary_id = serializers.UUIDField()

class ReviewInSerializer(serializers.Serializer):
    user_id = serializers.UUIDField()
    vocabulary_id = serializers.UUIDField()
    grade = serializers.CharField(max_length=16)  # checked by the scheduler

class DueQuerySerializer(serializers.Serializer):
    until = serializers.DateTimeField(required=False)  # ISO-8601, defaults to now

class ActivityInSerializer(serializers.Serializer):
    user_id = serializers.UUIDField()
    language = serializers.CharField(max_length=32)
    minutes_spent = serializers.IntegerField(required=False, allow_null=True)

class ReviewEntrySerializer(serializers.Serializer):
    reviewed_at = serializers.DateTimeField()
    grade = serializers.CharField(source="grade.value")

class CardOutSerializer(serializers.Serializer):
    vocabulary_id = serializers.UUIDField()
    status = serializers.CharField(source="status.value")
    interval_days = serializers.IntegerField(source="interval")
    ease_factor = serializers.FloatField()
    next_review_utc = serializers.DateTimeField(source="next_review_at")
    review_history = ReviewEntrySerializer(many=True)
    version = serializers.IntegerField()

class LedgerOutSerializer(serializers.Serializer):
    language = serializers.CharField()
    streak_days = serializers.IntegerField()
    last_activity = serializers.DateTimeField(allow_null=True)
    total_time_spent = serializers.IntegerField()
    vocabulary_learned = serializers.IntegerField()
    vocabulary_mastered = serializers.IntegerField()
    exercises_done = serializers.IntegerField()
    tests_done = serializers.IntegerField()
    version = serializers.IntegerField()

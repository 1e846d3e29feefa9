import django.db.models.deletion
import django.utils.timezone
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Flashcard",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("user_id", models.UUIDField()),
                ("vocabulary_id", models.UUIDField()),
                ("ease_factor", models.FloatField(default=2.5)),
                ("interval", models.PositiveIntegerField(default=1)),
                (
                    "status",
                    models.CharField(
                        choices=[("new", "new"), ("learning", "learning"), ("review", "review"), ("mastered", "mastered")],
                        default="new",
                        max_length=16,
                    ),
                ),
                ("next_review_at", models.DateTimeField(default=django.utils.timezone.now)),
                ("version", models.PositiveIntegerField(default=0)),
                ("created_at", models.DateTimeField(default=django.utils.timezone.now)),
            ],
            options={
                "unique_together": {("user_id", "vocabulary_id")},
                "indexes": [models.Index(fields=["user_id", "next_review_at"], name="flashcard_user_due_idx")],
            },
        ),
        migrations.CreateModel(
            name="LanguageProgress",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("user_id", models.UUIDField()),
                ("language", models.CharField(max_length=32)),
                ("streak_days", models.PositiveIntegerField(default=0)),
                ("last_activity", models.DateTimeField(blank=True, null=True)),
                ("total_time_spent", models.PositiveIntegerField(default=0)),
                ("vocabulary_learned", models.PositiveIntegerField(default=0)),
                ("vocabulary_mastered", models.PositiveIntegerField(default=0)),
                ("exercises_done", models.PositiveIntegerField(default=0)),
                ("tests_done", models.PositiveIntegerField(default=0)),
                ("version", models.PositiveIntegerField(default=0)),
                ("created_at", models.DateTimeField(default=django.utils.timezone.now)),
            ],
            options={
                "unique_together": {("user_id", "language")},
            },
        ),
        migrations.CreateModel(
            name="ReviewLog",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                (
                    "grade",
                    models.CharField(
                        choices=[("again", "again"), ("hard", "hard"), ("good", "good"), ("easy", "easy")],
                        max_length=8,
                    ),
                ),
                ("reviewed_at", models.DateTimeField()),
                (
                    "card",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="reviews",
                        to="scheduler.flashcard",
                    ),
                ),
            ],
            options={
                "ordering": ["id"],
            },
        ),
    ]

import uuid

from django.db import models
from django.utils import timezone

from ..config import DEFAULT_NEW_CARD_COUNT, DEFAULT_REVIEW_CARD_COUNT


class Deck(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=200)
    created_at = models.DateTimeField(default=timezone.now)

    def __str__(self):
        return self.name


class Flashcard(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    deck = models.ForeignKey(Deck, on_delete=models.CASCADE, related_name="flashcards")
    front = models.TextField()
    back = models.TextField()
    created_at = models.DateTimeField(default=timezone.now)

    class Meta:
        # creation order is the order new cards are introduced in
        ordering = ["created_at", "id"]


class CardSchedule(models.Model):
    user_id = models.UUIDField()
    card = models.ForeignKey(Flashcard, on_delete=models.CASCADE, related_name="schedules")
    repetitions = models.IntegerField(default=-1)  # -1 = never studied
    ease_factor = models.FloatField()
    interval_minutes = models.BigIntegerField(default=0)
    last_reviewed = models.DateTimeField(null=True, blank=True)
    next_review = models.DateTimeField(null=True, blank=True)  # UTC

    class Meta:
        unique_together = (("user_id", "card"),)
        indexes = [
            models.Index(fields=["user_id", "next_review"]),
        ]


class DeckSettings(models.Model):
    user_id = models.UUIDField()
    deck = models.ForeignKey(Deck, on_delete=models.CASCADE, related_name="study_settings")
    new_card_count = models.PositiveIntegerField(default=DEFAULT_NEW_CARD_COUNT)
    review_card_count = models.PositiveIntegerField(default=DEFAULT_REVIEW_CARD_COUNT)

    class Meta:
        unique_together = (("user_id", "deck"),)

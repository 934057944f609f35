import time
import uuid
from datetime import timedelta

import fakeredis
import pytest
from django.utils import timezone

from scheduler.cache import client as cache_client
from scheduler.data.models import CardSchedule, Deck, Flashcard


@pytest.fixture(autouse=True)
def redis_client():
    """A fresh in-memory Redis installed as the process-wide cache client."""
    fake = fakeredis.FakeRedis(server=fakeredis.FakeServer(), decode_responses=True)
    previous = cache_client.install(fake)
    yield fake
    cache_client.install(previous)


@pytest.fixture
def broken_redis():
    """A cache client whose every command fails with a connection error."""
    server = fakeredis.FakeServer()
    server.connected = False
    fake = fakeredis.FakeRedis(server=server, decode_responses=True)
    previous = cache_client.install(fake)
    yield fake
    cache_client.install(previous)


@pytest.fixture
def user_id():
    return uuid.uuid4()


def make_deck(n_cards, name="Deck"):
    deck = Deck.objects.create(name=name)
    base = timezone.now() - timedelta(days=1)
    for i in range(n_cards):
        Flashcard.objects.create(
            deck=deck,
            front=f"front {i}",
            back=f"back {i}",
            created_at=base + timedelta(seconds=i),
        )
    return deck


def make_due(user_id, card, next_review, interval=120, repetitions=2):
    CardSchedule.objects.filter(user_id=user_id, card=card).update(
        repetitions=repetitions,
        interval_minutes=interval,
        last_reviewed=next_review - timedelta(minutes=interval),
        next_review=next_review,
    )


@pytest.fixture
def deck():
    return make_deck(5)


class SlowRedis(fakeredis.FakeRedis):
    """Every command answers, but only after a delay."""

    delay = 0.3

    def execute_command(self, *args, **options):
        time.sleep(self.delay)
        return super().execute_command(*args, **options)


@pytest.fixture
def slow_redis():
    slow = SlowRedis(server=fakeredis.FakeServer(), decode_responses=True)
    previous = cache_client.install(slow)
    yield slow
    cache_client.install(previous)

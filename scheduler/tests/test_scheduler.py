import pytest
import logging
from django.urls import reverse
import uuid

from scheduler.data.repos import ensure_deck_access

from .conftest import make_deck

logger = logging.getLogger(__name__)

# Helpers

def post_review(client, user_id, card_id, grade):
    url = reverse("review")
    payload = {
        "user_id": str(user_id),
        "card_id": str(card_id),
        "grade": grade,
    }
    resp = client.post(url, data=payload, content_type="application/json")
    data = resp.json()
    logger.info(
        "POST /reviews grade=%s → status=%s interval=%s",
        grade,
        resp.status_code,
        data.get("interval"),
    )
    return resp


def get_next(client, user_id, deck_id):
    url = reverse("next-cards", kwargs={"user_id": str(user_id), "deck_id": str(deck_id)})
    resp = client.get(url)
    logger.info("GET /next-cards → status=%s", resp.status_code)
    return resp


def deck_url(name, user_id, deck_id):
    return reverse(name, kwargs={"user_id": str(user_id), "deck_id": str(deck_id)})


# Tests

@pytest.mark.django_db
def test_new_card_intervals(client):
    """New cards: again=5, hard=10, easy=20 minutes."""
    user_id = uuid.uuid4()
    deck = make_deck(3)
    ensure_deck_access(user_id, deck)
    cards = list(deck.flashcards.all())

    for card, grade, minutes, label in zip(cards, [0, 1, 2], [5, 10, 20], ["again", "hard", "easy"]):
        resp = post_review(client, user_id, card.id, grade)
        data = resp.json()
        assert resp.status_code == 200
        assert data["interval"] == minutes
        assert data["repetitions"] == 1
        assert data["grade_label"] == label
        assert data["next_review_utc"].endswith("+00:00")

    logger.info("✓ Passed: again=5m, hard=10m, easy=20m")


@pytest.mark.django_db
def test_review_rejects_out_of_range_grade(client):
    user_id = uuid.uuid4()
    deck = make_deck(1)
    ensure_deck_access(user_id, deck)

    resp = post_review(client, user_id, deck.flashcards.first().id, 3)

    assert resp.status_code == 400
    assert "grade" in resp.json()


@pytest.mark.django_db
def test_review_unknown_card(client):
    resp = post_review(client, uuid.uuid4(), uuid.uuid4(), 1)

    assert resp.status_code == 404
    assert "not found" in resp.json()["error"]


@pytest.mark.django_db
def test_next_cards_then_grade(client):
    """Cards served to a session can be graded and stop being new."""
    user_id = uuid.uuid4()
    deck = make_deck(4)

    resp = get_next(client, user_id, deck.id)
    data = resp.json()
    assert resp.status_code == 200
    assert len(data["cards"]) == 4
    assert data["queue_length"] == 0
    first = data["cards"][0]
    assert first["srs_metadata"]["repetitions"] == -1
    assert first["srs_metadata"]["next_review"] is None

    post_review(client, user_id, first["id"], 2)

    stats = client.get(deck_url("deck-stats", user_id, deck.id)).json()
    assert stats["total_cards"] == 4
    assert stats["new_cards"] == 3
    assert stats["future_cards"] == 1
    assert stats["studied_today"] == 1
    logger.info("✓ Passed: graded card left the new pool")


@pytest.mark.django_db
def test_next_cards_unknown_deck(client):
    resp = get_next(client, uuid.uuid4(), uuid.uuid4())
    assert resp.status_code == 404


@pytest.mark.django_db
def test_next_cards_with_cache_down(client, broken_redis):
    user_id = uuid.uuid4()
    deck = make_deck(3)

    resp = get_next(client, user_id, deck.id)

    assert resp.status_code == 200
    assert len(resp.json()["cards"]) == 3


@pytest.mark.django_db
def test_deck_settings_round_trip(client):
    user_id = uuid.uuid4()
    deck = make_deck(0)
    url = deck_url("deck-settings", user_id, deck.id)

    assert client.get(url).json()["new_card_count"] == 20

    resp = client.put(
        url,
        data={"new_card_count": 5, "review_card_count": 40},
        content_type="application/json",
    )
    assert resp.status_code == 200
    assert resp.json()["review_card_count"] == 40

    data = client.get(url).json()
    assert (data["new_card_count"], data["review_card_count"]) == (5, 40)


@pytest.mark.django_db
def test_deck_settings_validation(client):
    deck = make_deck(0)
    url = deck_url("deck-settings", uuid.uuid4(), deck.id)

    resp = client.put(
        url,
        data={"new_card_count": -1, "review_card_count": 40},
        content_type="application/json",
    )
    assert resp.status_code == 400

    resp = client.put(
        deck_url("deck-settings", uuid.uuid4(), uuid.uuid4()),
        data={"new_card_count": 1, "review_card_count": 1},
        content_type="application/json",
    )
    assert resp.status_code == 404

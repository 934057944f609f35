import uuid

import pytest

from scheduler.cache.queue import StudyQueue, queue_key


@pytest.fixture
def queue(redis_client):
    return StudyQueue(redis_client, uuid.uuid4(), uuid.uuid4())


def drain(queue):
    popped = []
    card_id = queue.pop_next()
    while card_id is not None:
        popped.append(card_id)
        card_id = queue.pop_next()
    return popped


def test_set_then_pop_is_fifo(queue):
    queue.set(["c1", "c2", "c3"])
    assert queue.length() == 3
    assert queue.pop_next() == "c1"
    assert queue.pop_next() == "c2"
    assert queue.length() == 1


def test_set_replaces_previous_contents(queue):
    queue.set(["old1", "old2"])
    queue.set(["new1"])
    assert drain(queue) == ["new1"]


def test_set_refreshes_one_hour_expiry(queue, redis_client):
    queue.set(["c1"])
    ttl = redis_client.ttl(queue.key)
    assert 3590 <= ttl <= 3600


def test_set_empty_clears_queue(queue):
    queue.set(["c1"])
    queue.set([])
    assert queue.length() == 0
    assert queue.pop_next() is None


def test_append_many_keeps_existing(queue):
    queue.set(["c1"])
    queue.append_many(["c2", "c3"])
    queue.append_many([])
    assert queue.peek_all() == ["c1", "c2", "c3"]
    assert drain(queue) == ["c1", "c2", "c3"]


def test_queues_are_scoped_per_user_and_deck(redis_client):
    deck_id = uuid.uuid4()
    a = StudyQueue(redis_client, uuid.uuid4(), deck_id)
    b = StudyQueue(redis_client, uuid.uuid4(), deck_id)
    a.set(["x"])
    assert b.length() == 0
    assert a.key == queue_key(a.user_id, deck_id)


def test_clear(queue):
    queue.set(["c1", "c2"])
    queue.clear()
    assert queue.length() == 0


def test_operations_fail_soft_when_cache_is_down(broken_redis):
    queue = StudyQueue(broken_redis, uuid.uuid4(), uuid.uuid4())
    assert queue.length() == 0
    assert queue.pop_next() is None
    assert queue.peek_all() == []
    assert queue.set(["c1"]) is False
    assert queue.append_many(["c1"]) is False
    assert queue.clear() is False

from typing import List, Optional, Sequence

import structlog

from ..config import QUEUE_TTL_SECONDS
from .client import fail_soft

logger = structlog.get_logger()


def queue_key(user_id, deck_id) -> str:
    return f"deck:{deck_id}:user:{user_id}:queue"


class StudyQueue:
    """Ordered card IDs waiting to be shown to one user for one deck.

    FIFO: ``set`` pushes to the tail in the given order and ``pop_next``
    takes from the head, so the first ID passed to ``set`` is served first.
    """

    def __init__(self, client, user_id, deck_id):
        self.client = client
        self.user_id = user_id
        self.deck_id = deck_id
        self.key = queue_key(user_id, deck_id)

    @fail_soft(0)
    def length(self) -> int:
        return self.client.llen(self.key)

    @fail_soft(None)
    def pop_next(self) -> Optional[str]:
        return self.client.lpop(self.key)

    @fail_soft(list)
    def peek_all(self) -> List[str]:
        return self.client.lrange(self.key, 0, -1)

    @fail_soft(False)
    def set(self, card_ids: Sequence[str]) -> bool:
        card_ids = [str(card_id) for card_id in card_ids]
        with self.client.pipeline(transaction=True) as pipe:
            pipe.delete(self.key)
            if card_ids:
                pipe.rpush(self.key, *card_ids)
            pipe.expire(self.key, QUEUE_TTL_SECONDS)
            pipe.execute()
        logger.info(
            "study_queue_set",
            user_id=str(self.user_id),
            deck_id=str(self.deck_id),
            queue_length=len(card_ids),
        )
        return True

    @fail_soft(False)
    def append_many(self, card_ids: Sequence[str]) -> bool:
        if not card_ids:
            return True
        self.client.rpush(self.key, *[str(card_id) for card_id in card_ids])
        return True

    @fail_soft(False)
    def clear(self) -> bool:
        self.client.delete(self.key)
        return True

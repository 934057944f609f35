from .data.models import CardSchedule, Deck, DeckSettings, Flashcard  # noqa: F401

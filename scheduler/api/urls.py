from django.urls import path
from .views import ReviewView, NextCardsView, DeckStatsView, DeckSettingsView

urlpatterns = [
    path("reviews", ReviewView.as_view(), name="review"),
    path("users/<uuid:user_id>/decks/<uuid:deck_id>/next-cards", NextCardsView.as_view(), name="next-cards"),
    path("users/<uuid:user_id>/decks/<uuid:deck_id>/stats", DeckStatsView.as_view(), name="deck-stats"),
    path("users/<uuid:user_id>/decks/<uuid:deck_id>/settings", DeckSettingsView.as_view(), name="deck-settings"),
]

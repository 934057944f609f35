import json
import uuid

from django.core.management.base import BaseCommand, CommandError
from django.db import transaction

from scheduler.data.models import Deck, Flashcard
from scheduler.data.repos import ensure_deck_access

DEFAULT_CARDS = [
    {"front": "What is Binary Search?", "back": "A search that halves a sorted range on every step."},
    {"front": "What is a Hash Table?", "back": "A structure mapping keys to buckets through a hash function."},
    {"front": "What is a Stack?", "back": "A last-in, first-out collection."},
    {"front": "What is a Queue?", "back": "A first-in, first-out collection."},
    {"front": "What is Big O notation?", "back": "An upper bound on how cost grows with input size."},
    {"front": "What is Deadlock?", "back": "Processes each waiting on a resource another one holds."},
    {"front": "What is a Linked List?", "back": "Nodes that each point at the next node."},
    {"front": "What is Recursion?", "back": "A function defined in terms of itself."},
]


class Command(BaseCommand):
    help = "Create a demo deck of flashcards"

    def add_arguments(self, parser):
        parser.add_argument("--name", default="Computer Science Basics", help="Deck name")
        parser.add_argument(
            "--file", help="JSON file holding a list of {\"front\", \"back\"} objects"
        )
        parser.add_argument(
            "--user", type=uuid.UUID, help="Give this user id access to the new deck"
        )

    def handle(self, *args, **options):
        cards = DEFAULT_CARDS
        file_name = options.get("file")
        if file_name:
            try:
                with open(file_name) as json_file:
                    cards = json.load(json_file)
            except (OSError, ValueError) as e:
                raise CommandError(f"Error loading cards from {file_name}: {e}")

        with transaction.atomic():
            deck = Deck.objects.create(name=options["name"])
            Flashcard.objects.bulk_create(
                [Flashcard(deck=deck, front=c["front"], back=c["back"]) for c in cards]
            )

        self.stdout.write(
            self.style.SUCCESS(f"Deck {deck.id} created with {len(cards)} cards")
        )

        user_id = options.get("user")
        if user_id:
            created = ensure_deck_access(user_id, deck)
            self.stdout.write(
                self.style.SUCCESS(f"User {user_id} given access ({created} card schedules)")
            )

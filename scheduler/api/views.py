from rest_framework import views, status
from rest_framework.response import Response
import structlog
import uuid
from ..domain.enums import GRADE_LABELS, Grade
from ..domain.state import StudySettings
from ..errors import NotFound
from ..services.decks import get_deck_settings, get_deck_stats, update_deck_settings
from ..services.reviews import update_card_srs
from ..services.study import get_next_cards
from ..utils.time import to_local_iso, to_utc_iso
from .serializers import ReviewInSerializer, DeckSettingsSerializer

base_logger = structlog.get_logger()


def error_response(exc, status_code):
    return Response({"error": str(exc)}, status=status_code)


def card_payload(card):
    meta = card["srs_metadata"]
    return {
        **card,
        "srs_metadata": {
            **meta,
            "last_reviewed": to_utc_iso(meta["last_reviewed"]),
            "next_review": to_utc_iso(meta["next_review"]),
        },
    }


def settings_payload(user_id, deck_id, settings):
    return {
        "user_id": str(user_id),
        "deck_id": str(deck_id),
        "new_card_count": settings.new_card_count,
        "review_card_count": settings.review_card_count,
    }


class ReviewView(views.APIView):
    def post(self, request):
        # Create a unique request_id
        request_id = str(uuid.uuid4())
        logger = base_logger.bind(request_id=request_id)

        s = ReviewInSerializer(data=request.data)
        s.is_valid(raise_exception=True)

        user_id = s.validated_data["user_id"]
        card_id = s.validated_data["card_id"]
        grade = s.validated_data["grade"]

        try:
            result = update_card_srs(user_id, card_id, grade)
        except NotFound as e:
            logger.info("review_api_not_found", user_id=str(user_id), card_id=str(card_id))
            return error_response(e, status.HTTP_404_NOT_FOUND)

        next_review = result["next_review"]
        logger.info(
            "review_api_response",
            user_id=str(user_id),
            card_id=str(card_id),
            grade=grade,
            interval_minutes=result["interval"],
            repetitions=result["repetitions"],
            next_review_utc=to_utc_iso(next_review),
            status=status.HTTP_200_OK,
        )

        return Response(
            {
                "next_review_utc": to_utc_iso(next_review),
                "next_review_local": to_local_iso(next_review),
                "interval": result["interval"],
                "repetitions": result["repetitions"],
                "ease_factor": result["ease_factor"],
                "grade_label": GRADE_LABELS[Grade(grade)],
            },
            status=status.HTTP_200_OK,
        )


class NextCardsView(views.APIView):
    def get(self, request, user_id, deck_id):
        request_id = str(uuid.uuid4())
        logger = base_logger.bind(request_id=request_id)

        try:
            result = get_next_cards(user_id, deck_id)
        except NotFound as e:
            return error_response(e, status.HTTP_404_NOT_FOUND)

        logger.info(
            "next_cards_api_response",
            user_id=str(user_id),
            deck_id=str(deck_id),
            card_count=len(result["cards"]),
            queue_length=result["queue_length"],
        )

        return Response(
            {
                "cards": [card_payload(card) for card in result["cards"]],
                "queue_length": result["queue_length"],
            }
        )


class DeckStatsView(views.APIView):
    def get(self, request, user_id, deck_id):
        try:
            stats = get_deck_stats(user_id, deck_id)
        except NotFound as e:
            return error_response(e, status.HTTP_404_NOT_FOUND)
        return Response({"user_id": str(user_id), "deck_id": str(deck_id), **stats})


class DeckSettingsView(views.APIView):
    def get(self, request, user_id, deck_id):
        try:
            settings = get_deck_settings(user_id, deck_id)
        except NotFound as e:
            return error_response(e, status.HTTP_404_NOT_FOUND)
        return Response(settings_payload(user_id, deck_id, settings))

    def put(self, request, user_id, deck_id):
        request_id = str(uuid.uuid4())
        logger = base_logger.bind(request_id=request_id)

        s = DeckSettingsSerializer(data=request.data)
        s.is_valid(raise_exception=True)

        try:
            settings = update_deck_settings(user_id, deck_id, StudySettings(**s.validated_data))
        except NotFound as e:
            return error_response(e, status.HTTP_404_NOT_FOUND)

        logger.info(
            "deck_settings_api_response",
            user_id=str(user_id),
            deck_id=str(deck_id),
            new_card_count=settings.new_card_count,
            review_card_count=settings.review_card_count,
        )
        return Response(settings_payload(user_id, deck_id, settings))

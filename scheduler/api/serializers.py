from rest_framework import serializers

class ReviewInSerializer(serializers.Serializer):
    user_id = serializers.UUIDField()
    card_id = serializers.UUIDField()
    grade = serializers.IntegerField(min_value=0, max_value=2)  # 0 again, 1 hard, 2 easy

class DeckSettingsSerializer(serializers.Serializer):
    new_card_count = serializers.IntegerField(min_value=0)
    review_card_count = serializers.IntegerField(min_value=0)

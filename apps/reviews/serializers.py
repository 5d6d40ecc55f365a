"""Serializers for reviews.

Input serializers only shape and range-check the payload; ownership and
duplicate checks live in :mod:`apps.reviews.services`.
"""

from __future__ import annotations

from rest_framework import serializers  # type: ignore

from apps.users.serializers import UserSummarySerializer

from .models import Review


class ReviewCreateSerializer(serializers.Serializer):
    property_id = serializers.IntegerField(min_value=1)
    rating = serializers.IntegerField(min_value=1, max_value=5)
    comment = serializers.CharField(required=False, allow_blank=True, default="", trim_whitespace=True)


class ReviewUpdateSerializer(serializers.Serializer):
    rating = serializers.IntegerField(min_value=1, max_value=5, required=False)
    comment = serializers.CharField(required=False, allow_blank=True, trim_whitespace=True)

    def validate(self, attrs):  # type: ignore
        if not attrs:
            raise serializers.ValidationError("Provide rating or comment.")
        return attrs


class ReviewSerializer(serializers.ModelSerializer):
    """Read serializer for reviews including related ids."""

    guest = UserSummarySerializer(read_only=True)
    property_id = serializers.ReadOnlyField(source="property.id")
    property_title = serializers.ReadOnlyField(source="property.title")

    class Meta:
        model = Review
        fields = [
            "id",
            "property_id",
            "property_title",
            "guest",
            "rating",
            "comment",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields

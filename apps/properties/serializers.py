"""Serializers for the properties domain."""

from __future__ import annotations

from rest_framework import serializers  # type: ignore

from apps.users.serializers import UserSummarySerializer
from shared.domain.value_objects import SUPPORTED_CURRENCIES

from .models import Property


class PropertySerializer(serializers.ModelSerializer):
    host = UserSummarySerializer(read_only=True)
    type = serializers.CharField(source="property_type", read_only=True)
    review_count = serializers.SerializerMethodField()

    class Meta:
        model = Property
        fields = [
            "id",
            "title",
            "description",
            "address",
            "city",
            "state",
            "country",
            "zip_code",
            "latitude",
            "longitude",
            "price",
            "currency",
            "amenities",
            "max_guests",
            "type",
            "rating",
            "review_count",
            "host",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields

    def get_review_count(self, obj: Property) -> int:
        annotated = getattr(obj, "review_count", None)
        if annotated is not None:
            return annotated
        return obj.reviews.count()


class PropertyWriteSerializer(serializers.ModelSerializer):
    type = serializers.ChoiceField(source="property_type", choices=Property.PropertyType.choices)
    amenities = serializers.ListField(
        child=serializers.CharField(max_length=100), required=False, allow_empty=True
    )
    currency = serializers.ChoiceField(choices=SUPPORTED_CURRENCIES, required=False)

    class Meta:
        model = Property
        fields = [
            "title",
            "description",
            "address",
            "city",
            "state",
            "country",
            "zip_code",
            "latitude",
            "longitude",
            "price",
            "currency",
            "amenities",
            "max_guests",
            "type",
        ]

    def validate_title(self, value: str) -> str:
        value = value.strip()
        if not value:
            raise serializers.ValidationError("Please provide a title.")
        return value

    def validate_amenities(self, value: list[str]) -> list[str]:
        seen: list[str] = []
        for item in value:
            item = item.strip()
            if item and item not in seen:
                seen.append(item)
        return seen

    def to_representation(self, instance):  # type: ignore
        return PropertySerializer(instance, context=self.context).data

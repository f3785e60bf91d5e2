"""
Serializers for the transactions API.
Handle request shape validation and rendering of application DTOs.
"""

from rest_framework import serializers
from rest_framework.settings import ISO_8601

from apps.transactions.domain.models import DESCRIPTION_MAX_LENGTH

# Accept plain dates as well as RFC 3339 timestamps; only the date is kept.
DATE_INPUT_FORMATS = [ISO_8601, "%Y-%m-%dT%H:%M:%S%z", "%Y-%m-%dT%H:%M:%S.%f%z"]


class CreatePurchaseSerializer(serializers.Serializer):
    description = serializers.CharField(max_length=DESCRIPTION_MAX_LENGTH, trim_whitespace=False)
    date = serializers.DateField(input_formats=DATE_INPUT_FORMATS)
    # Any precision is accepted; rounding to cents happens in the domain.
    amount = serializers.DecimalField(max_digits=None, decimal_places=None)

    def validate_amount(self, value):
        if value <= 0:
            raise serializers.ValidationError("Amount must be positive")
        return value


class ConvertPurchaseSerializer(serializers.Serializer):
    target_currency = serializers.CharField(max_length=16)


class PurchaseSerializer(serializers.Serializer):
    id = serializers.UUIDField(read_only=True)
    description = serializers.CharField(read_only=True)
    date = serializers.DateField(read_only=True)
    amount = serializers.DecimalField(max_digits=20, decimal_places=2, read_only=True)
    created_at = serializers.DateTimeField(read_only=True)
    updated_at = serializers.DateTimeField(read_only=True)


class PurchasePageSerializer(serializers.Serializer):
    data = PurchaseSerializer(many=True, read_only=True)
    page = serializers.IntegerField(read_only=True)
    size = serializers.IntegerField(read_only=True)
    total = serializers.IntegerField(read_only=True)
    total_pages = serializers.IntegerField(read_only=True)


class ConversionResultSerializer(serializers.Serializer):
    transaction = PurchaseSerializer(read_only=True)
    target_currency = serializers.CharField(read_only=True)
    exchange_rate = serializers.DecimalField(max_digits=18, decimal_places=6, read_only=True)
    converted_amount = serializers.DecimalField(max_digits=20, decimal_places=2, read_only=True)
    effective_date = serializers.DateField(read_only=True)


class ErrorSerializer(serializers.Serializer):
    error = serializers.CharField()
    detail = serializers.JSONField()

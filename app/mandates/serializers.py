"""Serializers for the mandate api"""
from decimal import Decimal

from rest_framework import serializers

from core.models import Mandate


class MandateSerializer(serializers.ModelSerializer):
    property_id = serializers.IntegerField(source='property_record_id', read_only=True)
    term_days = serializers.IntegerField(min_value=1)
    amount = serializers.DecimalField(max_digits=14, decimal_places=2, min_value=Decimal('0.01'))
    currency = serializers.ChoiceField(choices=Mandate.CURRENCY_CHOICES, default=Mandate.CURRENCY_ARS)
    notes = serializers.CharField(required=False, allow_blank=True, allow_null=True)

    class Meta:
        model = Mandate
        fields = [
            'id',
            'property_id',
            'term_days',
            'amount',
            'currency',
            'notes',
            'state',
            'signed_by',
            'signed_at',
            'document_url',
            'created_at',
            'updated_at',
        ]
        read_only_fields = ['id', 'property_id', 'state', 'signed_by', 'signed_at', 'document_url',
                            'created_at', 'updated_at']

    def validate_notes(self, value):
        return (value or '').strip() or None


class MandateStateSerializer(serializers.Serializer):
    state = serializers.ChoiceField(choices=Mandate.STATE_CHOICES)
    signed_by = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    document_url = serializers.CharField(required=False, allow_blank=True, allow_null=True)

"""Serializers for the property case api"""
import json

from django.contrib.auth import get_user_model
from rest_framework import serializers

from core.models import Property, Mandate
from mandates.owners import MAX_OWNERS


class AdvisorSerializer(serializers.ModelSerializer):
    class Meta:
        model = get_user_model()
        fields = ['id', 'name', 'email', 'role']
        read_only_fields = fields


class MandateSummarySerializer(serializers.ModelSerializer):
    class Meta:
        model = Mandate
        fields = ['id', 'state', 'term_days', 'amount', 'currency']
        read_only_fields = fields


class PropertySerializer(serializers.ModelSerializer):
    advisor = AdvisorSerializer(read_only=True)
    owners = serializers.JSONField(required=False, allow_null=True)
    mandate = serializers.SerializerMethodField()

    class Meta:
        model = Property
        fields = [
            'id',
            'title',
            'description',
            'owner_name',
            'property_type',
            'address',
            'cadastral_reference',
            'locality',
            'owners',
            'advisor',
            'state',
            'review_notes',
            'mandate',
            'created_at',
            'updated_at',
        ]
        read_only_fields = ['id', 'advisor', 'state', 'review_notes', 'mandate', 'created_at', 'updated_at']

    def get_mandate(self, obj):
        mandate = obj.get_mandate()
        return MandateSummarySerializer(mandate).data if mandate else None

    def validate_owners(self, value):
        """Accept a list (or its JSON text) of up to 3 owner objects; stored serialized"""
        if value in (None, '', []):
            return None

        if isinstance(value, str):
            try:
                value = json.loads(value)
            except ValueError:
                raise serializers.ValidationError("Owners must be valid JSON.")

        if not isinstance(value, list):
            raise serializers.ValidationError("Owners must be a list.")
        if len(value) > MAX_OWNERS:
            raise serializers.ValidationError(f"A property can have at most {MAX_OWNERS} owners.")
        if not all(isinstance(owner, dict) for owner in value):
            raise serializers.ValidationError("Each owner must be an object.")

        return json.dumps(value, ensure_ascii=False)

    def to_representation(self, instance):
        data = super().to_representation(instance)
        try:
            data['owners'] = json.loads(instance.owners) if instance.owners else []
        except ValueError:
            data['owners'] = []
        return data


class PropertyStateSerializer(serializers.Serializer):
    """Validates an approval decision"""
    state = serializers.ChoiceField(choices=Property.STATE_CHOICES)
    review_notes = serializers.CharField(required=False, allow_blank=True, allow_null=True)

    def validate(self, attrs):
        notes = (attrs.get('review_notes') or '').strip()
        if attrs['state'] == Property.STATE_REJECTED and not notes:
            raise serializers.ValidationError(
                {'review_notes': "Review notes are required when rejecting a property."}
            )
        attrs['review_notes'] = notes or None
        return attrs

    def apply(self, property_record):
        """Write the decision; approving clears previous notes"""
        state = self.validated_data['state']
        notes = self.validated_data['review_notes']

        property_record.state = state
        if state == Property.STATE_REJECTED:
            property_record.review_notes = notes
        elif state == Property.STATE_APPROVED:
            property_record.review_notes = None
        elif notes:
            property_record.review_notes = notes
        property_record.save(update_fields=['state', 'review_notes', 'updated_at'])
        return property_record

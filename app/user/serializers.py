"""Serializers for the User Api view"""

from django.contrib.auth import get_user_model
from django.utils.translation import gettext as _
from rest_framework import serializers
from rest_framework_simplejwt.serializers import TokenObtainPairSerializer


class UserSerializer(serializers.ModelSerializer):
    """Serializer for the User model"""

    class Meta:
        model = get_user_model()
        fields = ['id', 'email', 'name', 'role', 'is_active', 'is_staff', 'is_superuser']
        read_only_fields = fields


class MyTokenObtainPairSerializer(TokenObtainPairSerializer):
    @classmethod
    def get_token(cls, user):
        token = super().get_token(user)
        token['role'] = user.role
        token['name'] = user.name
        return token

    def validate(self, attrs):
        data = super().validate(attrs)

        if not self.user.is_active:
            raise serializers.ValidationError(
                _("User account is disabled or inactive."),
                code='authorization'
            )

        data.update({'user': self.user.email, 'role': self.user.role})
        return data

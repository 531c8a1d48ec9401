from rest_framework import serializers
from .models import User


class UserSerializer(serializers.ModelSerializer):
    createdAt = serializers.DateTimeField(source='created_at', read_only=True)
    updatedAt = serializers.DateTimeField(source='updated_at', read_only=True)

    class Meta:
        model = User
        fields = ['id', 'email', 'name', 'role', 'createdAt', 'updatedAt']
        read_only_fields = fields


class RegisterSerializer(serializers.Serializer):
    email = serializers.EmailField(error_messages={
        'required': 'Email, password, and name are required',
        'blank': 'Email, password, and name are required',
    })
    password = serializers.CharField(write_only=True, error_messages={
        'required': 'Email, password, and name are required',
        'blank': 'Email, password, and name are required',
    })
    name = serializers.CharField(max_length=255, error_messages={
        'required': 'Email, password, and name are required',
        'blank': 'Email, password, and name are required',
    })
    role = serializers.ChoiceField(choices=User.ROLE_CHOICES, error_messages={
        'required': "Role must be either 'seller' or 'buyer'",
        'invalid_choice': "Role must be either 'seller' or 'buyer'",
    })

    def validate_email(self, value):
        return value.strip().lower()

    def validate_name(self, value):
        value = value.strip()
        if not value:
            raise serializers.ValidationError('Email, password, and name are required')
        return value


class LoginSerializer(serializers.Serializer):
    email = serializers.EmailField()
    password = serializers.CharField(write_only=True)

    def validate_email(self, value):
        return value.strip().lower()

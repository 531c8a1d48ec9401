"""
Common serializers for API responses and error handling
"""
from rest_framework import serializers


class ErrorResponseSerializer(serializers.Serializer):
    """Standard error response serializer"""
    success = serializers.BooleanField(help_text="Always false for errors")
    error_code = serializers.CharField(help_text="Machine readable error code")
    message = serializers.CharField(help_text="Error message describing what went wrong")
    details = serializers.JSONField(required=False, allow_null=True, help_text="Field-specific validation errors")


class TokenResponseSerializer(serializers.Serializer):
    """Authentication token response serializer"""
    token = serializers.CharField(help_text="Bearer token")
    user = serializers.DictField(help_text="User information")


from rest_framework import serializers
from apps.users.serializers import UserSerializer
from .models import Item

REQUIRED_FIELDS_MESSAGE = "Title, category, and duration are required"


class ItemSerializer(serializers.ModelSerializer):
    imageUrl = serializers.CharField(source='image_url', read_only=True)
    sellerId = serializers.IntegerField(source='seller_id', read_only=True)
    seller = UserSerializer(read_only=True)
    createdAt = serializers.DateTimeField(source='created_at', read_only=True)
    updatedAt = serializers.DateTimeField(source='updated_at', read_only=True)

    class Meta:
        model = Item
        fields = [
            'id', 'title', 'description', 'category', 'imageUrl', 'status',
            'location', 'duration', 'sellerId', 'seller', 'createdAt', 'updatedAt'
        ]
        read_only_fields = fields


class ItemWriteSerializer(serializers.Serializer):
    """Editable item fields, used for both create and full update"""
    title = serializers.CharField(max_length=255, error_messages={
        'required': REQUIRED_FIELDS_MESSAGE,
        'blank': REQUIRED_FIELDS_MESSAGE,
    })
    description = serializers.CharField(required=False, allow_blank=True, default='')
    category = serializers.CharField(max_length=100, error_messages={
        'required': REQUIRED_FIELDS_MESSAGE,
        'blank': REQUIRED_FIELDS_MESSAGE,
    })
    imageUrl = serializers.CharField(source='image_url', max_length=500, required=False, allow_blank=True, default='')
    location = serializers.CharField(max_length=255, required=False, allow_blank=True, default='')
    duration = serializers.IntegerField(error_messages={
        'required': REQUIRED_FIELDS_MESSAGE,
        'invalid': REQUIRED_FIELDS_MESSAGE,
    })

    def validate_title(self, value):
        value = value.strip()
        if not value:
            raise serializers.ValidationError(REQUIRED_FIELDS_MESSAGE)
        return value

    def validate_duration(self, value):
        if value <= 0:
            raise serializers.ValidationError("Duration must be at least 1 day")
        return value


class ItemFilterSerializer(serializers.Serializer):
    """Query parameters accepted by the item listing; every filter is an exact or substring match"""
    category = serializers.CharField(required=False, allow_blank=True)
    status = serializers.CharField(required=False, allow_blank=True)
    location = serializers.CharField(required=False, allow_blank=True)

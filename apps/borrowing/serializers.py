from rest_framework import serializers
from apps.items.serializers import ItemSerializer
from apps.users.serializers import UserSerializer
from .models import BorrowRequest


class BorrowRequestSerializer(serializers.ModelSerializer):
    itemId = serializers.IntegerField(source='item_id', read_only=True)
    item = ItemSerializer(read_only=True)
    buyerId = serializers.IntegerField(source='buyer_id', read_only=True)
    buyer = UserSerializer(read_only=True)
    startDate = serializers.DateTimeField(source='start_date', read_only=True)
    endDate = serializers.DateTimeField(source='end_date', read_only=True)
    createdAt = serializers.DateTimeField(source='created_at', read_only=True)
    updatedAt = serializers.DateTimeField(source='updated_at', read_only=True)

    class Meta:
        model = BorrowRequest
        fields = [
            'id', 'itemId', 'item', 'buyerId', 'buyer', 'status',
            'startDate', 'endDate', 'message', 'createdAt', 'updatedAt'
        ]
        read_only_fields = fields


class CreateBorrowRequestSerializer(serializers.Serializer):
    itemId = serializers.IntegerField(source='item_id', min_value=1, error_messages={
        'required': 'Item ID is required',
        'null': 'Item ID is required',
        'min_value': 'Item ID is required',
    })
    startDate = serializers.DateTimeField(source='start_date', error_messages={
        'required': 'Start date is required',
        'null': 'Start date is required',
    })
    endDate = serializers.DateTimeField(source='end_date', error_messages={
        'required': 'End date is required',
        'null': 'End date is required',
    })
    message = serializers.CharField(required=False, allow_blank=True, default='', max_length=2000)

    def validate(self, data):
        if data['start_date'] > data['end_date']:
            raise serializers.ValidationError("Start date must be before end date")
        return data

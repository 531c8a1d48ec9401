from django.contrib import admin
from .models import BorrowRequest


@admin.register(BorrowRequest)
class BorrowRequestAdmin(admin.ModelAdmin):
    list_display = ('id', 'item', 'buyer', 'status', 'start_date', 'end_date', 'created_at')
    list_filter = ('status', 'start_date', 'created_at')
    search_fields = ('item__title', 'buyer__email', 'message')
    readonly_fields = ('created_at', 'updated_at', 'period_days')
    ordering = ('-created_at',)

    def get_queryset(self, request):
        return super().get_queryset(request).select_related('item', 'buyer')

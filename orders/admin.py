from django.contrib import admin
from .models import (
    OrdersSettings,
    Order,
    OrderItem,
    OrderStatusHistory,
    Payment,
)


@admin.register(OrdersSettings)
class OrdersSettingsAdmin(admin.ModelAdmin):
    list_display = ['__str__', 'tax_rate', 'default_order_type']


class OrderItemInline(admin.TabularInline):
    model = OrderItem
    extra = 0
    can_delete = False
    readonly_fields = ['product', 'quantity', 'unit_price', 'total_price', 'created_at']

    def has_add_permission(self, request, obj=None):
        return False


class OrderStatusHistoryInline(admin.TabularInline):
    model = OrderStatusHistory
    extra = 0
    can_delete = False
    readonly_fields = ['previous_status', 'new_status', 'changed_by', 'notes', 'created_at']

    def has_add_permission(self, request, obj=None):
        return False


@admin.register(Order)
class OrderAdmin(admin.ModelAdmin):
    list_display = ['order_number', 'table', 'order_type', 'status', 'total_amount', 'created_at']
    list_filter = ['status', 'order_type', 'created_at']
    search_fields = ['order_number', 'customer_name']
    # Status and table change only through OrderService
    readonly_fields = [
        'order_number', 'status', 'table', 'user',
        'subtotal', 'tax_amount', 'discount_amount', 'total_amount',
        'served_at', 'completed_at',
    ]
    inlines = [OrderItemInline, OrderStatusHistoryInline]

    def has_add_permission(self, request):
        return False

    def has_delete_permission(self, request, obj=None):
        return False


@admin.register(OrderItem)
class OrderItemAdmin(admin.ModelAdmin):
    list_display = ['order', 'product', 'quantity', 'unit_price', 'status']
    list_filter = ['status']
    search_fields = ['product__name', 'order__order_number']


@admin.register(OrderStatusHistory)
class OrderStatusHistoryAdmin(admin.ModelAdmin):
    list_display = ['order', 'previous_status', 'new_status', 'changed_by', 'created_at']
    list_filter = ['new_status']
    search_fields = ['order__order_number']

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False


@admin.register(Payment)
class PaymentAdmin(admin.ModelAdmin):
    list_display = ['order', 'payment_method', 'amount', 'status', 'processed_by', 'processed_at']
    list_filter = ['payment_method', 'status']
    search_fields = ['order__order_number', 'reference_number']

from django.contrib import admin

from .models import Product


@admin.register(Product)
class ProductAdmin(admin.ModelAdmin):
    list_display = ['name', 'price', 'preparation_time', 'is_available', 'sort_order']
    list_filter = ['is_available']
    search_fields = ['name']

from django.contrib import admin

from .models import DiningTable


@admin.register(DiningTable)
class DiningTableAdmin(admin.ModelAdmin):
    list_display = ['table_number', 'seating_capacity', 'location', 'is_occupied']
    list_filter = ['is_occupied', 'location']
    search_fields = ['table_number']

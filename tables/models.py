"""
Tables Models

Dining tables of the restaurant floor. Capacity, location and numbering are
managed by table administration; the order engine only flips `is_occupied`.
"""

from django.db import models
from django.utils.translation import gettext_lazy as _

from core.models import BaseModel


class DiningTable(BaseModel):
    table_number = models.CharField(max_length=20, unique=True, verbose_name=_('Table Number'))
    seating_capacity = models.PositiveIntegerField(default=4, verbose_name=_('Seating Capacity'))
    location = models.CharField(max_length=100, blank=True, null=True, verbose_name=_('Location'))
    is_occupied = models.BooleanField(default=False, verbose_name=_('Occupied'))

    class Meta:
        db_table = 'dining_tables'
        verbose_name = _('Dining Table')
        verbose_name_plural = _('Dining Tables')
        ordering = ['table_number']

    def __str__(self):
        return f"Table {self.table_number}"

    @property
    def display_name(self):
        if self.location:
            return f"{self.table_number} ({self.location})"
        return self.table_number

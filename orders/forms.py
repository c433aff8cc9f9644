from django import forms
from django.conf import settings
from django.utils.translation import gettext_lazy as _

from . import module
from .models import Order


class OrderCreateForm(forms.Form):
    table_id = forms.UUIDField(required=False)
    customer_name = forms.CharField(required=False, max_length=255)
    order_type = forms.ChoiceField(
        required=False,
        choices=Order.ORDER_TYPE_CHOICES,
    )
    notes = forms.CharField(required=False)

    def clean_order_type(self):
        return self.cleaned_data.get('order_type') or Order.TYPE_DINE_IN


class OrderItemForm(forms.Form):
    product_id = forms.UUIDField()
    quantity = forms.IntegerField(min_value=1)
    special_instructions = forms.CharField(required=False)


class OrderStatusForm(forms.Form):
    # Left as free text: the engine owns status validation
    status = forms.CharField(max_length=20)
    notes = forms.CharField(required=False)


class OrderItemStatusForm(forms.Form):
    status = forms.CharField(max_length=20)


class OrderFilterForm(forms.Form):
    status = forms.CharField(required=False, max_length=20)
    order_type = forms.CharField(required=False, max_length=20)
    page = forms.IntegerField(required=False, min_value=1)
    per_page = forms.IntegerField(required=False, min_value=1)

    def clean_per_page(self):
        per_page = self.cleaned_data.get('per_page')
        max_page_size = getattr(settings, 'ORDERS_MAX_PAGE_SIZE', module.SETTINGS['max_page_size'])
        if per_page and per_page > max_page_size:
            raise forms.ValidationError(_('Page size too large'))
        return per_page

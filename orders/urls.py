"""Orders Module URL Configuration"""

from django.urls import path
from . import views

app_name = 'orders'

urlpatterns = [
    # Orders
    path('orders/', views.api_orders, name='orders'),
    path('orders/<uuid:order_id>/', views.api_get_order, name='detail'),
    path('orders/<uuid:order_id>/status/', views.api_update_status, name='update_status'),
    path('orders/<uuid:order_id>/history/', views.api_status_history, name='status_history'),

    # Kitchen
    path('kitchen/orders/', views.api_kitchen_orders, name='kitchen_orders'),
    path(
        'kitchen/orders/<uuid:order_id>/items/<uuid:item_id>/status/',
        views.api_update_item_status, name='update_item_status',
    ),
]

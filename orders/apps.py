from django.apps import AppConfig

from . import module


class OrdersConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'orders'
    label = module.MODULE_ID
    verbose_name = module.MODULE_NAME

    def ready(self):
        from . import signals  # noqa

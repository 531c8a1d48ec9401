from django.apps import AppConfig


class ItemsConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'apps.items'

    def ready(self):
        """Import signals when Django starts."""
        import apps.items.signals  # noqa: F401

from django.apps import AppConfig


class CartConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "apps.cart"

    def ready(self):
        # Every new user owns exactly one cart.
        from . import signals  # noqa: F401

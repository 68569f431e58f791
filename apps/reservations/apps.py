from django.apps import AppConfig  # type: ignore


class ReservationsConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "apps.reservations"
    label = "reservations"
    verbose_name = "Reservations"

    def ready(self):  # type: ignore
        from .handlers import register_handlers

        register_handlers()

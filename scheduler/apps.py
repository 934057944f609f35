from django.apps import AppConfig
from django.conf import settings


class SchedulerConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "scheduler"

    def ready(self):
        from .cache import client

        client.connect()
        if getattr(settings, "CACHE_HEALTH_CHECK_ON_STARTUP", True):
            client.health_check()

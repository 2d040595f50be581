from django.apps import AppConfig


class AchievementsConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'apps.achievements'
    label = 'achievements'

    def ready(self):
        from . import receivers  # noqa: F401

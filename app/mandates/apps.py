from django.apps import AppConfig


class MandatesConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'mandates'
    verbose_name = 'Mandates'

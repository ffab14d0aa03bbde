from django.apps import AppConfig


class KpiAppConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'kpi_app'
    verbose_name = 'KPI evaluations'

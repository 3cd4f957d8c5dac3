from django.apps import AppConfig


class AnalyticsConfig(AppConfig):
    """Configuration for the analytics app (team queries and grading)."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "apps.analytics"
    verbose_name = "Analytics"

from django.apps import AppConfig


class PlayersConfig(AppConfig):
    """
    App configuration for the 'players' app.
    Owns rosters and the per-champion pool aggregates.
    """

    default_auto_field = "django.db.models.BigAutoField"
    name = "apps.players"
    verbose_name = "Players"

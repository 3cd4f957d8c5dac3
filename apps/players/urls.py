# apps/players/urls.py
# ================================================================================
from __future__ import annotations

from django.urls import include, path

from .views import ChampionDetailView, ChampionPoolView, KdaTrendView, LaningView, PlayerStatsView, VisionView

app_name = "players"

player_id_patterns = [
    path("/kda-trend", KdaTrendView.as_view(), name="kda-trend"),
    path("/laning", LaningView.as_view(), name="laning"),
    path("/vision", VisionView.as_view(), name="vision"),
    path("/champions", ChampionPoolView.as_view(), name="champions"),
    path("/champions/<str:champion>", ChampionDetailView.as_view(), name="champion-detail"),
    path("/stats", PlayerStatsView.as_view(), name="stats"),
]

urlpatterns = [
    path("/<uuid:player_id>", include(player_id_patterns)),
]

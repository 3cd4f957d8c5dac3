# apps/matches/urls.py
# ================================================================================
from __future__ import annotations

from django.urls import path

from .views import MatchDetailView, MatchListView

app_name = "matches"

urlpatterns = [
    path("", MatchListView.as_view(), name="match-list"),
    path("/<uuid:match_id>", MatchDetailView.as_view(), name="match-detail"),
]

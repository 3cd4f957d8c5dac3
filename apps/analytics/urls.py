# apps/analytics/urls.py
# ================================================================================
from __future__ import annotations

from django.urls import path

from .views import PerformanceView, TeamComparisonView

app_name = "analytics"

urlpatterns = [
    path("/performance", PerformanceView.as_view(), name="performance"),
    path("/team-comparison", TeamComparisonView.as_view(), name="team-comparison"),
]

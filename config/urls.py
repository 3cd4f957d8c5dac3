"""
Main URL configuration for the async analytics API.
"""

# Django Imports
from django.urls import include, path

from apps.core.views import health_check

# -----------------------------------------------------------------
# Organization-scoped API URL Patterns
# Every analytics endpoint receives the tenant explicitly in the path.
# -----------------------------------------------------------------
organization_patterns = [
    path("/analytics", include("apps.analytics.urls")),
    path("/players", include("apps.players.urls")),
    path("/matches", include("apps.matches.urls")),
]

api_v1_patterns = [
    path("health", health_check, name="health"),
    path("organizations/<uuid:organization_id>", include(organization_patterns)),
]

# -----------------------------------------------------------------
# Main URL Patterns
# -----------------------------------------------------------------
urlpatterns = [
    # --- API Versioning ---
    path("api/v1/", include(api_v1_patterns)),
]

# --- Global Error Handlers for API ---
# This ensures that any unhandled URL or server error will return a
# consistent JSON response instead of an HTML page.
handler404 = "apps.core.views.custom_handler.json_404_handler"
handler500 = "apps.core.views.custom_handler.json_500_handler"

"""
ASGI entrypoint for the analytics API.
"""

from __future__ import annotations

import os

import structlog
from django.core.asgi import get_asgi_application

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "config.settings.local")

logger = structlog.get_logger(__name__)

application = get_asgi_application()
logger.info("ASGI application loaded", settings=os.environ["DJANGO_SETTINGS_MODULE"])

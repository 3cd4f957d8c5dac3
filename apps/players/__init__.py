"""Rosters, champion pools and per-player analytics."""

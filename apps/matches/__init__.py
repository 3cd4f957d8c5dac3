"""Matches, per-player scoreboards, derived stats and match import."""

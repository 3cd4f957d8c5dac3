from datetime import date, timedelta

import pytest
from django.utils import timezone
from pydantic import ValidationError

from apps.analytics.conf import AnalyticsFilters, MatchWindow, TrendOptions


def test_default_window_uses_configured_look_back(settings):
    start, end = MatchWindow().bounds()

    assert end - start == timedelta(days=settings.ANALYTICS_CONFIG.DEFAULT_WINDOW_DAYS)
    assert end <= timezone.now()


def test_explicit_range_covers_whole_days():
    start, end = MatchWindow(start_date=date(2026, 3, 1), end_date=date(2026, 3, 1)).bounds()

    assert start.date() == end.date() == date(2026, 3, 1)
    assert (start.hour, start.minute) == (0, 0)
    assert (end.hour, end.minute) == (23, 59)
    assert timezone.is_aware(start)


@pytest.mark.parametrize(
    "params",
    [
        {"start_date": "2026-03-01"},
        {"end_date": "2026-03-01"},
        {"start_date": "2026-03-02", "end_date": "2026-03-01"},
        {"start_date": "2026-03-01", "end_date": "2026-03-02", "days": 7},
        {"days": 0},
        {"days": 366},
        {"start_date": "not-a-date", "end_date": "2026-03-01"},
    ],
)
def test_invalid_windows_are_rejected(params):
    with pytest.raises(ValidationError):
        MatchWindow.model_validate(params)


def test_filters_validate_match_type():
    assert AnalyticsFilters(match_type="scrim").match_type == "scrim"
    with pytest.raises(ValidationError):
        AnalyticsFilters(match_type="ranked")


def test_trend_options_reject_unknown_period():
    assert TrendOptions().group_by == "week"
    with pytest.raises(ValidationError):
        TrendOptions(group_by="year")

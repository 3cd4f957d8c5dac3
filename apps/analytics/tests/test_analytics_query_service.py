from datetime import date, timedelta

import pytest
from django.utils import timezone

from apps.analytics.conf import AnalyticsFilters, MatchWindow
from apps.analytics.services.analytics_query_service import AnalyticsQueryService
from apps.players.conf import PlayerRole, PlayerStatus
from apps.players.models import Player


@pytest.fixture
def season(roster, make_match, make_stat):
    """Two wins and a loss inside the default window, one old match outside it."""
    win = make_match(days_ago=2, victory=True, match_type="official", opponent_name="LOUD")
    make_stat(win, roster["mid"], champion="Ahri", kills=8, deaths=1, assists=6, cs=270, damage_share=0.32, vision_score=30)
    make_stat(win, roster["adc"], champion="Jinx", kills=5, deaths=2, assists=4, cs=300, gold_earned=14000)

    scrim = make_match(days_ago=3, victory=True, match_type="scrim", opponent_name="FURIA")
    make_stat(scrim, roster["mid"], champion="Syndra", kills=4, deaths=2, assists=4, cs=240, vision_score=20)

    loss = make_match(days_ago=4, victory=False, match_type="official", opponent_name="RED Canids")
    make_stat(loss, roster["adc"], champion="Kaisa", kills=1, deaths=5, assists=2, cs=220, gold_earned=9000)
    make_stat(loss, roster["support"], champion="Thresh", kills=0, deaths=4, assists=3, vision_score=70)

    old = make_match(days_ago=90, victory=True)
    make_stat(old, roster["top"], champion="Gnar", kills=10, deaths=0, assists=10)
    return {"win": win, "scrim": scrim, "loss": loss, "old": old}


@pytest.mark.django_db
def test_empty_window_returns_zeros(organization, roster):
    service = AnalyticsQueryService(organization.pk)

    comparison = service.team_comparison()
    assert comparison["players"] == []
    assert comparison["team_averages"]["games_played"] == 0
    assert comparison["team_averages"]["kda"] == 0.0
    assert comparison["team_averages"]["vision_per_min"] == 0.0
    assert comparison["role_rankings"] == {"top": [], "jungle": [], "mid": [], "adc": [], "support": []}

    overview = service.overview()
    assert overview["total_matches"] == 0
    assert overview["win_rate"] == 0.0
    assert overview["avg_kda"] == 0.0
    assert service.win_rate_trend() == []
    assert service.best_performers() == []


@pytest.mark.django_db
def test_overview(organization, season):
    overview = AnalyticsQueryService(organization.pk).overview()

    assert overview["total_matches"] == 3
    assert overview["wins"] == 2
    assert overview["losses"] == 1
    assert overview["win_rate"] == 66.7
    assert overview["avg_game_duration"] == 1800.0
    # (18 + 19) / 14
    assert overview["avg_kda"] == 2.64


@pytest.mark.django_db
def test_player_summaries_are_ordered_by_performance(organization, roster, season):
    players = AnalyticsQueryService(organization.pk).player_summaries()

    names = [row["player"]["summoner_name"] for row in players]
    assert names[0] == "dyNquedo"
    assert set(names) == {"dyNquedo", "TitaN", "Kuri"}
    scores = [row["avg_performance_score"] for row in players]
    assert scores == sorted(scores, reverse=True)

    mid = players[0]
    assert mid["games_played"] == 2
    assert mid["kda"] == 7.33
    assert mid["grade"] in {"S", "A", "B", "C", "D"}


@pytest.mark.django_db
def test_inactive_players_are_left_out_of_rankings(organization, roster, season):
    roster["support"].status = PlayerStatus.INACTIVE
    roster["support"].save()
    service = AnalyticsQueryService(organization.pk)

    assert "Kuri" not in [row["player"]["summoner_name"] for row in service.player_summaries()]
    assert service.role_rankings()["support"] == []
    # Team figures still count every stat in the window.
    assert service.team_averages()["games_played"] == 5


@pytest.mark.django_db
def test_role_rankings_order_by_performance_then_name(organization, roster, make_match, make_stat):
    tinowns = Player.objects.create(organization=organization, summoner_name="Tinowns", role=PlayerRole.MID)
    takeshi = Player.objects.create(organization=organization, summoner_name="Takeshi", role=PlayerRole.MID)
    match = make_match(days_ago=1, victory=True)
    # 40 (capped KDA) + 20 (8.0 cs/min) + 3 (vision) + 10 (win)
    make_stat(match, roster["mid"], kills=6, deaths=2, assists=4, cs=240, vision_score=30)
    # 20 + 15 (6.0 cs/min) + 1.5 + 10, identical for both
    make_stat(match, tinowns, champion="Orianna", kills=2, deaths=2, assists=2, cs=180, vision_score=15)
    make_stat(match, takeshi, champion="Azir", kills=2, deaths=2, assists=2, cs=180, vision_score=15)

    mid = AnalyticsQueryService(organization.pk).role_rankings()["mid"]

    assert [row["summoner_name"] for row in mid] == ["dyNquedo", "Takeshi", "Tinowns"]
    assert [row["avg_performance"] for row in mid] == [73.0, 46.5, 46.5]
    assert [row["games"] for row in mid] == [1, 1, 1]


@pytest.mark.django_db
def test_team_averages_metric_values(organization, roster, make_match, make_stat):
    match = make_match(days_ago=1, victory=True)
    make_stat(match, roster["mid"], kills=6, deaths=2, assists=4, cs=240, vision_score=30, damage_share=0.3)
    make_stat(match, roster["adc"], champion="Jinx", kills=2, deaths=2, assists=2, cs=180, vision_score=15, damage_share=0.2)
    make_stat(match, roster["support"], champion="Nautilus", kills=0, deaths=2, assists=2, cs=30, vision_score=15)

    averages = AnalyticsQueryService(organization.pk).team_averages()

    assert averages["games_played"] == 3
    # (8 + 8) / 6
    assert averages["kda"] == 2.67
    assert averages["avg_cs"] == 150.0
    # (8.0 + 6.0 + 1.0) / 3
    assert averages["avg_cs_per_min"] == 5.0
    assert averages["avg_damage_share"] == 0.25
    # 60 vision over three 30-minute stat lines
    assert averages["vision_per_min"] == 0.67
    # 93 (KDA and damage at their caps), 62.5 and 24.0
    assert averages["avg_performance_score"] == 59.8


@pytest.mark.django_db
def test_player_stats_per_minute_rates_skip_untimed_matches(organization, roster, make_match, make_stat):
    player = roster["adc"]
    make_stat(make_match(days_ago=1), player, champion="Jinx", cs=240, gold_earned=12000)
    make_stat(make_match(days_ago=2, duration=None), player, champion="Jinx", cs=300, gold_earned=15000)

    stats = AnalyticsQueryService(organization.pk).player_stats(player.pk)

    assert stats["games_played"] == 2
    assert stats["cs_per_min"] == 8.0
    assert stats["gold_per_min"] == 400.0


@pytest.mark.django_db
def test_filters_narrow_matches(organization, season):
    scrims = AnalyticsQueryService(organization.pk, filters=AnalyticsFilters(match_type="scrim"))
    assert scrims.overview()["total_matches"] == 1

    vs_loud = AnalyticsQueryService(organization.pk, filters=AnalyticsFilters(opponent="loud"))
    assert vs_loud.overview()["total_matches"] == 1


@pytest.mark.django_db
def test_player_filter_adds_individual_stats(organization, roster, season):
    player = roster["adc"]
    service = AnalyticsQueryService(organization.pk, filters=AnalyticsFilters(player_id=player.pk))

    data = service.performance()

    assert [row["player"]["id"] for row in data["best_performers"]] == [str(player.pk)]
    stats = data["player_stats"]
    assert stats["games_played"] == 2
    assert stats["win_rate"] == 0.5
    # (6 + 6) / 7
    assert stats["kda"] == 1.71
    assert stats["cs_per_min"] == 8.7
    # Team-level figures are not narrowed.
    assert data["overview"]["total_matches"] == 3


@pytest.mark.django_db
def test_player_stats_without_games(organization, roster, season):
    assert AnalyticsQueryService(organization.pk).player_stats(roster["jungle"].pk) is None


@pytest.mark.django_db
def test_window_bounds(organization, season):
    last_week = AnalyticsQueryService(organization.pk, MatchWindow(days=7))
    assert last_week.overview()["total_matches"] == 3

    everything = AnalyticsQueryService(organization.pk, MatchWindow(days=365))
    assert everything.overview()["total_matches"] == 4

    played_on = timezone.localtime(season["scrim"].game_start).date()
    one_day = AnalyticsQueryService(organization.pk, MatchWindow(start_date=played_on, end_date=played_on))
    assert one_day.overview()["total_matches"] == 1

    future = date.today() + timedelta(days=10)
    assert AnalyticsQueryService(organization.pk, MatchWindow(start_date=future, end_date=future)).matches().count() == 0


@pytest.mark.django_db
def test_win_rate_trend_by_day(organization, season):
    trend = AnalyticsQueryService(organization.pk).win_rate_trend("day")

    assert [row["matches"] for row in trend] == [1, 1, 1]
    assert [row["win_rate"] for row in trend] == [0.0, 100.0, 100.0]
    periods = [row["period"] for row in trend]
    assert periods == sorted(periods)


@pytest.mark.django_db
def test_win_rate_trend_rejects_unknown_period(organization):
    with pytest.raises(ValueError, match="Unsupported trend period"):
        AnalyticsQueryService(organization.pk).win_rate_trend("year")


@pytest.mark.django_db
def test_performance_by_role_follows_draft_order(organization, season):
    roles = [row["role"] for row in AnalyticsQueryService(organization.pk).performance_by_role()]

    assert roles == ["mid", "adc", "support"]


@pytest.mark.django_db
def test_best_performers_limit_and_mvp_count(organization, roster, season):
    best = AnalyticsQueryService(organization.pk).best_performers(limit=2)

    assert len(best) == 2
    assert best[0]["player"]["summoner_name"] == "dyNquedo"
    assert best[0]["mvp_count"] == 2


@pytest.mark.django_db
def test_match_type_breakdown(organization, season):
    breakdown = AnalyticsQueryService(organization.pk).match_type_breakdown()

    assert breakdown == [
        {"match_type": "official", "total": 2, "wins": 1, "losses": 1, "win_rate": 50.0},
        {"match_type": "scrim", "total": 1, "wins": 1, "losses": 0, "win_rate": 100.0},
    ]


@pytest.mark.django_db
def test_organizations_are_isolated(organization, other_organization, season, make_match):
    make_match(org=other_organization, days_ago=1)

    assert AnalyticsQueryService(other_organization.pk).overview()["total_matches"] == 1
    assert AnalyticsQueryService(organization.pk).overview()["total_matches"] == 3

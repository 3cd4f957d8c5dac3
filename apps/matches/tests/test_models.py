import pytest
from django.db import IntegrityError

from apps.matches.models import PlayerMatchStat
from apps.players.models import ChampionPoolEntry


@pytest.mark.django_db
def test_save_computes_derived_stats(roster, make_match, make_stat):
    match = make_match(duration=1800, victory=False)
    stat = make_stat(
        match,
        roster["mid"],
        kills=10,
        deaths=2,
        assists=5,
        cs=200,
        gold_earned=12000,
        damage_share=0.25,
        vision_score=40,
    )

    stat.refresh_from_db()
    assert stat.kda_ratio == 7.5
    assert stat.cs_per_min == 6.67
    assert stat.gold_per_min == 400.0
    assert 0.0 <= stat.performance_score <= 100.0


@pytest.mark.django_db
def test_rates_stay_unset_without_duration(roster, make_match, make_stat):
    match = make_match(duration=None)
    stat = make_stat(match, roster["top"], kills=1, deaths=1, assists=1, cs=150, gold_earned=9000)

    stat.refresh_from_db()
    assert stat.cs_per_min is None
    assert stat.gold_per_min is None
    assert stat.vision_per_min == 0.0


@pytest.mark.django_db
def test_creating_a_stat_records_it_in_the_champion_pool(roster, make_match, make_stat):
    player = roster["mid"]
    stat = make_stat(make_match(victory=True), player, champion="Ahri", kills=3, deaths=1, assists=1)

    entry = ChampionPoolEntry.objects.get(player=player, champion="Ahri")
    assert entry.games_played == 1
    assert entry.games_won == 1
    assert entry.average_kda == 4.0

    # Updating an existing row must not count the game twice.
    stat.kills = 5
    stat.save()
    entry.refresh_from_db()
    assert entry.games_played == 1


@pytest.mark.django_db
def test_one_stat_per_player_per_match(roster, make_match, make_stat):
    match = make_match()
    make_stat(match, roster["adc"], champion="Jinx")

    with pytest.raises(IntegrityError):
        PlayerMatchStat(match=match, player=roster["adc"], champion="Kaisa").save()


@pytest.mark.django_db
def test_match_display_properties(make_match):
    match = make_match(duration=1805, victory=False, our_score=12, opponent_score=20)

    assert match.duration_formatted == "30:05"
    assert match.result_text == "Defeat"
    assert match.score_display == "12 - 20"

    unknown = make_match(duration=None, victory=None)
    assert unknown.duration_formatted == "Unknown"
    assert unknown.result_text == "Unknown"
    assert unknown.score_display == "Unknown"


@pytest.mark.django_db
def test_kda_summary_and_mvp(roster, make_match, make_stat):
    match = make_match()
    make_stat(match, roster["mid"], kills=8, deaths=1, assists=4, damage_share=0.35)
    make_stat(match, roster["support"], champion="Thresh", kills=0, deaths=3, assists=14, vision_score=80)

    assert match.kda_summary() == {"kills": 8, "deaths": 4, "assists": 18, "kda": 6.5}
    assert match.mvp_player() == roster["mid"]


@pytest.mark.django_db
def test_kda_summary_without_stats(make_match):
    match = make_match()

    assert match.kda_summary() == {"kills": 0, "deaths": 0, "assists": 0, "kda": 0.0}
    assert match.mvp_player() is None

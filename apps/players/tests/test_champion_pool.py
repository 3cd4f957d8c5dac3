import pytest
from django.core.management import call_command
from django.db import connection
from django.test.utils import CaptureQueriesContext

from apps.players.models import ChampionPoolEntry
from apps.players.services.champion_pool import ChampionPoolTracker


@pytest.mark.django_db
def test_average_kda_is_mean_of_per_match_ratios(roster, make_match, make_stat):
    player = roster["mid"]
    make_stat(make_match(days_ago=2), player, champion="Ahri", kills=2, deaths=1, assists=0)
    make_stat(make_match(days_ago=1, victory=False), player, champion="Ahri", kills=3, deaths=1, assists=1)

    entry = ChampionPoolEntry.objects.get(player=player, champion="Ahri")
    assert entry.games_played == 2
    assert entry.games_won == 1
    assert entry.win_rate == 0.5
    assert entry.average_kda == 3.0


@pytest.mark.django_db
def test_missing_values_do_not_count_as_samples(roster, make_match, make_stat):
    player = roster["adc"]
    make_stat(make_match(), player, champion="Jinx", cs=300, damage_share=0.3)
    make_stat(make_match(duration=None), player, champion="Jinx", cs=280)

    entry = ChampionPoolEntry.objects.get(player=player, champion="Jinx")
    assert entry.games_played == 2
    assert entry.cs_per_min_samples == 1
    assert entry.damage_share_samples == 1
    assert entry.average_cs_per_min == 10.0
    assert entry.average_damage_share == 0.3


@pytest.mark.django_db
def test_last_played_tracks_latest_match(roster, make_match, make_stat):
    player = roster["top"]
    latest = make_match(days_ago=1)
    make_stat(latest, player, champion="Gnar")
    make_stat(make_match(days_ago=5), player, champion="Gnar")

    entry = ChampionPoolEntry.objects.get(player=player, champion="Gnar")
    assert entry.last_played == latest.game_start


@pytest.mark.django_db
def test_rebuild_repairs_a_drifted_entry(roster, make_match, make_stat):
    player = roster["mid"]
    make_stat(make_match(days_ago=2), player, champion="Ahri", kills=2, deaths=1, assists=0, damage_share=0.2)
    make_stat(make_match(days_ago=1, victory=False), player, champion="Ahri", kills=3, deaths=1, assists=1)
    ChampionPoolEntry.objects.filter(player=player, champion="Ahri").update(games_played=9, kda_total=0.0)

    entry = ChampionPoolTracker().rebuild(player.pk, "Ahri")

    assert entry.games_played == 2
    assert entry.games_won == 1
    assert entry.average_kda == 3.0
    assert entry.damage_share_samples == 1
    assert entry.cs_per_min_samples == 2


@pytest.mark.django_db
def test_rebuild_locks_the_entry_before_reading_history(roster, make_match, make_stat):
    player = roster["mid"]
    make_stat(make_match(), player, champion="Ahri", kills=4, deaths=2, assists=2)

    with CaptureQueriesContext(connection) as ctx:
        ChampionPoolTracker().rebuild(player.pk, "Ahri")

    sql = [query["sql"] for query in ctx.captured_queries]
    first_entry_read = next(i for i, q in enumerate(sql) if "champion_pools" in q)
    first_history_read = next(i for i, q in enumerate(sql) if "player_match_stats" in q)
    assert first_entry_read < first_history_read


@pytest.mark.django_db
def test_rebuild_all_counts_entries_per_organization(roster, other_organization, make_match, make_stat):
    make_stat(make_match(), roster["mid"], champion="Ahri")
    make_stat(make_match(), roster["mid"], champion="Syndra")
    make_stat(make_match(), roster["support"], champion="Thresh")

    assert ChampionPoolTracker().rebuild_all(roster["mid"].organization_id) == 3
    assert ChampionPoolTracker().rebuild_all(other_organization.pk) == 0


@pytest.mark.django_db
def test_rebuild_champion_pools_command(roster, make_match, make_stat, capsys):
    make_stat(make_match(), roster["jungle"], champion="Vi")
    ChampionPoolEntry.objects.update(games_played=0)

    call_command("rebuild_champion_pools")

    assert ChampionPoolEntry.objects.get(champion="Vi").games_played == 1
    assert "Rebuilt 1 champion pool entries" in capsys.readouterr().out


@pytest.mark.django_db
def test_main_champions_order(roster, make_match, make_stat):
    player = roster["mid"]
    make_stat(make_match(), player, champion="Ahri", kills=1, deaths=1)
    make_stat(make_match(), player, champion="Syndra", kills=2, deaths=1)
    make_stat(make_match(), player, champion="Syndra", kills=4, deaths=1)
    make_stat(make_match(), player, champion="Orianna", kills=5, deaths=1)

    pool = ChampionPoolEntry.objects.for_organization(player.organization_id).for_player(player.pk).main_champions()
    assert [entry.champion for entry in pool] == ["Syndra", "Orianna", "Ahri"]

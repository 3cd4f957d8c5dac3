import itertools

import pytest

from apps.matches.services import stat_aggregator


def test_kda_ratio_example():
    assert stat_aggregator.kda_ratio(10, 2, 5) == 7.5


@pytest.mark.parametrize(("kills", "assists"), [(0, 0), (3, 4), (12, 9)])
def test_kda_ratio_without_deaths_is_kills_plus_assists(kills, assists):
    assert stat_aggregator.kda_ratio(kills, 0, assists) == kills + assists


def test_kda_ratio_treats_missing_counters_as_zero():
    assert stat_aggregator.kda_ratio(None, None, None) == 0.0
    assert stat_aggregator.kda_ratio(4, None, None) == 4.0


def test_per_minute_example():
    assert stat_aggregator.per_minute(200, 1800) == 6.67


@pytest.mark.parametrize("duration", [None, 0, -60])
def test_per_minute_is_unset_without_duration(duration):
    assert stat_aggregator.per_minute(200, duration) is None


def test_kda_term_is_capped_at_forty():
    score = stat_aggregator.performance_score(
        kda=7.5,
        cs_per_min=None,
        damage_share=None,
        vision_score=None,
        victory=False,
    )
    assert score == 40.0


def test_victory_adds_flat_bonus():
    base = {"kda": 2.0, "cs_per_min": 6.0, "damage_share": 0.2, "vision_score": 30}
    loss = stat_aggregator.performance_score(**base, victory=False)
    win = stat_aggregator.performance_score(**base, victory=True)
    assert loss == 20 + 15 + 16 + 3
    assert win == loss + 10


@pytest.mark.parametrize(
    ("kda", "cs_per_min", "damage_share", "vision_score", "victory"),
    list(
        itertools.product(
            [None, 1.5, 100.0],
            [None, 7.2, 50.0],
            [None, 0.31, 1.0],
            [None, 45, 1000],
            [None, False, True],
        ),
    ),
)
def test_performance_score_stays_within_bounds(kda, cs_per_min, damage_share, vision_score, victory):
    score = stat_aggregator.performance_score(
        kda=kda,
        cs_per_min=cs_per_min,
        damage_share=damage_share,
        vision_score=vision_score,
        victory=victory,
    )
    assert 0.0 <= score <= 100.0


def test_performance_score_maxes_out_at_hundred():
    score = stat_aggregator.performance_score(
        kda=50,
        cs_per_min=50,
        damage_share=1.0,
        vision_score=500,
        victory=True,
    )
    assert score == 100.0


def test_derive_leaves_rates_unset_without_duration():
    derived = stat_aggregator.derive(
        kills=10,
        deaths=2,
        assists=5,
        cs=200,
        gold_earned=12000,
        damage_share=None,
        vision_score=None,
        game_duration=None,
        victory=True,
    )
    assert derived.kda == 7.5
    assert derived.cs_per_min is None
    assert derived.gold_per_min is None
    assert derived.performance_score == 50.0


def test_derive_example_match():
    derived = stat_aggregator.derive(
        kills=10,
        deaths=2,
        assists=5,
        cs=180,
        gold_earned=12000,
        damage_share=0.25,
        vision_score=40,
        game_duration=1800,
        victory=False,
    )
    assert derived.cs_per_min == 6.0
    assert derived.gold_per_min == 400.0
    # 40 (KDA) + 15 (CS) + 20 (damage) + 4 (vision)
    assert derived.performance_score == 79.0

import uuid

import pytest
from asgiref.sync import sync_to_async
from django.urls import reverse


@pytest.mark.django_db(transaction=True)
async def test_performance_view_async(async_client, organization, roster, make_match, make_stat):
    """Tests the async team performance view."""
    match = await sync_to_async(make_match)(days_ago=2)
    await sync_to_async(make_stat)(match, roster["mid"], kills=5, deaths=1, assists=5)

    url = reverse("analytics:performance", kwargs={"organization_id": organization.pk})
    response = await async_client.get(url, {"days": "7", "group_by": "day", "nocache": "true"})

    assert response.status_code == 200
    data = response.json()
    assert data["overview"]["total_matches"] == 1
    assert data["overview"]["avg_kda"] == 10.0
    assert len(data["win_rate_trend"]) == 1
    assert "player_stats" not in data


@pytest.mark.django_db(transaction=True)
async def test_performance_view_with_player_filter(async_client, organization, roster, make_match, make_stat):
    player = roster["top"]
    await sync_to_async(make_stat)(await sync_to_async(make_match)(), player, champion="Gnar", kills=2, deaths=2)

    url = reverse("analytics:performance", kwargs={"organization_id": organization.pk})
    response = await async_client.get(url, {"player_id": str(player.pk), "nocache": "true"})

    assert response.status_code == 200
    assert response.json()["player_stats"]["games_played"] == 1


@pytest.mark.django_db(transaction=True)
async def test_team_comparison_view_async(async_client, organization, roster, make_match, make_stat):
    match = await sync_to_async(make_match)()
    await sync_to_async(make_stat)(match, roster["mid"], kills=6, deaths=2, assists=4)
    await sync_to_async(make_stat)(match, roster["support"], champion="Nautilus", kills=0, deaths=6, assists=12)

    url = reverse("analytics:team-comparison", kwargs={"organization_id": organization.pk})
    response = await async_client.get(url, {"nocache": "true"})

    assert response.status_code == 200
    data = response.json()
    assert [row["player"]["summoner_name"] for row in data["players"]] == ["dyNquedo", "Kuri"]
    assert data["team_averages"]["games_played"] == 2
    assert set(data["role_rankings"]) == {"top", "jungle", "mid", "adc", "support"}


@pytest.mark.django_db(transaction=True)
@pytest.mark.parametrize(
    "params",
    [
        {"start_date": "2026-03-01"},
        {"start_date": "2026-03-05", "end_date": "2026-03-01"},
        {"days": "0"},
        {"match_type": "ranked"},
        {"player_id": "not-a-uuid"},
        {"group_by": "year"},
    ],
)
async def test_performance_view_rejects_invalid_params(async_client, organization, params):
    url = reverse("analytics:performance", kwargs={"organization_id": organization.pk})
    response = await async_client.get(url, {**params, "nocache": "true"})

    assert response.status_code == 400
    assert response.json()["detail"] == "Invalid query parameters."



@pytest.mark.django_db(transaction=True)
@pytest.mark.parametrize("name", ["analytics:performance", "analytics:team-comparison"])
async def test_analytics_views_return_404_for_unknown_organization(async_client, organization, name):
    url = reverse(name, kwargs={"organization_id": uuid.uuid4()})
    response = await async_client.get(url, {"nocache": "true"})

    assert response.status_code == 404
    assert "not found" in response.json()["detail"]

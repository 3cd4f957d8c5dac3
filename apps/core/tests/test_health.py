import pytest
from django.urls import reverse


async def test_health_liveness_probe(async_client):
    response = await async_client.get(reverse("health"), {"check": "basic"})

    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "ok"
    assert "checks" not in data


@pytest.mark.django_db(transaction=True)
async def test_health_checks_database_and_cache(async_client):
    response = await async_client.get(reverse("health"))

    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "healthy"
    assert data["checks"]["database"]["status"] == "healthy"
    assert data["checks"]["cache"] == {"status": "healthy"}


async def test_unknown_endpoint_returns_json_404(async_client):
    response = await async_client.get("/api/v1/does-not-exist")

    assert response.status_code == 404
    assert response.json() == {"detail": "The requested endpoint was not found."}

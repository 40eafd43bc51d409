"""
Integration tests for sports endpoints.
"""
import uuid
import pytest
from httpx import AsyncClient

from conftest import auth_header


def sport_payload(**overrides):
    payload = {
        "title": "Beach Soccer",
        "description": "Barefoot five-a-side on the sand",
        "rules": "Rolling substitutions, no offside",
        "cost": 10,
        "level": "beginner",
    }
    payload.update(overrides)
    return payload


@pytest.mark.integration
@pytest.mark.asyncio
class TestSportEndpoints:
    async def test_list_sports(self, client: AsyncClient, test_sport):
        response = await client.get("/api/v1/sports")

        assert response.status_code == 200
        body = response.json()
        assert body["count"] == 1
        assert body["data"][0]["title"] == "Volleyball"
        assert body["data"][0]["event"]["id"] == str(test_sport.event_id)
        assert body["data"][0]["event"]["name"] == "Beach Volleyball Open"

    async def test_list_sports_filtered_by_level(self, client: AsyncClient, test_sport):
        response = await client.get("/api/v1/sports", params={"level[in]": "beginner,advanced"})

        assert response.status_code == 200
        assert response.json()["count"] == 0

    async def test_list_event_sports(self, client: AsyncClient, test_event, test_sport):
        response = await client.get(f"/api/v1/events/{test_event.id}/sports")

        assert response.status_code == 200
        body = response.json()
        assert body["count"] == 1
        assert body["data"][0]["event_id"] == str(test_event.id)

    async def test_list_sports_for_missing_event(self, client: AsyncClient):
        response = await client.get(f"/api/v1/events/{uuid.uuid4()}/sports")

        assert response.status_code == 404

    async def test_add_sport_as_event_owner(self, client: AsyncClient, test_event, test_publisher):
        response = await client.post(
            f"/api/v1/events/{test_event.id}/sports",
            headers=auth_header(test_publisher),
            json=sport_payload(),
        )

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["title"] == "Beach Soccer"
        assert data["level"] == "beginner"
        assert data["cost"] == 10
        assert data["user_id"] == str(test_publisher.id)

    async def test_add_sport_to_someone_elses_event(self, client: AsyncClient, test_event, other_publisher):
        response = await client.post(
            f"/api/v1/events/{test_event.id}/sports",
            headers=auth_header(other_publisher),
            json=sport_payload(),
        )

        assert response.status_code == 403

    async def test_add_sport_invalid_level(self, client: AsyncClient, test_event, test_publisher):
        response = await client.post(
            f"/api/v1/events/{test_event.id}/sports",
            headers=auth_header(test_publisher),
            json=sport_payload(level="expert", rules=""),
        )

        assert response.status_code == 400
        fields = {e["field"] for e in response.json()["errors"]}
        assert fields == {"level", "rules"}

    async def test_get_sport_includes_event(self, client: AsyncClient, test_sport, test_event):
        response = await client.get(f"/api/v1/sports/{test_sport.id}")

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["event"]["name"] == test_event.name

    async def test_update_sport(self, client: AsyncClient, test_sport, test_publisher):
        response = await client.put(
            f"/api/v1/sports/{test_sport.id}",
            headers=auth_header(test_publisher),
            json={"cost": 0, "level": "all"},
        )

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["cost"] == 0
        assert data["level"] == "all"

    async def test_delete_sport_as_other_publisher(self, client: AsyncClient, test_sport, other_publisher):
        response = await client.delete(
            f"/api/v1/sports/{test_sport.id}",
            headers=auth_header(other_publisher),
        )

        assert response.status_code == 403

    async def test_delete_sport(self, client: AsyncClient, test_sport, test_publisher):
        response = await client.delete(
            f"/api/v1/sports/{test_sport.id}",
            headers=auth_header(test_publisher),
        )

        assert response.status_code == 200
        assert (await client.get(f"/api/v1/sports/{test_sport.id}")).status_code == 404

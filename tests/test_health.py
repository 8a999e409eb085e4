"""
Tests for health checks and the shared error envelope.
"""

from conftest import auth_headers


class TestHealth:
    async def test_liveness(self, client) -> None:
        response = await client.get("/api/v1/health")

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "healthy"
        assert body["service"] == "sprout-api"
        assert body["integrations"] == {"stripe": True, "mailjet": True, "shippo": True, "storage": True}

    async def test_readiness_without_database_engine(self, client) -> None:
        response = await client.get("/api/v1/health/ready")

        assert response.status_code == 503
        assert response.json()["status"] == "not_ready"


class TestErrorEnvelope:
    async def test_request_id_is_echoed(self, client) -> None:
        response = await client.get("/api/v1/health", headers={"X-Request-ID": "req-123"})

        assert response.headers["X-Request-ID"] == "req-123"
        assert "X-Response-Time" in response.headers

    async def test_domain_errors_carry_request_id(self, client, make_user) -> None:
        await make_user("alice", "alice_a")

        response = await client.get(
            "/api/v1/plants/missing", headers={**auth_headers("alice"), "X-Request-ID": "req-456"}
        )

        assert response.status_code == 404
        error = response.json()["error"]
        assert error["code"] == "NOT_FOUND"
        assert error["request_id"] == "req-456"
        assert "timestamp" in error

    async def test_unknown_route_is_404(self, client) -> None:
        response = await client.get("/api/v1/no-such-thing")

        assert response.status_code == 404

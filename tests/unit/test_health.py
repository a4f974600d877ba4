"""
Tests for health check endpoints.
"""

from unittest.mock import AsyncMock, patch

from fastapi.testclient import TestClient

from app.main import app

client = TestClient(app)

HEALTHY_POOL = {
    "healthy": True,
    "service": "database_pool",
    "connection_time_ms": 1.2,
    "pool_stats": {"pool_size": 3, "pool_available": 2, "pool_utilization_percent": 33.3},
}


def test_healthz_endpoint():
    """Test the basic health check endpoint."""
    response = client.get("/healthz")

    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "ok"
    assert data["service"] == "business-task-service"


def test_readyz_endpoint_all_services_healthy():
    """Test readiness endpoint when all services are healthy."""
    with (
        patch("app.routes.health.check_db", AsyncMock(return_value=True)),
        patch("app.routes.health.db_health_check", AsyncMock(return_value=HEALTHY_POOL)),
    ):
        response = client.get("/readyz")

    assert response.status_code == 200
    data = response.json()
    assert data["overall_ok"] is True
    checks = data["checks"]
    assert checks["postgres"]["ok"] is True
    assert checks["database_pool"]["ok"] is True
    assert checks["database_pool"]["pool_size"] == 3
    assert checks["configuration"]["ok"] is True


def test_readyz_endpoint_postgres_unhealthy():
    """Test readiness endpoint when Postgres is down."""
    with (
        patch("app.routes.health.check_db", AsyncMock(return_value="Connection failed")),
        patch("app.routes.health.db_health_check", AsyncMock(return_value=HEALTHY_POOL)),
    ):
        response = client.get("/readyz")

    assert response.status_code == 200
    data = response.json()
    assert data["overall_ok"] is False
    assert data["checks"]["postgres"]["ok"] is False
    assert data["checks"]["postgres"]["error"] == "Connection failed"


def test_readyz_endpoint_pool_not_initialized():
    """Test readiness endpoint before the pool is up."""
    pool_down = {"healthy": False, "error": "Pool not initialized", "service": "database_pool"}
    with (
        patch("app.routes.health.check_db", AsyncMock(return_value=True)),
        patch("app.routes.health.db_health_check", AsyncMock(return_value=pool_down)),
    ):
        response = client.get("/readyz")

    data = response.json()
    assert data["overall_ok"] is False
    assert data["checks"]["database_pool"]["error"] == "Pool not initialized"


def test_readyz_includes_latency_metrics():
    """Test that readiness checks include latency metrics."""
    with (
        patch("app.routes.health.check_db", AsyncMock(return_value=True)),
        patch("app.routes.health.db_health_check", AsyncMock(return_value=HEALTHY_POOL)),
    ):
        response = client.get("/readyz")

    checks = response.json()["checks"]
    assert isinstance(checks["postgres"]["latency_ms"], (int, float))
    assert isinstance(checks["database_pool"]["latency_ms"], (int, float))


def test_database_health_before_startup():
    """Pool is not initialized when the app runs without its lifespan."""
    response = client.get("/health/database")

    assert response.status_code == 200
    assert response.json()["healthy"] is False

"""
Integration tests for health check and root endpoints.
"""
import sys
from pathlib import Path

# Add backend and tdd to path for imports
backend_path = Path(__file__).parent.parent.parent.parent / "backend"
tdd_path = Path(__file__).parent.parent.parent.parent / "tdd"
sys.path.insert(0, str(backend_path))
sys.path.insert(0, str(tdd_path))

from shared.assertions import assert_json_contains, assert_status_code


class TestHealthEndpoint:
    """Tests for GET /health endpoint."""

    async def test_health_returns_ok(self, client):
        response = await client.get("/health")
        assert_status_code(response, 200)
        assert_json_contains(response, {"status": "ok", "app": "treesmith"})


class TestRootEndpoint:
    """Tests for GET / endpoint."""

    async def test_root_returns_welcome(self, client):
        response = await client.get("/")
        assert_status_code(response, 200)
        assert_json_contains(response, {"docs": "/docs"})
        assert "treesmith" in response.json()["message"]


class TestOpenAPISchema:
    """Tests for OpenAPI documentation endpoints."""

    async def test_openapi_includes_all_paths(self, client):
        response = await client.get("/openapi.json")
        assert_status_code(response, 200)
        paths = response.json()["paths"]

        expected_paths = [
            "/api/repos",
            "/api/repos/{repo_id}",
            "/api/repos/{repo_id}/git/trees",
            "/api/repos/{repo_id}/git/trees/{sha}",
            "/api/repos/{repo_id}/git/commits",
            "/api/repos/{repo_id}/git/commits/{sha}",
            "/api/repos/{repo_id}/git/blobs/{sha}",
        ]
        for path in expected_paths:
            assert path in paths, f"Expected path {path} not found in OpenAPI schema"

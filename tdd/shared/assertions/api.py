"""
Custom assertion helpers for API testing.

These helpers provide cleaner, more expressive assertions for common
patterns in API tests.
"""
import re
from typing import Any

from httpx import Response

SHA_RE = re.compile(r"^[0-9a-f]{40}$")


def assert_status_code(response: Response, expected: int) -> None:
    """Assert response has expected status code with helpful error message."""
    assert response.status_code == expected, (
        f"Expected status {expected}, got {response.status_code}. "
        f"Response body: {response.text}"
    )


def assert_json_contains(response: Response, expected: dict[str, Any] = None, **kwargs) -> None:
    """Assert response JSON contains all expected key-value pairs.

    The response can contain additional fields not specified in expected.
    """
    if expected is None:
        expected = kwargs
    else:
        expected = {**expected, **kwargs}

    actual = response.json()
    for key, value in expected.items():
        assert key in actual, f"Expected key '{key}' not found in response: {actual}"
        assert actual[key] == value, (
            f"Expected {key}={value!r}, got {key}={actual[key]!r}"
        )


def assert_json_list_length(response: Response, expected_length: int) -> None:
    """Assert response JSON is a list of expected length."""
    actual = response.json()
    assert isinstance(actual, list), f"Expected list, got {type(actual)}"
    assert len(actual) == expected_length, (
        f"Expected {expected_length} items, got {len(actual)}"
    )


def assert_error_response(response: Response, status_code: int, detail: str) -> None:
    """Assert response is an error with expected status and detail message."""
    assert_status_code(response, status_code)
    actual = response.json()
    assert "detail" in actual, f"Expected 'detail' in error response: {actual}"
    assert actual["detail"] == detail, (
        f"Expected detail '{detail}', got '{actual['detail']}'"
    )


def assert_error_mentions(response: Response, status_code: int, *fragments: str) -> str:
    """Assert response is an error whose detail contains every fragment.

    Returns the detail message.
    """
    assert_status_code(response, status_code)
    detail = response.json().get("detail")
    assert isinstance(detail, str), f"Expected string detail, got {detail!r}"
    for fragment in fragments:
        assert fragment in detail, f"Expected {fragment!r} in detail, got {detail!r}"
    return detail


def assert_created_response(response: Response, expected: dict[str, Any] = None, **kwargs) -> dict[str, Any]:
    """Assert response is a successful creation (201) with expected fields.

    Returns the full response JSON for further assertions.
    """
    assert_status_code(response, 201)
    if expected is not None or kwargs:
        assert_json_contains(response, expected, **kwargs)
    actual = response.json()
    assert "id" in actual, "Created response should include 'id'"
    return actual


def assert_updated_response(response: Response, expected: dict[str, Any] = None, **kwargs) -> dict[str, Any]:
    """Assert response is a successful update (200) with expected fields."""
    assert_status_code(response, 200)
    if expected is not None or kwargs:
        assert_json_contains(response, expected, **kwargs)
    return response.json()


def assert_deleted_response(response: Response) -> None:
    """Assert response is a successful deletion (204)."""
    assert_status_code(response, 204)


def assert_not_found(response: Response, resource_type: str = None) -> None:
    """Assert response is a 404 Not Found error.

    If resource_type is provided, checks for "{resource_type} not found".
    """
    assert_status_code(response, 404)
    actual = response.json()
    assert "detail" in actual, f"Expected 'detail' in error response: {actual}"

    if resource_type:
        expected_detail = f"{resource_type} not found"
        assert actual["detail"] == expected_detail, (
            f"Expected detail '{expected_detail}', got '{actual['detail']}'"
        )


def assert_validation_error(response: Response) -> dict[str, Any]:
    """Assert response is a request validation error (422 with a detail list)."""
    assert_status_code(response, 422)
    actual = response.json()
    assert isinstance(actual["detail"], list), f"Expected validation detail list: {actual}"
    return actual


# -----------------------------------------------------------------------------
# Git Object Assertions
# -----------------------------------------------------------------------------

def assert_sha(value: str) -> None:
    """Assert value is a 40 character lowercase hex object id."""
    assert isinstance(value, str) and SHA_RE.match(value), f"Expected sha, got {value!r}"


def assert_tree_written(response: Response, expected_sha: str | None = None) -> str:
    """Assert a write-tree response (201 with sha and url).

    Returns the tree sha.
    """
    assert_status_code(response, 201)
    actual = response.json()
    assert_sha(actual["sha"])
    assert actual["url"].endswith(f"/git/trees/{actual['sha']}"), actual["url"]
    if expected_sha is not None:
        assert actual["sha"] == expected_sha, (
            f"Expected tree {expected_sha}, got {actual['sha']}"
        )
    return actual["sha"]


def assert_commit_created(response: Response) -> dict[str, Any]:
    """Assert a create-commit response (201 with sha, url and verification)."""
    assert_status_code(response, 201)
    actual = response.json()
    assert_sha(actual["sha"])
    assert actual["url"].endswith(f"/git/commits/{actual['sha']}"), actual["url"]
    verification = actual["verification"]
    for key in ("verified", "reason", "signature", "signer", "payload"):
        assert key in verification, f"Expected '{key}' in verification: {verification}"
    return actual


def tree_paths(response: Response) -> dict[str, dict[str, Any]]:
    """Map path -> entry for a get-tree response."""
    assert_status_code(response, 200)
    return {entry["path"]: entry for entry in response.json()["tree"]}

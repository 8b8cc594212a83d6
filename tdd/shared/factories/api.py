"""
API request factories.

These build dictionaries suitable for API request payloads. They help keep
tests DRY and maintainable.
"""
import base64
from typing import Any

from faker import Faker

fake = Faker()


# -----------------------------------------------------------------------------
# Repo API Factories
# -----------------------------------------------------------------------------

def repo_create_payload(
    name: str | None = None,
    default_branch: str = "main",
    trust_model: str | None = None,
) -> dict[str, Any]:
    """Create a payload for POST /api/repos."""
    payload = {
        "name": name or fake.word().capitalize() + "Repo",
        "default_branch": default_branch,
    }
    if trust_model is not None:
        payload["trust_model"] = trust_model
    return payload


def repo_update_payload(**kwargs) -> dict[str, Any]:
    """Create a payload for PATCH /api/repos/{id}.

    Only includes fields that are explicitly provided.
    """
    valid_fields = {"name", "default_branch", "trust_model", "is_archived"}
    return {k: v for k, v in kwargs.items() if k in valid_fields}


# -----------------------------------------------------------------------------
# Git Object API Factories
# -----------------------------------------------------------------------------

def encode_content(text: str | bytes) -> str:
    """Base64-encode file content the way the write-tree API expects it."""
    data = text.encode("utf-8") if isinstance(text, str) else text
    return base64.b64encode(data).decode("ascii")


def tree_entry(
    name: str,
    mode: str = "100644",
    sha: str | None = None,
    content: str | bytes | None = None,
) -> dict[str, Any]:
    """One entry of a write-tree payload; give content as plain text."""
    entry: dict[str, Any] = {"name": name, "mode": mode}
    if sha is not None:
        entry["sha"] = sha
    if content is not None:
        entry["content"] = encode_content(content)
    return entry


def delete_entry(name: str, mode: str = "100644") -> dict[str, Any]:
    """A write-tree entry that removes name from the base tree."""
    return {"name": name, "mode": mode}


def write_tree_payload(entries: list[dict[str, Any]], base_tree: str | None = None) -> dict[str, Any]:
    """Create a payload for POST /api/repos/{id}/git/trees."""
    payload: dict[str, Any] = {"tree": entries}
    if base_tree is not None:
        payload["base_tree"] = base_tree
    return payload


def commit_payload(
    tree: str,
    message: str | None = None,
    parents: list[str] | None = None,
    author: dict[str, str] | None = None,
    committer: dict[str, str] | None = None,
    dates: dict[str, str] | None = None,
    signoff: bool = False,
) -> dict[str, Any]:
    """Create a payload for POST /api/repos/{id}/git/commits.

    parents is only sent when given; omitting it commits on top of HEAD.
    """
    payload: dict[str, Any] = {
        "message": message or fake.sentence(nb_words=5),
        "tree": tree,
        "signoff": signoff,
    }
    if parents is not None:
        payload["parents"] = parents
    if author is not None:
        payload["author"] = author
    if committer is not None:
        payload["committer"] = committer
    if dates is not None:
        payload["dates"] = dates
    return payload

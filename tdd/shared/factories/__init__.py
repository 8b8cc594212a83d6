# Test data factories for creating model instances and API payloads

from .base import BaseFactory, generate_key_id, generate_uuid
from .models import GPGKeyFactory, RepoFactory, UserFactory
from .api import (
    commit_payload,
    delete_entry,
    encode_content,
    repo_create_payload,
    repo_update_payload,
    tree_entry,
    write_tree_payload,
)

__all__ = [
    # Base utilities
    "BaseFactory",
    "generate_uuid",
    "generate_key_id",
    # Model factories
    "RepoFactory",
    "UserFactory",
    "GPGKeyFactory",
    # API factories
    "repo_create_payload",
    "repo_update_payload",
    "encode_content",
    "tree_entry",
    "delete_entry",
    "write_tree_payload",
    "commit_payload",
]

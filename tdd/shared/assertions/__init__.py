# Custom assertion helpers

from .api import (
    assert_commit_created,
    assert_created_response,
    assert_deleted_response,
    assert_error_mentions,
    assert_error_response,
    assert_json_contains,
    assert_json_list_length,
    assert_not_found,
    assert_sha,
    assert_status_code,
    assert_tree_written,
    assert_updated_response,
    assert_validation_error,
    tree_paths,
)
from .models import (
    assert_model_fields,
    assert_model_has_id,
    assert_model_has_timestamps,
    assert_schema_invalid,
    assert_schema_valid,
)

__all__ = [
    # API assertions
    "assert_status_code",
    "assert_json_contains",
    "assert_json_list_length",
    "assert_error_response",
    "assert_error_mentions",
    "assert_created_response",
    "assert_updated_response",
    "assert_deleted_response",
    "assert_not_found",
    "assert_validation_error",
    # Git object assertions
    "assert_sha",
    "assert_tree_written",
    "assert_commit_created",
    "tree_paths",
    # Model assertions
    "assert_model_fields",
    "assert_model_has_id",
    "assert_model_has_timestamps",
    "assert_schema_valid",
    "assert_schema_invalid",
]

"""
Unit tests for the git object request/response schemas.
"""
import sys
from pathlib import Path

# Add backend and tdd to path for imports
backend_path = Path(__file__).parent.parent.parent.parent / "backend"
tdd_path = Path(__file__).parent.parent.parent.parent / "tdd"
sys.path.insert(0, str(backend_path))
sys.path.insert(0, str(tdd_path))

from treesmith.schemas import CommitIdentity, CreateCommitOptions, GitWriteTreeOptions

from shared.assertions import assert_schema_invalid, assert_schema_valid

TREE = "72e65790d93b0e20a0488b56de1833e6210991e2"


class TestGitWriteTreeOptions:
    def test_entries_keep_order_and_optional_fields(self):
        schema = assert_schema_valid(GitWriteTreeOptions, {
            "tree": [
                {"name": "b", "mode": "100644", "content": "eA=="},
                {"name": "a", "mode": "100644"},
            ],
        })
        assert [e.name for e in schema.tree] == ["b", "a"]
        assert schema.tree[1].model_dump() == {"name": "a", "mode": "100644", "sha": None, "content": None}
        assert schema.base_tree is None

    def test_tree_is_required(self):
        assert_schema_invalid(GitWriteTreeOptions, {"base_tree": TREE})

    def test_entry_needs_name_and_mode(self):
        assert_schema_invalid(GitWriteTreeOptions, {"tree": [{"name": "a"}]})


class TestCreateCommitOptions:
    def test_minimal(self):
        schema = assert_schema_valid(CreateCommitOptions, {"message": "m", "tree": TREE})
        assert schema.parents is None
        assert schema.author is None
        assert schema.signoff is False

    def test_empty_parents_is_kept_distinct_from_omitted(self):
        schema = assert_schema_valid(CreateCommitOptions, {"message": "m", "tree": TREE, "parents": []})
        assert schema.parents == []

    def test_empty_message_rejected(self):
        assert_schema_invalid(CreateCommitOptions, {"message": "", "tree": TREE})

    def test_dates_are_parsed(self):
        schema = assert_schema_valid(CreateCommitOptions, {
            "message": "m",
            "tree": TREE,
            "dates": {"author": "2020-01-01T12:00:00+02:00"},
        })
        assert schema.dates.author.utcoffset().total_seconds() == 7200
        assert schema.dates.committer is None

    def test_identity_length_limits(self):
        assert_schema_invalid(CommitIdentity, {"name": "x" * 101, "email": "a@x.com"})
        assert_schema_invalid(CommitIdentity, {"name": "a", "email": "x" * 255})

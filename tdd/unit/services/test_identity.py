"""
Unit tests for author/committer identity resolution.
"""
import sys
from pathlib import Path

# Add backend to path for imports
backend_path = Path(__file__).parent.parent.parent.parent / "backend"
sys.path.insert(0, str(backend_path))

from treesmith.services.identity import (
    Account,
    Identity,
    IdentityHint,
    clean_identity_part,
    resolve_identities,
)

ACTING = Account(id="u2", name="u2", email="u2@x.com", full_name="User Two")


class TestAccount:
    def test_git_name_prefers_full_name(self):
        assert ACTING.git_name == "User Two"
        assert Account(id="1", name="login", email="e@x.com").git_name == "login"

    def test_identity_links_account(self):
        identity = ACTING.identity()
        assert identity == Identity(name="User Two", email="u2@x.com", account=ACTING)
        assert identity.signature() == "User Two <u2@x.com>"


class TestResolveIdentities:
    """Tests for resolve_identities() precedence rules."""

    def test_no_hints_uses_acting_user_for_both(self):
        author, committer = resolve_identities(None, None, ACTING)
        assert author == committer == ACTING.identity()

    def test_committer_only_is_used_for_both(self):
        """A committer hint alone names both author and committer."""
        author, committer = resolve_identities(None, IdentityHint("Bot", "bot@x.com"), ACTING)

        assert author == Identity(name="Bot", email="bot@x.com")
        assert committer == Identity(name="Bot", email="bot@x.com")
        assert author.account is None

    def test_author_only_is_used_for_both(self):
        author, committer = resolve_identities(IdentityHint("Ann", "ann@x.com"), None, ACTING)
        assert author == committer == Identity(name="Ann", email="ann@x.com")

    def test_both_hints_kept_apart(self):
        author, committer = resolve_identities(
            IdentityHint("Ann", "ann@x.com"),
            IdentityHint("Bot", "bot@x.com"),
            ACTING,
        )
        assert author.signature() == "Ann <ann@x.com>"
        assert committer.signature() == "Bot <bot@x.com>"

    def test_hint_matching_acting_email_resolves_to_account(self):
        author, _ = resolve_identities(IdentityHint("Someone", "U2@X.COM"), None, ACTING)

        assert author.account == ACTING
        assert author.name == "Someone"
        assert author.email == "u2@x.com"

    def test_hint_matching_acting_email_without_name_uses_account_name(self):
        author, _ = resolve_identities(IdentityHint("", "u2@x.com"), None, ACTING)
        assert author.name == "User Two"

    def test_hint_without_email_is_ignored(self):
        author, committer = resolve_identities(IdentityHint("Nameless", ""), None, ACTING)
        assert author == committer == ACTING.identity()

    def test_no_hints_and_no_acting_user(self):
        assert resolve_identities(None, None, None) == (None, None)


class TestIdentity:
    def test_same_person_compares_name_and_email(self):
        assert Identity("A", "a@x.com").same_person(Identity("A", "a@x.com", account=ACTING))
        assert not Identity("A", "a@x.com").same_person(Identity("B", "a@x.com"))
        assert not Identity("A", "a@x.com").same_person(Identity("A", "b@x.com"))

    def test_signature(self):
        assert Identity("Ann", "ann@x.com").signature() == "Ann <ann@x.com>"

    def test_signature_drops_angle_brackets_and_newlines(self):
        assert Identity("Bob <bob", "bob@x.com").signature() == "Bob bob <bob@x.com>"
        assert Identity("Eve\nEvil", "<eve@x.com>").signature() == "EveEvil <eve@x.com>"


class TestCleanIdentityPart:
    def test_trims_crud_at_both_ends(self):
        assert clean_identity_part("  'Ann Lee'.,; ") == "Ann Lee"
        assert clean_identity_part("<ann@x.com>") == "ann@x.com"

    def test_keeps_inner_punctuation(self):
        assert clean_identity_part("O'Brien, Jr") == "O'Brien, Jr"
        assert clean_identity_part("first.last@x.com") == "first.last@x.com"

    def test_drops_header_breaking_characters_anywhere(self):
        assert clean_identity_part("a<b>c\nd") == "abcd"

"""
Author/committer identity resolution for API-created commits.
"""
from dataclasses import dataclass, replace

# Trimmed from both ends of a name or email, as git's ident code does
IDENTITY_CRUD = "".join(chr(c) for c in range(33)) + ".,:;<>\"\\'"
# Dropped anywhere: they would break the "Name <email>" header line
IDENTITY_FORBIDDEN = str.maketrans("", "", "<>\n")


def clean_identity_part(value: str) -> str:
    """Clean a name or email the way git commit-tree does."""
    return value.strip(IDENTITY_CRUD).translate(IDENTITY_FORBIDDEN)


@dataclass(frozen=True)
class Account:
    """The acting user as seen by the commit services."""
    id: str
    name: str
    email: str
    full_name: str = ""
    gpg_key_ids: tuple[str, ...] = ()

    @property
    def git_name(self) -> str:
        return self.full_name or self.name

    def identity(self) -> "Identity":
        return Identity(name=self.git_name, email=self.email, account=self)


@dataclass(frozen=True)
class Identity:
    name: str
    email: str
    # Set when this identity aliases an account
    account: Account | None = None

    def signature(self) -> str:
        return f"{clean_identity_part(self.name)} <{clean_identity_part(self.email)}>"

    def same_person(self, other: "Identity") -> bool:
        return self.name == other.name and self.email == other.email


@dataclass(frozen=True)
class IdentityHint:
    """Name/email pair supplied with a create-commit request."""
    name: str = ""
    email: str = ""


def _resolve_hint(hint: IdentityHint | None, acting: Account | None) -> Identity | None:
    if hint is None or not hint.email:
        return None
    if acting is not None and acting.email.lower() == hint.email.lower():
        # The hint names the acting user: keep the account, let the hint rename it
        identity = acting.identity()
        if hint.name:
            identity = replace(identity, name=hint.name)
        return identity
    return Identity(name=hint.name, email=hint.email)


def resolve_identities(
    author_hint: IdentityHint | None,
    committer_hint: IdentityHint | None,
    acting: Account | None,
) -> tuple[Identity | None, Identity | None]:
    """
    Resolve the author and committer of a commit.

    A hint whose email matches the acting account resolves to that account;
    any other hint with an email becomes a transient identity. A missing
    author falls back to the committer, then the acting account; a missing
    committer mirrors the author.
    """
    author = _resolve_hint(author_hint, acting)
    committer = _resolve_hint(committer_hint, acting)

    if author is None:
        if committer is not None:
            author = committer
        elif acting is not None:
            author = acting.identity()
    if committer is None:
        committer = author
    return author, committer

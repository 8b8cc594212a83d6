"""
Commit construction for the create-commit API.

Builds a commit object for an existing tree, applying the repository's
signing policy and trailers, stores it, and reads it back for verification.
"""
import logging
import re
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone

from dulwich.objects import Commit

from treesmith.services.entries import is_valid_sha
from treesmith.services.errors import InvalidParent, InvalidReference, MissingObject, SigningError
from treesmith.services.identity import Identity
from treesmith.services.object_store import GitObjectStore
from treesmith.services.signing import SigningDecision, SigningPolicy, evaluate_signing
from treesmith.services.verification import SignatureCheck, check_signature

logger = logging.getLogger(__name__)

CO_AUTHORED_BY = "Co-authored-by"
CO_COMMITTED_BY = "Co-committed-by"
SIGNED_OFF_BY = "Signed-off-by"

# Trailers are always written in this order
TRAILER_ORDER = (CO_AUTHORED_BY, CO_COMMITTED_BY, SIGNED_OFF_BY)

TRAILER_LINE = re.compile(r"^[A-Za-z0-9][A-Za-z0-9-]*: \S")


@dataclass(frozen=True)
class CommitTreeOptions:
    # None means "on top of the current HEAD"
    parents: list[str] | None = None
    author_date: datetime | None = None
    committer_date: datetime | None = None


@dataclass(frozen=True)
class CommitResult:
    sha: str
    check: SignatureCheck
    decision: SigningDecision = field(default_factory=lambda: SigningDecision(sign=False))


def _ends_with_trailer_block(body: str) -> bool:
    paragraphs = body.split("\n\n")
    if len(paragraphs) < 2:
        return False
    lines = [line for line in paragraphs[-1].split("\n") if line]
    return bool(lines) and all(TRAILER_LINE.match(line) for line in lines)


def format_message(message: str, trailers: dict[str, str]) -> str:
    """Append trailers in fixed order; the result always ends with a newline."""
    lines = [f"{key}: {trailers[key]}" for key in TRAILER_ORDER if key in trailers]
    if not lines:
        return message if message.endswith("\n") else message + "\n"

    body = message.rstrip("\n")
    separator = "\n" if _ends_with_trailer_block(body) else "\n\n"
    if not body:
        separator = ""
    return body + separator + "\n".join(lines) + "\n"


def git_time(value: datetime | None, now: datetime) -> tuple[int, int]:
    """Seconds since epoch and UTC offset in seconds; naive datetimes are UTC."""
    value = value or now
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return int(value.timestamp()), int(value.utcoffset().total_seconds())


def resolve_parents(store: GitObjectStore, parents: list[str] | None) -> list[str]:
    if parents is None:
        head = store.resolve_head()
        return [head] if head else []

    for parent in parents:
        # Refuse branch and tag names, which commit-tree would happily resolve
        if not is_valid_sha(parent):
            raise InvalidParent(parent)
    # Repeated parents are dropped, keeping first-seen order
    resolved = list(dict.fromkeys(parent.lower() for parent in parents))
    for parent in resolved:
        if store.object_type(parent) != "commit":
            raise MissingObject(parent)
    return resolved


def commit_tree(
    store: GitObjectStore,
    author: Identity,
    committer: Identity,
    tree: str,
    message: str,
    signoff: bool = False,
    options: CommitTreeOptions | None = None,
    policy: SigningPolicy | None = None,
    signer=None,
    verifier=None,
) -> CommitResult:
    """
    Create a commit of tree by author/committer.

    Args:
        store: Object store of the target repository
        author: Resolved author identity
        committer: Resolved committer identity (may be replaced by the signer)
        tree: Sha of an existing tree
        message: Commit message; trailers are appended to it
        signoff: Add a Signed-off-by trailer for the final committer
        options: Parents and explicit dates
        policy: Signing policy of the repository; None never signs
        signer: Object with sign(payload, key_id) -> armored signature
        verifier: Object with verify(payload, signature) -> SignatureStatus

    Returns:
        CommitResult with the new sha and the signature check of the stored commit
    """
    options = options or CommitTreeOptions()
    parents = resolve_parents(store, options.parents)

    if not is_valid_sha(tree):
        raise InvalidReference(tree)
    tree = tree.lower()
    if store.object_type(tree) != "tree":
        raise MissingObject(tree)

    decision = SigningDecision(sign=False, reason="no_policy")
    if policy is not None:
        decision = evaluate_signing(
            policy.rules,
            policy.server_signer,
            author,
            parents,
            lambda sha: check_signature(store.read_commit(sha), verifier).valid,
        )

    trailers: dict[str, str] = {}
    if decision.sign:
        if signer is None:
            raise SigningError("commit must be signed but no signer is available")
        signed_committer = policy.signed_committer(committer, decision.signer)
        if signed_committer is not committer and not decision.signer.same_person(committer):
            trailers[CO_AUTHORED_BY] = author.signature()
            trailers[CO_COMMITTED_BY] = committer.signature()
        committer = signed_committer

    if signoff:
        trailers[SIGNED_OFF_BY] = committer.signature()

    now = datetime.now(timezone.utc)
    commit = Commit()
    commit.tree = tree.encode("ascii")
    commit.parents = [parent.encode("ascii") for parent in parents]
    commit.author = author.signature().encode("utf-8")
    commit.committer = committer.signature().encode("utf-8")
    commit.author_time, commit.author_timezone = git_time(options.author_date, now)
    commit.commit_time, commit.commit_timezone = git_time(options.committer_date, now)
    commit.message = format_message(message, trailers).encode("utf-8")

    if decision.sign:
        # Signature covers the commit as serialized without the gpgsig header
        commit.gpgsig = signer.sign(commit.as_raw_string(), decision.key_id)
    else:
        logger.debug(f"Not signing commit in repo {store.repo_id}: {decision.reason}")

    sha = store.create_commit(commit)
    logger.info(
        f"Created commit {sha[:8]} in repo {store.repo_id} "
        f"(tree={tree[:8]}, parents={len(parents)}, signed={decision.sign})"
    )

    stored = store.read_commit(sha)
    return CommitResult(sha=sha, check=check_signature(stored, verifier), decision=decision)


IDENTITY_PATTERN = re.compile(r"^(?P<name>.*?)\s*<(?P<email>[^>]*)>\s*$")


def split_identity(raw: bytes) -> tuple[str, str]:
    """Split b'Name <email>' into its parts."""
    text = raw.decode("utf-8", errors="replace")
    match = IDENTITY_PATTERN.match(text)
    if not match:
        return text, ""
    return match.group("name"), match.group("email")


def _git_date(seconds: int, offset: int) -> str:
    return datetime.fromtimestamp(seconds, tz=timezone(timedelta(seconds=offset))).isoformat()


def read_commit_info(store: GitObjectStore, sha: str, verifier=None) -> tuple[dict, SignatureCheck]:
    """Describe a stored commit as a dict plus the check of its signature."""
    commit = store.read_commit(sha)
    author_name, author_email = split_identity(commit.author)
    committer_name, committer_email = split_identity(commit.committer)
    info = {
        "sha": commit.id.decode("ascii"),
        "author": {
            "name": author_name,
            "email": author_email,
            "date": _git_date(commit.author_time, commit.author_timezone),
        },
        "committer": {
            "name": committer_name,
            "email": committer_email,
            "date": _git_date(commit.commit_time, commit.commit_timezone),
        },
        "message": commit.message.decode("utf-8", errors="replace"),
        "tree": commit.tree.decode("ascii"),
        "parents": [parent.decode("ascii") for parent in commit.parents],
    }
    return info, check_signature(commit, verifier)

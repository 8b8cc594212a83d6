from treesmith.schemas.repo import RepoCreate, RepoRead, RepoUpdate
from treesmith.schemas.tree import (
    GitBlobResponse,
    GitEntry,
    GitTreeResponse,
    GitWriteTreeEntry,
    GitWriteTreeOptions,
    GitWriteTreeResponse,
)
from treesmith.schemas.commit import (
    CommitDateOptions,
    CommitIdentity,
    CommitMeta,
    CommitRead,
    CommitUser,
    CommitVerification,
    CreateCommitOptions,
    CreateCommitResponse,
    PayloadUser,
)

__all__ = [
    "RepoCreate",
    "RepoRead",
    "RepoUpdate",
    "GitBlobResponse",
    "GitEntry",
    "GitTreeResponse",
    "GitWriteTreeEntry",
    "GitWriteTreeOptions",
    "GitWriteTreeResponse",
    "CommitDateOptions",
    "CommitIdentity",
    "CommitMeta",
    "CommitRead",
    "CommitUser",
    "CommitVerification",
    "CreateCommitOptions",
    "CreateCommitResponse",
    "PayloadUser",
]

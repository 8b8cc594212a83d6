"""
Tree entry resolution.

Turns the raw {name, mode, sha, content} entries of a write-tree request into
validated merge operations, and resolves upserts into tree entries (writing
inline content to the object store as a blob).
"""
import base64
import binascii
import re
from dataclasses import dataclass
from enum import Enum

from treesmith.services.errors import (
    ConflictingSource,
    ContentNotAllowed,
    InvalidContent,
    InvalidMode,
    InvalidName,
    InvalidReference,
)


SHA_PATTERN = re.compile(r"^[0-9a-fA-F]{40}$")

# Name of the version-control metadata directory; never a valid entry name
RESERVED_NAME = ".git"


class EntryMode(str, Enum):
    """Git tree entry modes accepted by write-tree."""
    BLOB = "100644"
    EXECUTABLE = "100755"
    SYMLINK = "120000"
    SUBMODULE = "160000"
    TREE = "040000"

    @property
    def object_type(self) -> str:
        if self is EntryMode.TREE:
            return "tree"
        if self is EntryMode.SUBMODULE:
            return "commit"
        return "blob"

    @property
    def accepts_content(self) -> bool:
        return self.object_type == "blob"

    @property
    def as_int(self) -> int:
        return int(self.value, 8)

    @classmethod
    def from_int(cls, mode: int) -> "EntryMode":
        # Old trees may carry non-canonical modes such as 100664
        kind = mode & 0o170000
        if kind == 0o040000:
            return cls.TREE
        if kind == 0o160000:
            return cls.SUBMODULE
        if kind == 0o120000:
            return cls.SYMLINK
        if mode & 0o111:
            return cls.EXECUTABLE
        return cls.BLOB


@dataclass(frozen=True)
class TreeEntry:
    name: str
    mode: EntryMode
    sha: str


@dataclass(frozen=True)
class Upsert:
    name: str
    mode: EntryMode
    sha: str | None = None
    content: bytes | None = None


@dataclass(frozen=True)
class Delete:
    name: str


def is_valid_sha(value: str | None) -> bool:
    """Check that a value is syntactically a full hex object id."""
    return bool(value) and SHA_PATTERN.match(value) is not None


def is_valid_entry_name(name: str) -> bool:
    if not name or name in (".", ".."):
        return False
    if "/" in name or "\x00" in name:
        return False
    return name.lower() != RESERVED_NAME


def parse_mode(mode: str) -> EntryMode:
    try:
        return EntryMode(mode)
    except ValueError:
        raise InvalidMode(mode)


def parse_operation(
    name: str,
    mode: str,
    sha: str | None = None,
    content: str | None = None,
) -> Upsert | Delete:
    """
    Validate one write-tree entry without touching the object store.

    Neither sha nor content means the entry is to be deleted. Content is
    expected base64-encoded and is decoded here.
    """
    if not is_valid_entry_name(name):
        raise InvalidName(name)
    entry_mode = parse_mode(mode)

    if not sha:
        if not content:
            return Delete(name=name)
        if not entry_mode.accepts_content:
            raise ContentNotAllowed(name, mode)
        try:
            data = base64.b64decode(content, validate=True)
        except (binascii.Error, ValueError):
            raise InvalidContent(name)
        return Upsert(name=name, mode=entry_mode, content=data)

    if content:
        raise ConflictingSource(name)
    if not is_valid_sha(sha):
        raise InvalidReference(sha)
    return Upsert(name=name, mode=entry_mode, sha=sha.lower())


def resolve_entry(store, operation: Upsert) -> TreeEntry:
    """Produce the tree entry for an upsert, storing inline content first."""
    if operation.content is not None:
        sha = store.hash_and_store_blob(operation.content)
    else:
        sha = operation.sha
    return TreeEntry(name=operation.name, mode=operation.mode, sha=sha)

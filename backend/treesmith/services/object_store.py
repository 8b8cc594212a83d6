"""
Content-addressable object store backed by a bare git repository.

Thin wrapper over dulwich that speaks hex-string object ids and raises the
typed errors the tree/commit services report to callers.
"""
import logging
from typing import Iterable

from dulwich.objects import Blob, Commit, Tag, Tree
from dulwich.refs import check_ref_format
from dulwich.repo import Repo as DulwichRepo

from treesmith.services.entries import EntryMode, TreeEntry, is_valid_sha
from treesmith.services.errors import InvalidMode, MissingObject, ObjectStoreError

logger = logging.getLogger(__name__)


# dulwich type numbers as returned by get_raw()
OBJECT_TYPES = {1: "commit", 2: "tree", 3: "blob", 4: "tag"}


class GitObjectStore:
    """Object-level access to one repository."""

    def __init__(self, repo: DulwichRepo, repo_id: str = ""):
        self.repo = repo
        self.repo_id = repo_id

    @property
    def path(self) -> str:
        return self.repo.path

    def close(self) -> None:
        self.repo.close()

    def __enter__(self) -> "GitObjectStore":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def contains(self, sha: str) -> bool:
        return sha.encode("ascii") in self.repo.object_store

    def object_type(self, sha: str) -> str | None:
        """Return 'blob', 'tree', 'commit' or 'tag', or None if absent."""
        try:
            type_num, _ = self.repo.object_store.get_raw(sha.encode("ascii"))
        except KeyError:
            return None
        return OBJECT_TYPES.get(type_num)

    def _add(self, obj) -> str:
        try:
            self.repo.object_store.add_object(obj)
        except OSError as e:
            logger.error(f"Unable to write {obj.type_name.decode()} to repo {self.repo_id} ({self.path}): {e}")
            raise ObjectStoreError(f"unable to write object: {e}")
        return obj.id.decode("ascii")

    def hash_and_store_blob(self, data: bytes) -> str:
        """Store raw bytes as a blob. Identical bytes always give the same sha."""
        return self._add(Blob.from_string(data))

    def read_blob(self, sha: str) -> bytes:
        obj = self._get(sha)
        if not isinstance(obj, Blob):
            raise MissingObject(sha)
        return obj.data

    def _get(self, sha: str):
        try:
            return self.repo.object_store[sha.encode("ascii")]
        except KeyError:
            raise MissingObject(sha)

    def _peel(self, obj):
        while isinstance(obj, Tag):
            _, target = obj.object
            obj = self._get(target.decode("ascii"))
        return obj

    def resolve_ref(self, ref: str) -> str | None:
        """Resolve HEAD, a branch or a tag name to the object id it points at."""
        if ref == "HEAD":
            candidates = [b"HEAD"]
        else:
            candidates = [
                name for name in (f"refs/heads/{ref}".encode(), f"refs/tags/{ref}".encode())
                if check_ref_format(name)
            ]
        for name in candidates:
            try:
                return self.repo.refs[name].decode("ascii")
            except KeyError:
                continue
        return None

    def resolve_head(self) -> str | None:
        """Current HEAD commit, or None for a repository with no commits."""
        sha = self.resolve_ref("HEAD")
        if sha is None or not self.contains(sha):
            return None
        return sha

    def get_tree(self, tree_ish: str) -> Tree:
        """
        Resolve a tree sha, commit sha, tag or branch name to a tree.

        Raises MissingObject when nothing by that name resolves to a tree.
        """
        sha = tree_ish.lower() if is_valid_sha(tree_ish) else self.resolve_ref(tree_ish)
        if sha is None:
            raise MissingObject(tree_ish)
        obj = self._peel(self._get(sha))
        if isinstance(obj, Commit):
            obj = self._get(obj.tree.decode("ascii"))
        if not isinstance(obj, Tree):
            raise MissingObject(tree_ish)
        return obj

    def list_entries(self, tree: Tree) -> list[TreeEntry]:
        return [
            TreeEntry(
                name=item.path.decode("utf-8", errors="surrogateescape"),
                mode=EntryMode.from_int(item.mode),
                sha=item.sha.decode("ascii"),
            )
            for item in tree.iteritems()
        ]

    def object_size(self, sha: str) -> int:
        try:
            _, raw = self.repo.object_store.get_raw(sha.encode("ascii"))
        except KeyError:
            return 0
        return len(raw)

    def materialize_tree(self, entries: Iterable[TreeEntry]) -> str:
        """
        Write a tree object from entries given in any order.

        Every referenced object except submodule commits must already exist
        and have the type the entry mode implies. Nothing is written unless
        all entries check out.
        """
        tree = Tree()
        for entry in sorted(entries, key=lambda e: e.name):
            if entry.mode is not EntryMode.SUBMODULE:
                actual = self.object_type(entry.sha)
                if actual is None:
                    raise MissingObject(entry.sha)
                if actual != entry.mode.object_type:
                    raise InvalidMode(
                        entry.mode.value,
                        f"entry {entry.name} object {entry.sha} is a {actual}, "
                        f"but mode {entry.mode.value} expects a {entry.mode.object_type}",
                    )
            tree.add(
                entry.name.encode("utf-8", errors="surrogateescape"),
                entry.mode.as_int,
                entry.sha.encode("ascii"),
            )
        return self._add(tree)

    def create_commit(self, commit: Commit) -> str:
        return self._add(commit)

    def read_commit(self, sha: str) -> Commit:
        obj = self._get(sha)
        if not isinstance(obj, Commit):
            raise MissingObject(sha)
        return obj

"""
Tree writing and reading.

write_tree merges a base tree with an ordered list of upsert/delete entries
and materializes the result; get_tree_by_sha lists a tree page by page.
"""
import logging
from typing import Iterable

from treesmith.services.entries import (
    Delete,
    EntryMode,
    TreeEntry,
    Upsert,
    parse_operation,
    resolve_entry,
)
from treesmith.services.errors import BaseTreeNotFound, MissingObject
from treesmith.services.object_store import GitObjectStore

logger = logging.getLogger(__name__)


def merge_entries(
    base_entries: Iterable[TreeEntry],
    operations: Iterable[TreeEntry | Delete],
) -> dict[str, TreeEntry]:
    """
    Apply resolved upserts and deletes to the base entries, keyed by name.

    Later operations for a name override earlier ones and the base tree, so
    the result never holds two entries with the same name. Deleting a name
    that is not present is a no-op.
    """
    merged = {entry.name: entry for entry in base_entries}
    for op in operations:
        if isinstance(op, Delete):
            merged.pop(op.name, None)
        else:
            merged[op.name] = op
    return merged


def load_base_entries(store: GitObjectStore, base_tree: str | None) -> list[TreeEntry]:
    if not base_tree:
        return []
    try:
        tree = store.get_tree(base_tree)
    except MissingObject:
        raise BaseTreeNotFound(base_tree)
    return store.list_entries(tree)


def write_tree(store: GitObjectStore, entries: list[dict], base_tree: str | None = None) -> str:
    """
    Write a new tree from a base tree and a list of entries.

    Args:
        store: Object store of the target repository
        entries: Dicts with 'name', 'mode' and optionally 'sha' or
            base64 'content'. Neither sha nor content deletes the name.
        base_tree: Optional tree-ish whose entries are merged with the list

    Returns:
        Sha of the written tree
    """
    # Validate everything before the first blob is written
    operations = [
        parse_operation(e["name"], e["mode"], e.get("sha"), e.get("content"))
        for e in entries
    ]
    base_entries = load_base_entries(store, base_tree)

    resolved = [
        resolve_entry(store, op) if isinstance(op, Upsert) else op
        for op in operations
    ]
    merged = merge_entries(base_entries, resolved)

    sha = store.materialize_tree(merged.values())
    logger.info(f"Wrote tree {sha[:8]} with {len(merged)} entries to repo {store.repo_id}")
    return sha


def _walk(store: GitObjectStore, tree_sha: str, prefix: str = ""):
    """Yield (path, entry) pairs depth-first, trees before their contents."""
    tree = store.get_tree(tree_sha)
    for entry in store.list_entries(tree):
        path = f"{prefix}{entry.name}"
        yield path, entry
        if entry.mode is EntryMode.TREE:
            yield from _walk(store, entry.sha, prefix=f"{path}/")


def get_tree_by_sha(
    store: GitObjectStore,
    sha: str,
    page: int = 1,
    per_page: int = 0,
    recursive: bool = False,
    max_per_page: int = 1000,
    api_url: str = "",
) -> dict:
    """
    List the entries of a tree, one page at a time.

    Returns a dict shaped like GitTreeResponse. 'truncated' is true when more
    entries follow the returned page.
    """
    tree = store.get_tree(sha)
    tree_sha = tree.id.decode("ascii")

    if recursive:
        listing = list(_walk(store, tree_sha))
    else:
        listing = [(entry.name, entry) for entry in store.list_entries(tree)]

    if per_page <= 0 or per_page > max_per_page:
        per_page = max_per_page
    if page <= 0:
        page = 1

    start = per_page * (page - 1)
    end = min(start + per_page, len(listing))

    entries = []
    for path, entry in listing[start:end]:
        is_tree = entry.mode is EntryMode.TREE
        is_blob = entry.mode.object_type == "blob"
        entries.append({
            "path": path,
            "mode": entry.mode.value,
            "type": entry.mode.object_type,
            "size": store.object_size(entry.sha) if is_blob else 0,
            "sha": entry.sha,
            "url": f"{api_url}/git/{'trees' if is_tree else 'blobs'}/{entry.sha}",
        })

    return {
        "sha": tree_sha,
        "url": f"{api_url}/git/trees/{tree_sha}",
        "tree": entries,
        "truncated": end < len(listing),
        "page": page,
        "total_count": len(listing),
    }

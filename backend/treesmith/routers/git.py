"""
Git object endpoints: trees, commits and blobs of a repository.

POST /api/repos/{repo_id}/git/trees    write a tree from a base tree and entries
POST /api/repos/{repo_id}/git/commits  create a commit of an existing tree
GET  /api/repos/{repo_id}/git/trees/{sha}, commits/{sha}, blobs/{sha}
"""
import base64
import logging

from fastapi import APIRouter, Depends, HTTPException, Query, Request
from sqlalchemy.ext.asyncio import AsyncSession

from treesmith.config import Settings, get_settings
from treesmith.database import get_db
from treesmith.dependencies import (
    get_acting_user,
    get_repo_or_404,
    get_signer,
    get_verifier,
    get_writable_repo,
)
from treesmith.models import Repo
from treesmith.schemas import (
    CommitRead,
    CreateCommitOptions,
    CreateCommitResponse,
    GitBlobResponse,
    GitTreeResponse,
    GitWriteTreeOptions,
    GitWriteTreeResponse,
)
from treesmith.services.commit_builder import CommitTreeOptions, commit_tree, read_commit_info
from treesmith.services.entries import is_valid_sha
from treesmith.services.errors import GitObjectError, MissingObject
from treesmith.services.identity import Account, IdentityHint, resolve_identities
from treesmith.services.object_store import GitObjectStore
from treesmith.services.repo_manager import GitRepoManager, get_repo_manager
from treesmith.services.signing import SigningPolicy, server_signer_from_settings
from treesmith.services.tree_writer import get_tree_by_sha, write_tree
from treesmith.services.verification import resolve_verification

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/repos/{repo_id}/git", tags=["git"])


def open_store(repo: Repo, repo_manager: GitRepoManager) -> GitObjectStore:
    store = repo_manager.open_object_store(repo.id)
    if store is None:
        logger.error(f"Repo {repo.id} has a record but no git storage")
        raise HTTPException(status_code=404, detail="Repository storage not found")
    return store


def to_http_error(repo: Repo, e: GitObjectError) -> HTTPException:
    if e.status_code >= 500:
        logger.error(f"Git object failure in repo {repo.id}: {e.message}")
    return HTTPException(status_code=e.status_code, detail=e.message)


def api_url(request: Request, repo: Repo) -> str:
    return str(request.base_url).rstrip("/") + repo.api_path


def _hint(identity) -> IdentityHint | None:
    if identity is None:
        return None
    return IdentityHint(name=identity.name, email=identity.email)


@router.post("/trees", response_model=GitWriteTreeResponse, status_code=201)
async def create_tree(
    opts: GitWriteTreeOptions,
    request: Request,
    repo: Repo = Depends(get_writable_repo),
    repo_manager: GitRepoManager = Depends(get_repo_manager),
):
    """Write a tree from an optional base tree overlaid with the given entries."""
    entries = [entry.model_dump() for entry in opts.tree]
    with open_store(repo, repo_manager) as store:
        try:
            sha = write_tree(store, entries, base_tree=opts.base_tree)
        except GitObjectError as e:
            raise to_http_error(repo, e)

    return GitWriteTreeResponse(sha=sha, url=f"{api_url(request, repo)}/git/trees/{sha}")


@router.get("/trees/{sha}", response_model=GitTreeResponse)
async def get_tree(
    sha: str,
    request: Request,
    recursive: bool = False,
    page: int = Query(1, ge=1),
    per_page: int = Query(0, ge=0),
    repo: Repo = Depends(get_repo_or_404),
    repo_manager: GitRepoManager = Depends(get_repo_manager),
    settings: Settings = Depends(get_settings),
):
    with open_store(repo, repo_manager) as store:
        try:
            return get_tree_by_sha(
                store,
                sha,
                page=page,
                per_page=per_page,
                recursive=recursive,
                max_per_page=settings.trees_per_page,
                api_url=api_url(request, repo),
            )
        except MissingObject as e:
            raise HTTPException(status_code=404, detail=e.message)
        except GitObjectError as e:
            raise to_http_error(repo, e)


@router.get("/blobs/{sha}", response_model=GitBlobResponse)
async def get_blob(
    sha: str,
    request: Request,
    repo: Repo = Depends(get_repo_or_404),
    repo_manager: GitRepoManager = Depends(get_repo_manager),
):
    if not is_valid_sha(sha):
        raise HTTPException(status_code=400, detail=f"Invalid SHA hash: {sha}")

    sha = sha.lower()
    with open_store(repo, repo_manager) as store:
        try:
            data = store.read_blob(sha)
        except MissingObject as e:
            raise HTTPException(status_code=404, detail=e.message)

    return GitBlobResponse(
        sha=sha,
        url=f"{api_url(request, repo)}/git/blobs/{sha}",
        size=len(data),
        content=base64.b64encode(data).decode("ascii"),
    )


@router.post("/commits", response_model=CreateCommitResponse, status_code=201)
async def create_commit(
    opts: CreateCommitOptions,
    request: Request,
    repo: Repo = Depends(get_writable_repo),
    acting: Account = Depends(get_acting_user),
    db: AsyncSession = Depends(get_db),
    repo_manager: GitRepoManager = Depends(get_repo_manager),
    settings: Settings = Depends(get_settings),
    signer=Depends(get_signer),
    verifier=Depends(get_verifier),
):
    """
    Create a commit of an existing tree.

    The commit is stored but no ref is moved; callers update branches
    themselves.
    """
    author, committer = resolve_identities(_hint(opts.author), _hint(opts.committer), acting)
    policy = SigningPolicy.from_settings(settings, repo.trust_model)
    dates = opts.dates
    options = CommitTreeOptions(
        parents=opts.parents,
        author_date=dates.author if dates else None,
        committer_date=dates.committer if dates else None,
    )

    with open_store(repo, repo_manager) as store:
        try:
            result = commit_tree(
                store,
                author,
                committer,
                opts.tree,
                opts.message,
                signoff=opts.signoff,
                options=options,
                policy=policy,
                signer=signer,
                verifier=verifier,
            )
        except GitObjectError as e:
            raise to_http_error(repo, e)

    verification = await resolve_verification(db, result.check, policy.server_signer)
    return CreateCommitResponse(
        url=f"{api_url(request, repo)}/git/commits/{result.sha}",
        sha=result.sha,
        verification=verification,
    )


@router.get("/commits/{sha}", response_model=CommitRead)
async def get_commit(
    sha: str,
    request: Request,
    repo: Repo = Depends(get_repo_or_404),
    db: AsyncSession = Depends(get_db),
    repo_manager: GitRepoManager = Depends(get_repo_manager),
    settings: Settings = Depends(get_settings),
    verifier=Depends(get_verifier),
):
    """Get a commit by sha, branch or tag name."""
    with open_store(repo, repo_manager) as store:
        commit_sha = sha.lower() if is_valid_sha(sha) else store.resolve_ref(sha)
        if commit_sha is None:
            raise HTTPException(status_code=404, detail=f"sha does not exist [sha: {sha}]")
        try:
            info, check = read_commit_info(store, commit_sha, verifier)
        except MissingObject as e:
            raise HTTPException(status_code=404, detail=e.message)

    base = f"{api_url(request, repo)}/git"
    verification = await resolve_verification(db, check, server_signer_from_settings(settings))
    return CommitRead(
        url=f"{base}/commits/{info['sha']}",
        sha=info["sha"],
        author=info["author"],
        committer=info["committer"],
        message=info["message"],
        tree={"url": f"{base}/trees/{info['tree']}", "sha": info["tree"]},
        parents=[{"url": f"{base}/commits/{p}", "sha": p} for p in info["parents"]],
        verification=verification,
    )

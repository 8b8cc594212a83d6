"""
FastAPI dependencies shared by the routers.

Everything a request handler needs from process-wide state comes through
here, so tests can swap it with app.dependency_overrides.
"""
from fastapi import Depends, Header, HTTPException, Request
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from treesmith.config import Settings, get_settings
from treesmith.database import get_db
from treesmith.models import Repo
from treesmith.services.accounts import BoundedCache, get_account
from treesmith.services.gpg import GPGSigner, GPGVerifier
from treesmith.services.identity import Account


def get_signer(settings: Settings = Depends(get_settings)) -> GPGSigner:
    return GPGSigner(program=settings.gpg_program)


def get_verifier(settings: Settings = Depends(get_settings)) -> GPGVerifier:
    return GPGVerifier(program=settings.gpg_program)


def get_account_cache(request: Request) -> BoundedCache:
    return request.app.state.account_cache


async def get_acting_user(
    x_acting_user: str | None = Header(None),
    db: AsyncSession = Depends(get_db),
    cache: BoundedCache = Depends(get_account_cache),
) -> Account:
    """
    The account performing the request.

    The login name comes from the X-Acting-User header set by the
    authenticating proxy in front of the service.
    """
    if not x_acting_user:
        raise HTTPException(status_code=401, detail="Missing X-Acting-User header")
    account = await get_account(db, cache, x_acting_user)
    if account is None:
        raise HTTPException(status_code=401, detail=f"Unknown user {x_acting_user}")
    return account


async def get_repo_or_404(repo_id: str, db: AsyncSession = Depends(get_db)) -> Repo:
    result = await db.execute(select(Repo).where(Repo.id == repo_id))
    repo = result.scalar_one_or_none()
    if not repo:
        raise HTTPException(status_code=404, detail="Repo not found")
    return repo


async def get_writable_repo(repo: Repo = Depends(get_repo_or_404)) -> Repo:
    if repo.is_archived:
        raise HTTPException(status_code=403, detail="Repository is archived")
    return repo

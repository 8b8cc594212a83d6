import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from treesmith.database import get_db
from treesmith.dependencies import get_repo_or_404
from treesmith.models import Repo
from treesmith.schemas import RepoCreate, RepoRead, RepoUpdate
from treesmith.services.repo_manager import GitRepoManager, get_repo_manager

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/repos", tags=["repos"])


@router.get("", response_model=list[RepoRead])
async def list_repos(db: AsyncSession = Depends(get_db)):
    result = await db.execute(select(Repo))
    return result.scalars().all()


@router.post("", response_model=RepoRead, status_code=201)
async def create_repo(
    repo: RepoCreate,
    db: AsyncSession = Depends(get_db),
    repo_manager: GitRepoManager = Depends(get_repo_manager),
):
    """Create a repo record and initialize its bare git storage."""
    db_repo = Repo(**repo.model_dump())
    db.add(db_repo)
    await db.commit()
    await db.refresh(db_repo)

    try:
        repo_manager.create_bare_repo(db_repo.id, default_branch=db_repo.default_branch)
    except Exception as e:
        # Rollback repo creation if git init fails
        logger.error(f"Failed to initialize git storage for repo {db_repo.id}: {e}")
        await db.delete(db_repo)
        await db.commit()
        raise HTTPException(status_code=500, detail=f"Failed to initialize git repo: {e}")

    return db_repo


@router.get("/{repo_id}", response_model=RepoRead)
async def get_repo(repo: Repo = Depends(get_repo_or_404)):
    return repo


@router.patch("/{repo_id}", response_model=RepoRead)
async def update_repo(
    update: RepoUpdate,
    repo: Repo = Depends(get_repo_or_404),
    db: AsyncSession = Depends(get_db),
):
    update_data = update.model_dump(exclude_unset=True)
    for key, value in update_data.items():
        setattr(repo, key, value)

    await db.commit()
    await db.refresh(repo)
    return repo


@router.delete("/{repo_id}", status_code=204)
async def delete_repo(
    repo: Repo = Depends(get_repo_or_404),
    db: AsyncSession = Depends(get_db),
    repo_manager: GitRepoManager = Depends(get_repo_manager),
):
    # Delete the git repo storage
    repo_manager.delete_repo(repo.id)

    await db.delete(repo)
    await db.commit()

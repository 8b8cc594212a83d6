"""
Repo manager service - manages the bare repos that back the object store.
"""

import logging
import shutil
from pathlib import Path

from dulwich.repo import Repo as DulwichRepo

from treesmith.config import get_settings
from treesmith.services.object_store import GitObjectStore

logger = logging.getLogger(__name__)


class GitRepoManager:
    """Manages bare git repositories on disk."""

    def __init__(self, repos_dir: Path):
        self.repos_dir = repos_dir
        self.repos_dir.mkdir(parents=True, exist_ok=True)

    def get_repo_path(self, repo_id: str) -> Path:
        """Get the path to a bare repo."""
        return self.repos_dir / f"{repo_id}.git"

    def repo_exists(self, repo_id: str) -> bool:
        return self.get_repo_path(repo_id).exists()

    def create_bare_repo(self, repo_id: str, default_branch: str = "main") -> Path:
        """Create a new bare git repository with HEAD on default_branch."""
        repo_path = self.get_repo_path(repo_id)
        if repo_path.exists():
            raise ValueError(f"Repository {repo_id} already exists")

        # dulwich init_bare needs the directory to exist first
        repo_path.mkdir(parents=True, exist_ok=True)
        repo = DulwichRepo.init_bare(str(repo_path))
        repo.refs.set_symbolic_ref(b"HEAD", f"refs/heads/{default_branch}".encode())
        logger.info(f"Created bare repo {repo_id} at {repo_path}")
        return repo_path

    def delete_repo(self, repo_id: str) -> bool:
        repo_path = self.get_repo_path(repo_id)
        if not repo_path.exists():
            return False
        shutil.rmtree(repo_path)
        logger.info(f"Deleted bare repo {repo_id}")
        return True

    def get_repo(self, repo_id: str) -> DulwichRepo | None:
        """Get a dulwich Repo object."""
        repo_path = self.get_repo_path(repo_id)
        if not repo_path.exists():
            return None
        return DulwichRepo(str(repo_path))

    def open_object_store(self, repo_id: str) -> GitObjectStore | None:
        repo = self.get_repo(repo_id)
        if repo is None:
            return None
        return GitObjectStore(repo, repo_id=repo_id)


# Singleton instance, handed to routers through get_repo_manager()
git_repo_manager = GitRepoManager(get_settings().repos_dir)


def get_repo_manager() -> GitRepoManager:
    return git_repo_manager

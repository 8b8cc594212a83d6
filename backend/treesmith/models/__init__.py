from treesmith.models.repo import Repo
from treesmith.models.user import User, GPGKey

__all__ = [
    "Repo",
    "User",
    "GPGKey",
]

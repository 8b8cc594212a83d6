"""
Acting-user accounts and the bounded cache in front of them.
"""
import logging
from collections import OrderedDict
from typing import Callable, Generic, Hashable, TypeVar

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from treesmith.models import GPGKey, User
from treesmith.services.identity import Account

logger = logging.getLogger(__name__)

K = TypeVar("K", bound=Hashable)
V = TypeVar("V")

# Picks the key to evict from the cache's entries, oldest-used first
EvictionPolicy = Callable[["OrderedDict"], Hashable]


def evict_least_recently_used(entries: OrderedDict) -> Hashable:
    return next(iter(entries))


class BoundedCache(Generic[K, V]):
    """
    Size-bounded mapping with a pluggable eviction policy.

    Entries are kept in use order (least recent first); the policy chooses
    which key goes when a put would exceed max_size.
    """

    def __init__(self, max_size: int, policy: EvictionPolicy = evict_least_recently_used):
        if max_size <= 0:
            raise ValueError("max_size must be positive")
        self.max_size = max_size
        self.policy = policy
        self._entries: OrderedDict[K, V] = OrderedDict()

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: K) -> bool:
        return key in self._entries

    def get(self, key: K) -> V | None:
        if key not in self._entries:
            return None
        self._entries.move_to_end(key)
        return self._entries[key]

    def put(self, key: K, value: V) -> None:
        if key in self._entries:
            self._entries.move_to_end(key)
        self._entries[key] = value
        while len(self._entries) > self.max_size:
            victim = self.policy(self._entries)
            del self._entries[victim]

    def invalidate(self, key: K) -> None:
        self._entries.pop(key, None)

    def clear(self) -> None:
        self._entries.clear()


async def list_gpg_keys(db: AsyncSession, user_id: str) -> list[GPGKey]:
    result = await db.execute(select(GPGKey).where(GPGKey.owner_id == user_id))
    return list(result.scalars().all())


async def load_account(db: AsyncSession, name: str) -> Account | None:
    """Load a user by login name, then its GPG keys, into an Account."""
    result = await db.execute(select(User).where(User.name == name))
    user = result.scalar_one_or_none()
    if user is None:
        return None
    keys = await list_gpg_keys(db, user.id)
    return Account(
        id=user.id,
        name=user.name,
        email=user.email,
        full_name=user.full_name or "",
        gpg_key_ids=tuple(key.key_id for key in keys),
    )


async def get_account(db: AsyncSession, cache: BoundedCache, name: str) -> Account | None:
    account = cache.get(name)
    if account is not None:
        return account
    account = await load_account(db, name)
    if account is not None:
        cache.put(name, account)
        logger.debug(f"Cached account {name}")
    return account

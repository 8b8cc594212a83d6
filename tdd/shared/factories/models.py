"""
Model factories for creating test data.

These factories create SQLAlchemy model instances for use in tests.
Persist them through a database session in integration tests.
"""
import sys
from datetime import datetime
from pathlib import Path

import factory
from faker import Faker

# Add backend to path for imports
backend_path = Path(__file__).parent.parent.parent.parent / "backend"
sys.path.insert(0, str(backend_path))

from treesmith.models import GPGKey, Repo, User

from .base import BaseFactory, generate_key_id, generate_uuid

fake = Faker()


class RepoFactory(BaseFactory):
    """Factory for creating Repo instances."""

    class Meta:
        model = Repo

    id = factory.LazyFunction(generate_uuid)
    name = factory.LazyFunction(lambda: fake.word().capitalize() + "Project")
    default_branch = "main"
    trust_model = "default"
    is_archived = False
    created_at = factory.LazyFunction(datetime.utcnow)

    class Params:
        """Parameters for creating repos in specific states."""

        archived = factory.Trait(
            is_archived=True,
        )
        committer_trust = factory.Trait(
            trust_model="committer",
        )


class UserFactory(BaseFactory):
    """Factory for creating User instances."""

    class Meta:
        model = User

    id = factory.LazyFunction(generate_uuid)
    name = factory.Sequence(lambda n: f"user{n}")
    full_name = factory.LazyFunction(fake.name)
    email = factory.LazyAttribute(lambda o: f"{o.name}@example.com")
    created_at = factory.LazyFunction(datetime.utcnow)


class GPGKeyFactory(BaseFactory):
    """Factory for creating GPGKey instances. Pass owner_id."""

    class Meta:
        model = GPGKey

    id = factory.LazyFunction(generate_uuid)
    owner_id = factory.LazyFunction(generate_uuid)
    key_id = factory.LazyFunction(generate_key_id)
    verified = True
    created_at = factory.LazyFunction(datetime.utcnow)

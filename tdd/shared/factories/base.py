"""
Base factory classes and utilities.

This module provides the foundation for creating test data factories
using factory_boy with SQLAlchemy models.
"""
from uuid import uuid4

import factory
from faker import Faker

fake = Faker()


class BaseFactory(factory.Factory):
    """Base factory for all model factories."""

    class Meta:
        abstract = True

    @classmethod
    def _create(cls, model_class, *args, **kwargs):
        """Override create to handle SQLAlchemy models."""
        return model_class(*args, **kwargs)


def generate_uuid() -> str:
    """Generate a UUID string for use as an ID."""
    return str(uuid4())


def generate_key_id() -> str:
    """Generate a 16 hex digit long GPG key id."""
    return fake.hexify(text="^" * 16, upper=True)

from datetime import datetime
from pydantic import BaseModel, field_validator

from treesmith.services.signing import TrustModel


def _check_trust_model(v: str | None) -> str | None:
    if v is not None:
        TrustModel(v)
    return v


class RepoBase(BaseModel):
    name: str
    default_branch: str = "main"
    trust_model: str = TrustModel.DEFAULT.value

    @field_validator("trust_model")
    @classmethod
    def validate_trust_model(cls, v):
        return _check_trust_model(v)


class RepoCreate(RepoBase):
    """Create a repo record and its bare git storage."""
    pass


class RepoUpdate(BaseModel):
    name: str | None = None
    default_branch: str | None = None
    trust_model: str | None = None
    is_archived: bool | None = None

    @field_validator("trust_model")
    @classmethod
    def validate_trust_model(cls, v):
        return _check_trust_model(v)


class RepoRead(RepoBase):
    id: str
    is_archived: bool
    created_at: datetime

    class Config:
        from_attributes = True

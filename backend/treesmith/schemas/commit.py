from datetime import datetime

from pydantic import BaseModel, Field


class CommitIdentity(BaseModel):
    name: str = Field("", max_length=100)
    email: str = Field("", max_length=254)


class CommitDateOptions(BaseModel):
    author: datetime | None = None
    committer: datetime | None = None


class CreateCommitOptions(BaseModel):
    message: str = Field(..., min_length=1)
    tree: str
    # Omitted means "on top of the current HEAD"; [] creates a root commit
    parents: list[str] | None = None
    # If only one of author/committer is given it is used for both,
    # if neither is given the acting user is used
    author: CommitIdentity | None = None
    committer: CommitIdentity | None = None
    dates: CommitDateOptions | None = None
    # Add a Signed-off-by trailer for the committer
    signoff: bool = False


class PayloadUser(BaseModel):
    name: str
    email: str
    username: str = ""


class CommitVerification(BaseModel):
    verified: bool
    reason: str
    signature: str = ""
    signer: PayloadUser | None = None
    payload: str = ""


class CreateCommitResponse(BaseModel):
    url: str
    sha: str
    verification: CommitVerification


class CommitMeta(BaseModel):
    url: str
    sha: str


class CommitUser(BaseModel):
    name: str
    email: str
    date: str


class CommitRead(BaseModel):
    url: str
    sha: str
    author: CommitUser
    committer: CommitUser
    message: str
    tree: CommitMeta
    parents: list[CommitMeta]
    verification: CommitVerification

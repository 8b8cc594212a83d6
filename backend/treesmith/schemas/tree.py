from pydantic import BaseModel, Field


class GitWriteTreeEntry(BaseModel):
    """
    A tree entry to be written.

    Provide either the sha of an existing object, the base64-encoded content
    of a new file, or neither to delete the name from the base tree.
    """
    name: str
    # 100644 file, 100755 executable, 120000 symlink, 160000 submodule, 040000 tree
    mode: str
    sha: str | None = None
    content: str | None = None


class GitWriteTreeOptions(BaseModel):
    tree: list[GitWriteTreeEntry]
    base_tree: str | None = Field(None, description="Tree whose entries are overwritten or deleted by 'tree'")


class GitWriteTreeResponse(BaseModel):
    sha: str
    url: str


class GitEntry(BaseModel):
    path: str
    mode: str
    type: str
    size: int
    sha: str
    url: str


class GitTreeResponse(BaseModel):
    sha: str
    url: str
    tree: list[GitEntry]
    truncated: bool
    page: int
    total_count: int


class GitBlobResponse(BaseModel):
    sha: str
    url: str
    size: int
    encoding: str = "base64"
    content: str

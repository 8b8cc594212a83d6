"""
Typed failures raised by the tree and commit services.

Each error carries the HTTP status the routers report it with, so the
mapping from failure kind to transport status lives in one place.
"""


class GitObjectError(Exception):
    """Base class for tree/commit construction failures."""
    status_code = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InvalidName(GitObjectError):
    """Tree entry name is empty, contains a separator, or is reserved."""

    def __init__(self, name: str):
        super().__init__(f"invalid file name {name!r}")
        self.name = name


class InvalidMode(GitObjectError):
    """Tree entry mode is not one of the recognized git modes."""
    status_code = 422

    def __init__(self, mode: str, message: str | None = None):
        super().__init__(message or f"invalid tree entry mode {mode!r}")
        self.mode = mode


class ContentNotAllowed(InvalidMode):
    """Inline content was supplied for a subtree or submodule entry."""
    status_code = 400

    def __init__(self, name: str, mode: str):
        super().__init__(
            mode,
            f"file {name} has content provided, but is not a blob, executable, or symlink",
        )
        self.name = name


class ConflictingSource(GitObjectError):
    def __init__(self, name: str):
        super().__init__(f"both content and SHA provided for {name}")
        self.name = name


class InvalidReference(GitObjectError):
    def __init__(self, sha: str):
        super().__init__(f"invalid SHA hash: {sha}")
        self.sha = sha


class InvalidContent(GitObjectError):
    def __init__(self, name: str):
        super().__init__(f"content for {name} is not valid base64")
        self.name = name


class BaseTreeNotFound(GitObjectError):
    def __init__(self, sha: str):
        super().__init__(f"sha does not exist [sha: {sha}]")
        self.sha = sha


class MissingObject(GitObjectError):
    """A referenced object does not exist in the object store."""

    def __init__(self, sha: str):
        super().__init__(f"sha does not exist [sha: {sha}]")
        self.sha = sha


class InvalidParent(GitObjectError):
    def __init__(self, sha: str):
        super().__init__(f"Invalid SHA hash: {sha}")
        self.sha = sha


class SigningError(GitObjectError):
    """Signing was required but could not be performed."""
    status_code = 500


class ObjectStoreError(GitObjectError):
    """The underlying object store failed."""
    status_code = 500

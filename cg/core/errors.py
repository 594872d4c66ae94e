"""Exception types raised by CG.

Every failure aborts the running command. The CLI turns these into a
one-line message and exit status 1.
"""


class CgError(Exception):
    """Base class for all CG errors."""


class UsageError(CgError):
    """Bad arguments supplied by the user."""


class NotARepositoryError(CgError):
    """No repository was found in the current directory or its parents."""


class RepositoryExistsError(CgError):
    """`init` was asked to create a repository where one already exists."""


class PathError(CgError):
    """A user supplied path could not be turned into a path key."""


class OutsideRepositoryError(PathError):
    """The path resolves outside the repository working tree."""


class NotFoundError(PathError):
    """The path does not exist."""


class IndexIOError(CgError):
    """Reading or writing the staging index failed."""


class IndexLockedError(IndexIOError):
    """Another process holds the staging index lock."""


class WalkError(CgError):
    """The working tree could not be scanned."""


class EmptyStageError(CgError):
    """A commit was requested with nothing staged."""


class ObjectStoreError(CgError):
    """The object store reported a failure."""


class HashObjectError(ObjectStoreError):
    pass


class TreeBuildError(ObjectStoreError):
    pass


class CommitWriteError(ObjectStoreError):
    pass


class RefUpdateError(ObjectStoreError):
    pass


class CheckoutError(ObjectStoreError):
    pass


class BranchError(ObjectStoreError):
    pass

"""Domain errors raised by directory services."""


class StoreDirectoryError(RuntimeError):
    """Base class for failures surfaced to API callers."""


class DuplicateVote(StoreDirectoryError):
    """The (user, target) ledger row already exists."""


class SubmissionNotPending(StoreDirectoryError):
    """The submission is missing or has already left the pending state."""


class SelfVote(StoreDirectoryError):
    """A proposer tried to confirm their own submission."""


class DuplicateReport(StoreDirectoryError):
    """The user already reported this store's status."""


class RecordNotFound(StoreDirectoryError):
    """A referenced store, review or submission does not exist."""


class PermissionDenied(StoreDirectoryError):
    """The acting user may not modify the record."""


class TransientIO(StoreDirectoryError):
    """The database was unreachable or the statement could not run."""

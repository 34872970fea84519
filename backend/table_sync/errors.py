class TableSyncError(Exception):
    """Base error for the table sync client. ``message`` is safe to show guests."""

    message = "Something went wrong with this table"

    def __init__(self, message: str | None = None):
        if message is not None:
            self.message = message
        super().__init__(self.message)


class InvalidIdentifier(TableSyncError):
    """The scanned link does not carry a usable table id or code."""

    message = "Invalid table identifier"


class TableNotFound(TableSyncError):
    """No table matches the identifier. The guest has to scan again."""

    message = "Table not found"


class TransientFailure(TableSyncError):
    """The backing store could not be reached or answered with an error."""

    message = "Could not reach the restaurant service"


class WriteFailure(TableSyncError):
    """A waiter call did not persist. Safe to retry."""

    message = "Could not call a waiter, please try again"

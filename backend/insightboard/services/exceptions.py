"""Custom exceptions for the insight query service."""


class QueryFailure(Exception):
    """Building or executing a query against the store failed.

    Every failure cause (store unreachable, bad query shape, unexpected
    result) is reported the same way.
    """

    def __init__(self, message: str, operation: str | None = None):
        super().__init__(message)
        self.message = message
        self.operation = operation

"""Database-specific exceptions shared by the platform and tenant engines."""


class DatabaseError(Exception):
    """Base exception for database operations."""

    pass


class DatabaseConnectionError(DatabaseError):
    """Raised when a database connection cannot be opened.

    Transient: nothing is cached after this failure, so the next request
    retries from scratch.
    """

    def __init__(self, message: str, database: str | None = None):
        super().__init__(message)
        self.database = database

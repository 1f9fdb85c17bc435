"""Exceptions shared by every bounded context."""


class ConfigurationError(Exception):
    """Raised when a required deployment secret or setting is missing.

    This is an operator-level failure: it is never retried and must be
    reported separately from end-user errors.
    """

    pass

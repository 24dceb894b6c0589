"""Custom exceptions for mongoqs.

Parsing request input never raises: disallowed or malformed fields are
dropped from the produced filter. The exceptions below cover the one place
where a hard failure is expected, which is building a parser from invalid
options.
"""

from typing import Any, Dict


class MongoQSError(Exception):
    """Base exception for all mongoqs errors.

    Keyword arguments are kept in `details` and appended to the message:

        >>> str(InvalidConfigError("Invalid parser options", errors=["custom.foo: ..."]))
        "Invalid parser options (errors=['custom.foo: ...'])"
    """

    def __init__(self, message: str = "", **details: Any) -> None:
        self.message = message
        self.details: Dict[str, Any] = details
        super().__init__(message)

    def __str__(self) -> str:
        if not self.details:
            return self.message
        context = ", ".join(f"{k}={v!r}" for k, v in self.details.items())
        return f"{self.message} ({context})" if self.message else context


class ConfigurationError(MongoQSError):
    """Raised when parser configuration is invalid or missing."""


class InvalidConfigError(ConfigurationError):
    """Raised by `MongoQS(...)` when options do not validate.

    `details["errors"]` lists the failing options as "location: reason".
    """

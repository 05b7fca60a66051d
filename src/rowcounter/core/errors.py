"""Row counter error hierarchy."""

from __future__ import annotations

from typing import Any


class RowCounterError(Exception):
    """Base error for all probe exceptions."""

    def __init__(
        self,
        message: str,
        *,
        retryable: bool = False,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.retryable = retryable
        self.details: dict[str, Any] = details or {}

    def __repr__(self) -> str:
        return f"{type(self).__name__}({str(self)!r}, retryable={self.retryable!r})"


class ConfigError(RowCounterError):
    """Missing or invalid configuration; the invocation aborts before fetching."""

    def __init__(self, message: str, *, key: str | None = None, **kwargs: Any) -> None:
        super().__init__(message, retryable=False, **kwargs)
        self.key = key


class FetchError(RowCounterError):
    """Report retrieval failed."""

    def __init__(self, message: str, *, url: str | None = None, retryable: bool = True, **kwargs: Any) -> None:
        super().__init__(message, retryable=retryable, **kwargs)
        self.url = url


class FetchTimeoutError(FetchError):
    """The report server did not answer within the timeout."""


class TransientError(FetchError):
    """Network or IO failure; the scheduler may retry on its next interval."""


class RemoteError(FetchError):
    """The report server answered with a non-2xx status."""

    def __init__(self, message: str, *, status_code: int, **kwargs: Any) -> None:
        kwargs.setdefault("retryable", status_code == 429 or status_code >= 500)
        super().__init__(message, **kwargs)
        self.status_code = status_code


class ParseError(RowCounterError):
    """The report body is empty or not well-formed XML."""

    def __init__(self, message: str, **kwargs: Any) -> None:
        super().__init__(message, retryable=False, **kwargs)

"""Errors raised by the platform and ownership-file cache clients."""

from __future__ import annotations


class PlatformAPIError(RuntimeError):
    """Raised when the hosting platform or the file cache fails a request."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        """Initialise with a message and optional HTTP status code."""
        self.status_code = status_code
        super().__init__(message)

    @classmethod
    def http_error(cls, operation: str, status_code: int) -> PlatformAPIError:
        """Return an error for non-2xx HTTP responses."""
        return cls(f"{operation} failed with HTTP {status_code}", status_code=status_code)

    @classmethod
    def transport_error(cls, operation: str, exc: BaseException) -> PlatformAPIError:
        """Return an error for requests that never produced a response."""
        return cls(f"{operation} failed: {exc}")


class PlatformResponseShapeError(RuntimeError):
    """Raised when a response body does not match the expected schema."""

    @classmethod
    def undecodable(cls, operation: str, detail: object) -> PlatformResponseShapeError:
        """Return an error for a response that could not be decoded."""
        return cls(f"{operation} returned an unexpected payload: {detail}")


class PlatformConfigError(RuntimeError):
    """Raised when client settings are missing or invalid."""

    @classmethod
    def missing_setting(cls, env_var: str) -> PlatformConfigError:
        """Return an error when a required environment variable is unset."""
        return cls(f"{env_var} is required")

    @classmethod
    def empty_token(cls) -> PlatformConfigError:
        """Return an error when the provided token is empty."""
        return cls("Platform access token must be non-empty")

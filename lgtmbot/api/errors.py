"""Domain exceptions and Falcon error handlers for the webhook API.

Usage
-----
Register error handlers on the Falcon app::

    app.add_error_handler(InvalidInputError, handle_invalid_input)
    app.add_error_handler(ConfigNotFoundError, handle_config_not_found)
    app.add_error_handler(PlatformAPIError, handle_platform_failure)

"""

from __future__ import annotations

import typing as typ

import falcon

if typ.TYPE_CHECKING:
    from falcon import Request, Response

    from lgtmbot.config import ConfigNotFoundError
    from lgtmbot.platform.errors import PlatformAPIError, PlatformResponseShapeError

__all__ = [
    "InvalidInputError",
    "handle_config_not_found",
    "handle_invalid_input",
    "handle_platform_failure",
]


class InvalidInputError(Exception):
    """Raised for webhook deliveries that should map to HTTP 400.

    Attributes
    ----------
    reason
        Human-readable description of the validation failure.

    """

    def __init__(self, reason: str) -> None:
        """Initialize with a validation reason."""
        self.reason = reason
        super().__init__(reason)


def handle_invalid_input(
    _req: Request,
    resp: Response,
    ex: InvalidInputError,
    _params: dict[str, typ.Any],
) -> None:
    """Map ``InvalidInputError`` to an HTTP 400 JSON response."""
    resp.status = falcon.HTTP_400
    resp.media = {"title": "Invalid input", "description": ex.reason}


def handle_config_not_found(
    _req: Request,
    resp: Response,
    ex: ConfigNotFoundError,
    _params: dict[str, typ.Any],
) -> None:
    """Map ``ConfigNotFoundError`` to an HTTP 404 JSON response."""
    resp.status = falcon.HTTP_404
    resp.media = {"title": "Repository not configured", "description": str(ex)}


def handle_platform_failure(
    _req: Request,
    resp: Response,
    ex: PlatformAPIError | PlatformResponseShapeError,
    _params: dict[str, typ.Any],
) -> None:
    """Map platform failures to HTTP 502 so the delivery can be retried.

    Parameters
    ----------
    _req
        Falcon request (unused).
    resp
        Falcon response whose status and media are set.
    ex
        The platform error that aborted the event.
    _params
        URI template parameters (unused).

    """
    resp.status = falcon.HTTP_502
    resp.media = {"title": "Platform request failed", "description": str(ex)}

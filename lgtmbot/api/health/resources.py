"""Liveness and readiness resources.

Both are stateless and registered whether or not the review dispatcher is
wired in.

Usage
-----
Register health endpoints on the Falcon app::

    app.add_route("/health", HealthResource())
    app.add_route("/ready", ReadyResource())

"""

from __future__ import annotations

import typing as typ
from http import HTTPStatus

if typ.TYPE_CHECKING:
    from falcon import Request, Response

__all__ = ["HealthResource", "ReadyResource"]


class HealthResource:
    """Liveness probe resource returning ``{"status": "ok"}``."""

    def on_get(self, _req: Request, resp: Response) -> None:
        """Handle GET /health requests."""
        resp.media = {"status": "ok"}
        resp.status = HTTPStatus.OK


class ReadyResource:
    """Readiness probe resource.

    Answers ``{"status": "ready"}`` once the dispatcher is wired in, and
    ``503`` with ``{"status": "unconfigured"}`` in health-only mode so the
    pod is kept out of webhook traffic.
    """

    def __init__(self, *, ready: bool = True) -> None:
        """Record whether webhook handling is available."""
        self._ready = ready

    def on_get(self, _req: Request, resp: Response) -> None:
        """Handle GET /ready requests."""
        if not self._ready:
            resp.media = {"status": "unconfigured"}
            resp.status = HTTPStatus.SERVICE_UNAVAILABLE
            return
        resp.media = {"status": "ready"}
        resp.status = HTTPStatus.OK

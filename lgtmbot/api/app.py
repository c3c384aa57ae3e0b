"""Application factory for the lgtmbot Falcon WSGI application.

Usage
-----
Create a health-only app::

    app = create_app()

Create an app that handles webhooks::

    from lgtmbot.api.app import AppDependencies, create_app

    app = create_app(AppDependencies(dispatcher=dispatcher))

"""

from __future__ import annotations

import dataclasses as dc
import typing as typ

import falcon

from lgtmbot.api.errors import (
    InvalidInputError,
    handle_config_not_found,
    handle_invalid_input,
    handle_platform_failure,
)
from lgtmbot.api.health.resources import HealthResource, ReadyResource
from lgtmbot.config import ConfigNotFoundError
from lgtmbot.platform.errors import PlatformAPIError, PlatformResponseShapeError

if typ.TYPE_CHECKING:
    from lgtmbot.review import ReviewDispatcher

__all__ = ["AppDependencies", "create_app"]


@dc.dataclass(frozen=True, slots=True)
class AppDependencies:
    """Dependencies for the Falcon application.

    Attributes
    ----------
    dispatcher
        Review dispatcher that handles decoded webhook events. When ``None``
        only the health endpoints are registered.

    """

    dispatcher: ReviewDispatcher | None = None


def create_app(dependencies: AppDependencies | None = None) -> falcon.App:
    """Create and configure the Falcon WSGI application.

    Parameters
    ----------
    dependencies
        Optional application dependencies. Without a dispatcher the app only
        serves ``/health`` and ``/ready``.

    Returns
    -------
    falcon.App
        Configured Falcon WSGI application.

    """
    dispatcher = dependencies.dispatcher if dependencies is not None else None

    app = falcon.App()
    app.add_route("/health", HealthResource())
    app.add_route("/ready", ReadyResource(ready=dispatcher is not None))

    if dispatcher is not None:
        from lgtmbot.api.resources import WebhookResource

        app.add_route("/webhook", WebhookResource(dispatcher))

    app.add_error_handler(InvalidInputError, handle_invalid_input)
    app.add_error_handler(ConfigNotFoundError, handle_config_not_found)
    app.add_error_handler(
        (PlatformAPIError, PlatformResponseShapeError), handle_platform_failure
    )

    return app

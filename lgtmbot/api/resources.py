"""Webhook resource that feeds deliveries to the review dispatcher."""

from __future__ import annotations

import typing as typ
from http import HTTPStatus

from .webhooks import EVENT_HEADER, decode_webhook

if typ.TYPE_CHECKING:
    from falcon import Request, Response

    from lgtmbot.review import ReviewDispatcher

__all__ = ["WebhookResource"]


class WebhookResource:
    """Handle ``POST /webhook`` deliveries from the platform.

    Deliveries the bot does not act on answer ``202`` with
    ``{"status": "ignored"}``. Handled deliveries answer ``200`` with the
    outcome. Errors are mapped by the handlers in :mod:`lgtmbot.api.errors`.
    """

    def __init__(self, dispatcher: ReviewDispatcher) -> None:
        """Bind the resource to the review dispatcher."""
        self._dispatcher = dispatcher

    def on_post(self, req: Request, resp: Response) -> None:
        """Decode the delivery and dispatch it."""
        body = req.bounded_stream.read()
        event = decode_webhook(req.get_header(EVENT_HEADER), body)
        if event is None:
            resp.status = HTTPStatus.ACCEPTED
            resp.media = {"status": "ignored"}
            return

        outcome = self._dispatcher.dispatch(event)
        resp.status = HTTPStatus.OK
        resp.media = {"status": "handled", "outcome": str(outcome)}

"""Route review events to the label state manager.

Events arrive as one of two variants. The dispatcher resolves the
repository's configuration first (a missing configuration aborts the event
before any decision is taken), then hands the variant to the matching
:class:`ReviewService` operation.
"""

from __future__ import annotations

import typing as typ

from lgtmbot.config import ConfigNotFoundError

from .commands import ReviewCommand, classify_comment
from .models import BranchUpdateEvent, CommentEvent, ReviewOutcome
from .observability import ReviewEventLogger

if typ.TYPE_CHECKING:
    from lgtmbot.config import BotConfig, Configuration

    from .models import PullRequestContext, ReviewEvent
    from .service import ReviewService


class ReviewDispatcher:
    """Dispatch comment and branch-update events."""

    def __init__(
        self,
        configuration: Configuration,
        service: ReviewService,
        *,
        event_logger: ReviewEventLogger | None = None,
    ) -> None:
        """Bind the dispatcher to loaded configuration and the review service."""
        self._configuration = configuration
        self._service = service
        self._event_logger = event_logger or ReviewEventLogger()

    def dispatch(self, event: ReviewEvent) -> ReviewOutcome:
        """Handle ``event`` and return what happened to the pull request.

        Raises
        ------
        ConfigNotFoundError
            If no configuration item covers the event's repository.
        PlatformAPIError
            If a platform or cache call fails; the event is aborted.

        """
        match event:
            case CommentEvent():
                kind = "comment"
            case BranchUpdateEvent():
                kind = "branch_update"
            case _:
                typ.assert_never(event)

        pr = event.pull_request
        try:
            config = self._config_for(pr)
            outcome = self._handle(event, config)
        except Exception as exc:
            self._event_logger.log_event_failed(
                pr_ref=pr.ref, event_kind=kind, error=exc
            )
            raise

        if outcome is ReviewOutcome.IGNORED:
            self._event_logger.log_event_skipped(
                pr_ref=pr.ref, event_kind=kind, reason="no review command"
            )
        else:
            self._event_logger.log_event_handled(
                pr_ref=pr.ref, event_kind=kind, outcome=outcome
            )
        return outcome

    def _config_for(self, pr: PullRequestContext) -> BotConfig:
        config = self._configuration.config_for(pr.org, pr.repo)
        if config is None:
            raise ConfigNotFoundError(pr.org, pr.repo)
        return config

    def _handle(self, event: ReviewEvent, config: BotConfig) -> ReviewOutcome:
        match event:
            case CommentEvent(is_open=False):
                return ReviewOutcome.IGNORED
            case CommentEvent():
                return self._handle_comment(event, config)
            case BranchUpdateEvent():
                return self._service.clear_on_source_change(event, config)

    def _handle_comment(self, event: CommentEvent, config: BotConfig) -> ReviewOutcome:
        match classify_comment(event.body):
            case ReviewCommand.ADD:
                return self._service.add_lgtm(event, config)
            case ReviewCommand.REMOVE:
                return self._service.remove_lgtm(event, config)
            case ReviewCommand.NONE:
                return ReviewOutcome.IGNORED

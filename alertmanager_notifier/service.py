"""Fan a single evaluation out to every configured notifier."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Iterable

from . import config
from .models.evaluation import ALERT_STATE_ALERTING, EvalContext, EvalMatch, Rule
from .notifiers import Notifier

logger = logging.getLogger(__name__)

TEST_RULE_NAME = "Test notification"
TEST_RULE_MESSAGE = "Someone is testing the alert notification."


def build_test_context(app_url: str | None = None) -> EvalContext:
    now = datetime.now(timezone.utc)
    return EvalContext(
        rule=Rule(
            name=TEST_RULE_NAME,
            message=TEST_RULE_MESSAGE,
            state=ALERT_STATE_ALERTING,
        ),
        start_time=now,
        end_time=now,
        eval_matches=(
            EvalMatch(metric="High value", value=100.0),
            EvalMatch(metric="Higher Value", value=200.0),
        ),
        rule_url=app_url if app_url is not None else config.APP_URL,
        is_test_run=True,
    )


class NotificationService:
    def __init__(self, notifiers: Iterable[Notifier]) -> None:
        self.notifiers = list(notifiers)

    async def send_notifications(
        self, context: EvalContext
    ) -> list[tuple[str, Exception | None]]:
        """Send ``context`` to each notifier that wants it.

        Returns:
            ``(notifier name, error or None)`` per notifier that was tried.
            Errors are logged here and never raised.
        """
        results: list[tuple[str, Exception | None]] = []
        for notifier in self.notifiers:
            name = notifier.base.name
            if not notifier.should_notify(context):
                logger.debug("Notifier %s skipped rule %s", name, context.rule.name)
                continue
            try:
                await notifier.notify(context)
            except Exception as exc:
                logger.exception(
                    "Notifier %s failed for rule %s", name, context.rule.name
                )
                results.append((name, exc))
                continue
            results.append((name, None))
        return results

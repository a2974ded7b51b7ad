"""Shared test fixtures and dummy classes."""

from __future__ import annotations

from datetime import datetime, timezone

from alertmanager_notifier.models.evaluation import EvalContext, EvalMatch, Rule

START = datetime(2024, 3, 1, 12, 0, 0, tzinfo=timezone.utc)
END = datetime(2024, 3, 1, 12, 5, 30, tzinfo=timezone.utc)


def make_context(
    state: str = "alerting",
    message: str = "",
    matches: tuple[EvalMatch, ...] = (),
    rule_url: str | None = "http://grafana.local/d/abc?panelId=2",
    name: str = "test_alert",
) -> EvalContext:
    return EvalContext(
        rule=Rule(name=name, message=message, state=state),
        start_time=START,
        end_time=END,
        eval_matches=matches,
        rule_url=rule_url,
    )


class DummyResponse:
    """Dummy HTTP response for testing."""

    def __init__(self, data: object, status: int = 200, text: str = "") -> None:
        self._data = data
        self.status_code = status
        self.text = text or str(data)
        self.ok = 200 <= status < 300

    def json(self) -> object:
        return self._data


class RecordingSender:
    """Async webhook sender that keeps every command it is given."""

    def __init__(self, error: Exception | None = None) -> None:
        self.commands: list[object] = []
        self.error = error

    async def __call__(self, cmd) -> None:
        self.commands.append(cmd)
        if self.error is not None:
            raise self.error

"""Evaluation snapshot dataclasses consumed by the payload compiler."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Literal

AlertStateType = Literal["alerting", "ok", "no_data", "paused", "pending", "unknown"]

ALERT_STATE_ALERTING: AlertStateType = "alerting"
ALERT_STATE_OK: AlertStateType = "ok"

ALERT_STATES: tuple[str, ...] = (
    "alerting",
    "ok",
    "no_data",
    "paused",
    "pending",
    "unknown",
)


class RuleUrlError(LookupError):
    """Raised when the rule URL of an evaluation cannot be resolved."""


@dataclass(frozen=True)
class Rule:
    name: str
    message: str = ""
    state: str = ALERT_STATE_OK


@dataclass(frozen=True)
class EvalMatch:
    metric: str
    value: float | None = None
    tags: dict[str, str] = field(default_factory=dict)

    def format_value(self) -> str:
        # Missing values render like the engine's nullable float.
        if self.value is None:
            return "null"
        if math.isnan(self.value):
            return "NaN"
        if math.isinf(self.value):
            return "+Inf" if self.value > 0 else "-Inf"
        return f"{self.value:.3f}"


@dataclass(frozen=True)
class EvalContext:
    """One evaluation of an alert rule."""

    rule: Rule
    start_time: datetime
    end_time: datetime
    eval_matches: tuple[EvalMatch, ...] = ()
    rule_url: str | None = None
    is_test_run: bool = False

    @property
    def is_firing(self) -> bool:
        return self.rule.state == ALERT_STATE_ALERTING

    def get_rule_url(self) -> str:
        if not self.rule_url:
            raise RuleUrlError(f"No rule url for alert {self.rule.name!r}")
        return self.rule_url

    @classmethod
    def from_dict(cls, data: Any) -> "EvalContext":
        """Build a snapshot from its JSON form.

        Expected keys: ``startTime``, ``endTime`` (RFC 3339 strings),
        ``rule`` (``name``, ``message``, ``state``), ``evalMatches``
        (``metric``, ``value``, ``tags``) and optionally ``ruleUrl``.

        Raises:
            ValueError: If the snapshot is not an object, the rule name or a
                timestamp is missing, or any field has the wrong type.
        """
        data = _require_object(data, "snapshot")
        rule_data = _require_object(data.get("rule"), "rule")
        name = rule_data.get("name")
        if not isinstance(name, str) or not name:
            raise ValueError("Snapshot rule has no name")
        state = str(rule_data.get("state") or ALERT_STATE_OK).lower()
        if state not in ALERT_STATES:
            raise ValueError(f"Unknown alert state: {state}")
        rule = Rule(
            name=name,
            message=str(rule_data.get("message") or ""),
            state=state,
        )

        raw_matches = data.get("evalMatches") or []
        if not isinstance(raw_matches, list):
            raise ValueError("evalMatches must be a list")
        matches: list[EvalMatch] = []
        for index, raw in enumerate(raw_matches):
            item = _require_object(raw, f"evalMatches[{index}]")
            raw_value = item.get("value")
            try:
                value = None if raw_value is None else float(raw_value)
            except TypeError:
                raise ValueError(
                    f"evalMatches[{index}] value is not a number: {raw_value!r}"
                ) from None
            tags = _require_object(item.get("tags") or {}, f"evalMatches[{index}].tags")
            matches.append(
                EvalMatch(
                    metric=str(item.get("metric") or ""),
                    value=value,
                    tags={str(k): str(v) for k, v in tags.items()},
                )
            )

        return cls(
            rule=rule,
            start_time=_parse_time(data.get("startTime"), "startTime"),
            end_time=_parse_time(data.get("endTime"), "endTime"),
            eval_matches=tuple(matches),
            rule_url=data.get("ruleUrl") or None,
            is_test_run=bool(data.get("isTestRun", False)),
        )


def _require_object(value: Any, what: str) -> dict[str, Any]:
    if not isinstance(value, dict):
        raise ValueError(f"{what} must be a JSON object, got {type(value).__name__}")
    return value


def _parse_time(raw: Any, key: str) -> datetime:
    if not isinstance(raw, str) or not raw.strip():
        raise ValueError(f"Snapshot is missing {key}")
    return datetime.fromisoformat(raw.strip())

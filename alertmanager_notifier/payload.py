"""Alertmanager payload compilation.

Turns one evaluation snapshot into the list of alerts accepted by
``POST /api/v1/alerts``. Everything here is pure: no I/O, no shared state.
"""

from __future__ import annotations

import json
import logging
import re
from datetime import datetime, timezone
from typing import Literal, Sequence

from .models.alert import PostableAlert
from .models.evaluation import EvalContext, EvalMatch, Rule, RuleUrlError

__all__ = [
    "MODE_FAN_OUT",
    "MODE_SINGLE",
    "PAYLOAD_MODES",
    "ZERO_TIME",
    "compile_alerts",
    "format_time",
    "parse_annotations",
    "parse_labels",
    "serialize_alerts",
]

logger = logging.getLogger(__name__)

PayloadMode = Literal["fan_out", "single"]

MODE_FAN_OUT: PayloadMode = "fan_out"
MODE_SINGLE: PayloadMode = "single"
PAYLOAD_MODES: tuple[str, ...] = (MODE_FAN_OUT, MODE_SINGLE)

# endsAt value telling Alertmanager the alert is still firing.
ZERO_TIME = "0001-01-01T00:00:00Z"

# First "key":"value" pair of a line; both groups greedy.
_LABEL_RE = re.compile(r'"(.+)":"(.+)"')


def format_time(value: datetime) -> str:
    """Format a datetime as RFC 3339 in UTC with a ``Z`` suffix.

    Naive datetimes are taken to already be in UTC. Sub-second precision
    is dropped.
    """
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    value = value.astimezone(timezone.utc)
    # strftime("%Y") does not zero-pad years below 1000 on every libc.
    return f"{value.year:04d}-" + value.strftime("%m-%dT%H:%M:%SZ")


def parse_annotations(
    context: EvalContext, mode: PayloadMode = MODE_FAN_OUT
) -> dict[str, str]:
    annotations: dict[str, str] = {}
    if context.rule.message:
        annotations["description"] = context.rule.message

    if mode == MODE_SINGLE:
        formatted = "".join(
            f"{match.metric} : {match.format_value()}\n"
            for match in context.eval_matches
        )
        if formatted:
            annotations["evalMatches"] = formatted
    return annotations


def parse_labels(rule: Rule, match: EvalMatch | None = None) -> dict[str, str]:
    """Build the label set of one alert.

    ``alertname`` comes from the rule name. With a match, ``metric`` and the
    match tags are added; tags are copied last so a tag named ``alertname``
    or ``metric`` wins. Finally every message line holding a quoted
    ``"key":"value"`` pair contributes one label. With several pairs on the
    same line the greedy pattern spans them, e.g. ``"a":"b" "c":"d"`` yields
    the key ``a":"b" "c``.
    """
    labels: dict[str, str] = {"alertname": rule.name}
    if match is not None:
        labels["metric"] = match.metric
        for key, value in match.tags.items():
            labels[key] = value

    if rule.message:
        for line in rule.message.split("\n"):
            found = _LABEL_RE.search(line)
            if found:
                labels[found.group(1)] = found.group(2)
    return labels


def _build_alert(
    context: EvalContext,
    annotations: dict[str, str],
    labels: dict[str, str],
) -> PostableAlert:
    starts_at = format_time(context.start_time)
    if context.is_firing:
        ends_at = ZERO_TIME
    else:
        ends_at = format_time(context.end_time)

    try:
        generator_url: str | None = context.get_rule_url()
    except RuleUrlError as exc:
        logger.debug("Omitting generatorURL: %s", exc)
        generator_url = None

    return PostableAlert(
        starts_at=starts_at,
        ends_at=ends_at,
        annotations=annotations,
        labels=labels,
        generator_url=generator_url,
    )


def compile_alerts(
    context: EvalContext, mode: PayloadMode = MODE_FAN_OUT
) -> list[PostableAlert]:
    """Compile an evaluation snapshot into Alertmanager alerts.

    Args:
        context: The evaluation snapshot.
        mode: ``fan_out`` builds one alert per eval match, labelled with the
            match metric and tags. ``single`` builds one alert for the whole
            rule and lists the matches in an ``evalMatches`` annotation.

    Returns:
        Alerts in eval match order. Fan-out over an empty match list yields
        one whole-rule alert so that resolutions are still delivered.

    Raises:
        ValueError: If ``mode`` is unknown.
    """
    if mode not in PAYLOAD_MODES:
        raise ValueError(f"Unknown payload mode: {mode}")

    if mode == MODE_SINGLE or not context.eval_matches:
        return [
            _build_alert(
                context,
                parse_annotations(context, mode),
                parse_labels(context.rule),
            )
        ]

    annotations = parse_annotations(context, mode)
    return [
        _build_alert(context, dict(annotations), parse_labels(context.rule, match))
        for match in context.eval_matches
    ]


def serialize_alerts(alerts: Sequence[PostableAlert]) -> str:
    """Serialize alerts as the JSON array Alertmanager requires."""
    return json.dumps([alert.to_dict() for alert in alerts])

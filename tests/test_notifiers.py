"""Tests for the Alertmanager notifier and notifier registry."""

import json

import pytest

from alertmanager_notifier import notifiers
from alertmanager_notifier.models.evaluation import EvalMatch
from alertmanager_notifier.models.notification import AlertNotification
from alertmanager_notifier.webhook import WebhookError

from conftest import RecordingSender, make_context


def _model(settings: dict) -> AlertNotification:
    return AlertNotification(name="alertmanager", type="alertmanager", settings=settings)


def test_empty_settings_returns_error() -> None:
    with pytest.raises(notifiers.ValidationError, match="url"):
        notifiers.new_alertmanager_notifier(_model({}))


def test_empty_url_returns_error() -> None:
    with pytest.raises(notifiers.ValidationError):
        notifiers.new_alertmanager_notifier(_model({"url": ""}))


def test_from_settings() -> None:
    notifier = notifiers.new_alertmanager_notifier(
        _model({"url": "http://127.0.0.1:9093/"})
    )
    assert notifier.url == "http://127.0.0.1:9093/"
    assert notifier.base.name == "alertmanager"
    assert notifier.base.type == "alertmanager"


def test_mode_setting() -> None:
    notifier = notifiers.new_alertmanager_notifier(
        _model({"url": "http://am:9093", "mode": "single"})
    )
    assert notifier.mode == "single"


def test_unknown_mode_setting() -> None:
    with pytest.raises(notifiers.ValidationError, match="mode"):
        notifiers.new_alertmanager_notifier(_model({"url": "http://am", "mode": "x"}))


def test_should_notify_always() -> None:
    notifier = notifiers.new_alertmanager_notifier(_model({"url": "http://am"}))
    assert notifier.should_notify(make_context(state="ok"))
    assert notifier.should_notify(make_context(state="alerting"))


@pytest.mark.asyncio
async def test_notify_posts_alerts() -> None:
    sender = RecordingSender()
    notifier = notifiers.new_alertmanager_notifier(
        _model({"url": "http://am:9093", "mode": "fan_out"}), sender=sender
    )
    context = make_context(
        matches=(EvalMatch(metric="a", value=1.0), EvalMatch(metric="b", value=2.0))
    )

    await notifier.notify(context)

    cmd = sender.commands[0]
    assert cmd.url == "http://am:9093/api/v1/alerts"
    assert cmd.http_method == "POST"
    body = json.loads(cmd.body)
    assert [alert["labels"]["metric"] for alert in body] == ["a", "b"]


@pytest.mark.asyncio
async def test_notify_propagates_delivery_error(caplog) -> None:
    error = WebhookError("boom", status_code=500)
    notifier = notifiers.new_alertmanager_notifier(
        _model({"url": "http://am:9093"}), sender=RecordingSender(error)
    )

    with pytest.raises(WebhookError) as exc_info:
        await notifier.notify(make_context())

    assert exc_info.value is error
    assert "Failed to send alertmanager" in caplog.text


def test_build_payload_single_alert_is_array() -> None:
    notifier = notifiers.new_alertmanager_notifier(
        _model({"url": "http://am", "mode": "single"})
    )
    body = json.loads(notifier.build_payload(make_context()))
    assert isinstance(body, list)
    assert len(body) == 1


def test_registry_creates_alertmanager() -> None:
    registry = notifiers.build_registry()
    notifier = registry.create(_model({"url": "http://am"}))
    assert isinstance(notifier, notifiers.AlertmanagerNotifier)
    assert [p.type for p in registry.list_plugins()] == ["alertmanager"]


def test_registry_unknown_type() -> None:
    registry = notifiers.build_registry()
    model = AlertNotification(name="n", type="pagerduty", settings={})
    with pytest.raises(notifiers.ValidationError, match="pagerduty"):
        registry.create(model)


def test_registry_rejects_duplicate_type() -> None:
    registry = notifiers.build_registry()
    with pytest.raises(ValueError, match="already registered"):
        registry.register(notifiers.ALERTMANAGER_PLUGIN)


def test_registries_are_independent() -> None:
    assert notifiers.NotifierRegistry().list_plugins() == []
    assert notifiers.build_registry().get("alertmanager") is notifiers.ALERTMANAGER_PLUGIN

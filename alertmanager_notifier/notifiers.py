"""Notifier implementations and the registry that creates them."""

from __future__ import annotations

import logging
from typing import Awaitable, Callable, Protocol

from . import config
from .models.evaluation import EvalContext
from .models.notification import AlertNotification, NotifierBase, NotifierPlugin
from .payload import PAYLOAD_MODES, compile_alerts, serialize_alerts
from .webhook import SendWebhookSync, send_webhook

__all__ = [
    "AlertmanagerNotifier",
    "Notifier",
    "NotifierRegistry",
    "ValidationError",
    "build_registry",
    "new_alertmanager_notifier",
]

logger = logging.getLogger(__name__)

Sender = Callable[[SendWebhookSync], Awaitable[None]]


class ValidationError(ValueError):
    """Invalid notifier configuration."""

    def __init__(self, reason: str) -> None:
        super().__init__(reason)
        self.reason = reason


class Notifier(Protocol):
    base: NotifierBase

    def should_notify(self, context: EvalContext) -> bool: ...

    async def notify(self, context: EvalContext) -> None: ...


class AlertmanagerNotifier:
    """Pushes evaluation results to an Alertmanager ``/api/v1/alerts``."""

    def __init__(
        self,
        base: NotifierBase,
        url: str,
        mode: str = config.ALERT_PAYLOAD_MODE,
        sender: Sender | None = None,
    ) -> None:
        self.base = base
        self.url = url
        self.mode = mode
        self._send = sender or send_webhook
        self.log = logging.getLogger(f"{__name__}.alertmanager")

    @property
    def name(self) -> str:
        return self.base.name

    def should_notify(self, context: EvalContext) -> bool:
        # Alertmanager deduplicates on its side; resolutions must go out too.
        return True

    def build_payload(self, context: EvalContext) -> str:
        return serialize_alerts(compile_alerts(context, self.mode))

    async def notify(self, context: EvalContext) -> None:
        self.log.info("Sending alertmanager (rule=%s)", context.rule.name)
        cmd = SendWebhookSync(
            url=self.url + "/api/v1/alerts",
            http_method="POST",
            body=self.build_payload(context),
        )
        try:
            await self._send(cmd)
        except Exception as exc:
            self.log.error(
                "Failed to send alertmanager: error=%s alertmanager=%s",
                exc,
                self.name,
            )
            raise


def new_alertmanager_notifier(
    model: AlertNotification, sender: Sender | None = None
) -> AlertmanagerNotifier:
    """Create an Alertmanager notifier from its stored configuration.

    Raises:
        ValidationError: If the ``url`` setting is missing or empty, or the
            ``mode`` setting is not a known payload mode.
    """
    url = model.settings.get("url")
    if not isinstance(url, str) or not url:
        raise ValidationError("Could not find url property in settings")

    mode = model.settings.get("mode") or config.ALERT_PAYLOAD_MODE
    if mode not in PAYLOAD_MODES:
        raise ValidationError(f"Unknown payload mode {mode!r} in settings")

    return AlertmanagerNotifier(
        base=NotifierBase.from_notification(model),
        url=url,
        mode=mode,
        sender=sender,
    )


ALERTMANAGER_PLUGIN = NotifierPlugin(
    type="alertmanager",
    name="alertmanager",
    description="Sends alert to Alertmanager",
    factory=new_alertmanager_notifier,
    required_settings=("url",),
)


class NotifierRegistry:
    """Maps notifier type identifiers to their plugins."""

    def __init__(self) -> None:
        self._plugins: dict[str, NotifierPlugin] = {}

    def register(self, plugin: NotifierPlugin) -> None:
        if plugin.type in self._plugins:
            raise ValueError(f"Notifier type already registered: {plugin.type}")
        self._plugins[plugin.type] = plugin
        logger.debug("Registered notifier type: %s", plugin.type)

    def get(self, type_name: str) -> NotifierPlugin | None:
        return self._plugins.get(type_name)

    def list_plugins(self) -> list[NotifierPlugin]:
        return list(self._plugins.values())

    def create(self, model: AlertNotification) -> Notifier:
        plugin = self.get(model.type)
        if plugin is None:
            raise ValidationError(f"Unsupported notification type {model.type!r}")
        return plugin.factory(model)


def build_registry() -> NotifierRegistry:
    registry = NotifierRegistry()
    registry.register(ALERTMANAGER_PLUGIN)
    return registry

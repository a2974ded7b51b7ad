"""Notifier configuration dataclasses."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable


@dataclass(frozen=True)
class AlertNotification:
    """Stored configuration of one notification channel."""

    name: str
    type: str
    settings: dict[str, Any] = field(default_factory=dict)
    id: int = 0
    is_default: bool = False


@dataclass(frozen=True)
class NotifierBase:
    id: int
    name: str
    type: str
    is_default: bool
    settings: dict[str, Any]

    @classmethod
    def from_notification(cls, model: AlertNotification) -> "NotifierBase":
        return cls(
            id=model.id,
            name=model.name,
            type=model.type,
            is_default=model.is_default,
            settings=dict(model.settings),
        )


@dataclass(frozen=True)
class NotifierPlugin:
    type: str
    name: str
    description: str
    factory: Callable[[AlertNotification], Any]
    required_settings: tuple[str, ...] = ()

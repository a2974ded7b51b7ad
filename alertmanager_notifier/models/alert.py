"""Alertmanager v1 alert dataclass."""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping


@dataclass(frozen=True)
class PostableAlert:
    starts_at: str
    ends_at: str
    annotations: Mapping[str, str] = field(default_factory=dict)
    labels: Mapping[str, str] = field(default_factory=dict)
    generator_url: str | None = None

    def __post_init__(self) -> None:
        # Read-only views over private copies.
        object.__setattr__(
            self, "annotations", MappingProxyType(dict(self.annotations))
        )
        object.__setattr__(self, "labels", MappingProxyType(dict(self.labels)))

    def to_dict(self) -> dict[str, object]:
        out: dict[str, object] = {
            "startsAt": self.starts_at,
            "endsAt": self.ends_at,
        }
        if self.generator_url is not None:
            out["generatorURL"] = self.generator_url
        out["annotations"] = dict(self.annotations)
        out["labels"] = dict(self.labels)
        return out

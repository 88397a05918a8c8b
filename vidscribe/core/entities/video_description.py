"""Structured description of a video as returned by the AI model."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


def _as_str(name: str, value: Any) -> str:
    if value is None:
        return ""
    if not isinstance(value, str):
        raise TypeError(f"'{name}' must be a string, got {type(value).__name__}")
    return value.strip()


def _as_str_list(name: str, value: Any) -> list[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value.strip()] if value.strip() else []
    if not isinstance(value, list):
        raise TypeError(f"'{name}' must be a list of strings, got {type(value).__name__}")
    items = [_as_str(name, v) for v in value]
    return [item for item in items if item]


@dataclass
class VideoDescription:
    """Four-field description: summary, setting, key elements, event sequence."""

    summary: str = ""
    setting: str = ""
    key_elements: list[str] = field(default_factory=list)
    sequence_of_events: list[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> VideoDescription:
        """Build from the model's JSON object (camelCase or snake_case keys).

        Raises ``TypeError`` when a field has the wrong JSON type.
        """
        return cls(
            summary=_as_str("summary", data.get("summary")),
            setting=_as_str("setting", data.get("setting")),
            key_elements=_as_str_list("keyElements", data.get("keyElements", data.get("key_elements"))),
            sequence_of_events=_as_str_list(
                "sequenceOfEvents", data.get("sequenceOfEvents", data.get("sequence_of_events"))
            ),
        )

    @property
    def is_empty(self) -> bool:
        return not (self.summary or self.setting or self.key_elements or self.sequence_of_events)

    def to_dict(self) -> dict[str, Any]:
        return {
            "summary": self.summary,
            "setting": self.setting,
            "keyElements": list(self.key_elements),
            "sequenceOfEvents": list(self.sequence_of_events),
        }

    def to_plain_text(self) -> str:
        """Serialize for copy-to-clipboard."""
        elements = "\n".join(f"- {e}" for e in self.key_elements)
        events = "\n".join(f"{i}. {e}" for i, e in enumerate(self.sequence_of_events, start=1))
        return (
            f"Summary:\n{self.summary}\n\n"
            f"Setting:\n{self.setting}\n\n"
            f"Key Elements:\n{elements}\n\n"
            f"Sequence of Events:\n{events}"
        )

"""Decoded agent payloads: either raw text or a structured mapping."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Union


@dataclass(frozen=True)
class Unparsed:
    """A text payload that could not be decoded into a mapping."""

    text: str

    def as_mapping(self) -> Dict[str, Any]:
        return {"text": self.text}


@dataclass(frozen=True)
class Structured:
    """A decoded mapping payload."""

    data: Dict[str, Any] = field(default_factory=dict)

    def as_mapping(self) -> Dict[str, Any]:
        return dict(self.data)


Payload = Union[Unparsed, Structured]

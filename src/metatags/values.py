"""Raw tag values: symbolic references and presence checks."""
from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Mapping


@dataclass(frozen=True)
class Ref:
    """Points at a value normalized earlier in the same render (e.g. the title)."""

    name: str

    def __str__(self) -> str:
        return self.name


def ref(name: str) -> Ref:
    return Ref(str(name))


def is_sequence(value: Any) -> bool:
    return isinstance(value, (list, tuple))


def is_blank(value: Any) -> bool:
    if value is None or value is False:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, Mapping) or is_sequence(value):
        return len(value) == 0
    return False


def is_present(value: Any) -> bool:
    return not is_blank(value)


def stringify(value: Any) -> str:
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    return str(value)


__all__ = ["Ref", "ref", "is_blank", "is_present", "is_sequence", "stringify"]

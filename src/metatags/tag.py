"""Concrete head elements and the escaping context they render through."""
from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Mapping, Optional, Protocol, Tuple

from markupsafe import Markup, escape

from .values import is_blank, stringify

VOID_ELEMENTS = frozenset({"meta", "link"})

ATTRIBUTE_NAME_RE = re.compile(r"[A-Za-z_:][-A-Za-z0-9_:.]*")


def is_attribute_name(name: Any) -> bool:
    return isinstance(name, str) and ATTRIBUTE_NAME_RE.fullmatch(name) is not None


class RenderContext(Protocol):
    def escape(self, value: str) -> str:
        ...

    def mark_safe(self, value: str) -> str:
        ...


class MarkupContext:
    """Default context: markupsafe escaping, output wrapped in ``Markup``."""

    def escape(self, value: str) -> str:
        return str(escape(value))

    def mark_safe(self, value: str) -> Markup:
        return Markup(value)


@dataclass(frozen=True)
class TagNode:
    element: str
    attributes: Tuple[Tuple[str, Any], ...] = ()
    content: Optional[Any] = None
    # Attribute whose blank value makes the node empty; None means `content`.
    value_attribute: Optional[str] = "content"

    @classmethod
    def build(
        cls,
        element: str,
        attributes: Mapping[str, Any],
        *,
        content: Optional[Any] = None,
        value_attribute: Optional[str] = "content",
    ) -> "TagNode":
        """Names are written unescaped, so anything outside the XML name grammar raises ``ValueError``."""
        pairs = tuple((str(key), value) for key, value in attributes.items())
        for key, _value in pairs:
            if not is_attribute_name(key):
                raise ValueError(f"invalid attribute name for <{element}>: {key!r}")
        return cls(
            element=element,
            attributes=pairs,
            content=content,
            value_attribute=value_attribute,
        )

    @classmethod
    def content_tag(cls, element: str, content: Any, attributes: Mapping[str, Any]) -> "TagNode":
        return cls.build(element, attributes, content=content, value_attribute=None)

    def get(self, name: str, default: Any = None) -> Any:
        for key, value in self.attributes:
            if key == name:
                return value
        return default

    def is_empty(self) -> bool:
        if self.value_attribute is None:
            return is_blank(self.content)
        return is_blank(self.get(self.value_attribute))

    def render(self, context: RenderContext, *, open_tags: bool = False) -> str:
        attrs = "".join(
            f' {key}="{context.escape(stringify(value))}"'
            for key, value in self.attributes
            if value is not None
        )
        if self.value_attribute is None or self.element not in VOID_ELEMENTS:
            text = "" if self.content is None else context.escape(stringify(self.content))
            return f"<{self.element}{attrs}>{text}</{self.element}>"
        return f"<{self.element}{attrs}{'>' if open_tags else ' />'}"


__all__ = ["MarkupContext", "RenderContext", "TagNode", "VOID_ELEMENTS", "is_attribute_name"]

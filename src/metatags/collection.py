"""Mutable store of tag intents, drained by extraction during a render."""
from __future__ import annotations

from contextlib import contextmanager
from typing import Any, Dict, Iterator, List, Mapping, Optional, Tuple

from .config import Configuration
from .normalizer import normalize_title
from .values import is_sequence

NOINDEX_DIRECTIVES = ("noindex", "index", "nofollow", "follow")
DEFAULT_ROBOTS_NAME = "robots"


def normalize_keys(value: Any) -> Any:
    """Return ``value`` with every mapping key turned into ``str``, at any depth."""
    if isinstance(value, Mapping):
        return {str(key): normalize_keys(item) for key, item in value.items()}
    if is_sequence(value):
        return [normalize_keys(item) for item in value]
    return value


def deep_merge(base: Mapping[str, Any], override: Mapping[str, Any]) -> Dict[str, Any]:
    merged = dict(base)
    for key, value in override.items():
        current = merged.get(key)
        if isinstance(current, Mapping) and isinstance(value, Mapping):
            merged[key] = deep_merge(current, value)
        else:
            merged[key] = value
    return merged


class MetaTagsCollection:
    """Ordered tag intents for one page.

    Keys are stored as strings and ``open_graph`` is an alias for ``og``.
    ``extract`` removes what it returns, so a collection can only be rendered
    once; build a fresh one (or use ``with_defaults``) for each render.
    """

    def __init__(self, meta_tags: Optional[Mapping[str, Any]] = None, *, config: Optional[Configuration] = None) -> None:
        self.meta_tags: Dict[str, Any] = {}
        self.config = config
        if meta_tags:
            self.update(meta_tags)

    def __getitem__(self, key: str) -> Any:
        return self.meta_tags.get(str(key))

    def __setitem__(self, key: str, value: Any) -> None:
        self.meta_tags[str(key)] = normalize_keys(value)

    def __contains__(self, key: object) -> bool:
        return str(key) in self.meta_tags

    def __len__(self) -> int:
        return len(self.meta_tags)

    def __repr__(self) -> str:
        return f"MetaTagsCollection({self.meta_tags!r})"

    def update(self, meta_tags: Any = None) -> None:
        if meta_tags is None:
            return
        if hasattr(meta_tags, "to_meta_tags"):
            meta_tags = meta_tags.to_meta_tags()
        self.meta_tags = deep_merge(self.meta_tags, _normalize_open_graph(meta_tags))

    @contextmanager
    def with_defaults(self, defaults: Optional[Mapping[str, Any]] = None) -> Iterator["MetaTagsCollection"]:
        """Merge ``defaults`` under the current tags until the block exits."""
        previous = self.meta_tags
        self.meta_tags = deep_merge(_normalize_open_graph(defaults or {}), previous)
        try:
            yield self
        finally:
            self.meta_tags = previous

    def full_title(self, defaults: Optional[Mapping[str, Any]] = None) -> str:
        with self.with_defaults(defaults):
            return self.extract_full_title()

    def page_title(self, defaults: Optional[Mapping[str, Any]] = None) -> str:
        """Full title without the site name."""
        with self.with_defaults(defaults):
            self.meta_tags["site"] = None
            return self.extract_full_title()

    def delete(self, *keys: str) -> None:
        for key in keys:
            self.meta_tags.pop(str(key), None)

    def extract(self, key: str) -> Any:
        return self.meta_tags.pop(str(key), None)

    def peek_all(self) -> Dict[str, Any]:
        return self.meta_tags

    def extract_full_title(self) -> str:
        site_title = self.extract("site") or ""
        title = self._extract_title() or []
        separator = self._extract_separator()
        reverse = self.extract("reverse") is True
        return normalize_title(site_title, title, separator, reverse, self.config)

    def _extract_title(self) -> Optional[List[Any]]:
        title = self.extract("title")
        lowercase = self.extract("lowercase") is True
        if title is None or title == "" or title == []:
            return None
        parts = list(title) if is_sequence(title) else [title]
        if lowercase:
            parts = [part.lower() if isinstance(part, str) else part for part in parts]
        return parts

    def _extract_separator(self) -> str:
        if self.meta_tags.get("separator") is False:
            # A hidden separator hides the prefix and suffix as well.
            prefix = separator = suffix = ""
        else:
            prefix = self._separator_section("prefix", " ")
            separator = self._separator_section("separator", "|")
            suffix = self._separator_section("suffix", " ")
        self.delete("separator", "prefix", "suffix")
        return "".join(str(part) for part in (prefix, separator, suffix) if part is not None)

    def _separator_section(self, key: str, default: str) -> str:
        value = self.meta_tags.get(key)
        if value is False:
            return ""
        return default if value is None else value

    def extract_noindex(self) -> List[Tuple[str, str]]:
        """Robots directives as ``(meta name, content)`` pairs."""
        noindex_name, noindex_value = self._extract_noindex_attribute("noindex")
        index_name, index_value = self._extract_noindex_attribute("index")
        nofollow_name, nofollow_value = self._extract_noindex_attribute("nofollow")
        follow_name, follow_value = self._extract_noindex_attribute("follow")

        if noindex_name == follow_name and (noindex_value or follow_value):
            # noindex beats index, follow beats nofollow.
            attributes = [
                (noindex_name, noindex_value or index_value),
                (follow_name, follow_value or nofollow_value),
            ]
        else:
            attributes = [
                (index_name, index_value),
                (follow_name, follow_value),
                (noindex_name, noindex_value),
                (nofollow_name, nofollow_value),
            ]
        grouped = _group_by_name(attributes)
        self._append_noarchive(grouped)
        return list(grouped.items())

    def _extract_noindex_attribute(self, key: str) -> Tuple[str, Optional[str]]:
        value = self.extract(key)
        name = value if isinstance(value, str) and value else DEFAULT_ROBOTS_NAME
        return name, (key if _is_set(value) else None)

    def _append_noarchive(self, grouped: Dict[str, str]) -> None:
        noarchive = self.extract("noarchive")
        if not _is_set(noarchive):
            return
        name = noarchive if isinstance(noarchive, str) and noarchive else DEFAULT_ROBOTS_NAME
        grouped[name] = ", ".join(part for part in (grouped.get(name), "noarchive") if part)


def _is_set(value: Any) -> bool:
    # Only None and False switch a robots directive off; "" and 0 switch it on.
    return value is not None and value is not False


def _normalize_open_graph(meta_tags: Mapping[str, Any]) -> Dict[str, Any]:
    normalized = normalize_keys(meta_tags)
    if "open_graph" in normalized:
        normalized["og"] = normalized.pop("open_graph")
    return normalized


def _group_by_name(attributes: List[Tuple[str, Optional[str]]]) -> Dict[str, str]:
    grouped: Dict[str, List[str]] = {}
    for name, value in attributes:
        values = grouped.setdefault(name, [])
        if value:
            values.append(value)
    return {name: ", ".join(values) for name, values in grouped.items()}


__all__ = ["MetaTagsCollection", "deep_merge", "normalize_keys"]

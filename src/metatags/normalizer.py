"""Text cleanup and truncation for titles, descriptions and keywords."""
from __future__ import annotations

import re
from typing import Any, Iterable, List, Optional, Tuple

from markupsafe import Markup

from .config import Configuration, get_config
from .values import is_blank, is_sequence

_EDGES_RE = re.compile(r"^(\s*)(.*?)(\s*)$", re.DOTALL)


class UnsupportedNormalizationError(ValueError):
    """Raised when ``normalize`` is asked for a key it has no rule for."""


def strip_tags(text: str) -> str:
    return Markup(text).striptags()


def cleanup_string(value: Any, strip: bool = True) -> str:
    """Strip markup and collapse whitespace; ``strip=False`` keeps edge spacing."""
    if value is None:
        return ""
    if not isinstance(value, str):
        raise TypeError(f"expected a string, got {type(value).__name__}")
    leading, body, trailing = _EDGES_RE.match(value).groups()
    text = strip_tags(body) if body else ""
    if strip:
        return text
    return (" " if leading else "") + text + (" " if trailing else "")


def cleanup_strings(values: Any, strip: bool = True) -> List[str]:
    cleaned = (cleanup_string(value, strip=strip) for value in _flatten(values))
    return [value for value in cleaned if not is_blank(value)]


def _flatten(values: Any) -> Iterable[Any]:
    if values is None:
        return
    if not is_sequence(values):
        yield values
        return
    for value in values:
        yield from _flatten(value)


def truncate(text: str, limit: Optional[int] = None, natural_separator: str = " ") -> str:
    if not limit or limit <= 0 or len(text) <= limit:
        return text
    stop = limit
    if natural_separator:
        found = text.rfind(natural_separator, 0, limit + len(natural_separator))
        if found != -1:
            stop = found
    return text[:stop]


def truncate_array(
    parts: List[str],
    limit: Optional[int] = None,
    separator: str = "",
    natural_separator: str = " ",
) -> List[str]:
    """Keep whole parts while they fit; the first part that overflows is truncated."""
    if limit is None or limit <= 0:
        return parts
    length = 0
    result: List[str] = []
    for part in parts:
        limit_left = limit - length - (len(separator) if result else 0)
        if len(part) > limit_left:
            result.append(truncate(part, limit_left, natural_separator))
            break
        length += (len(separator) if result else 0) + len(part)
        result.append(part)
        if length + len(separator) >= limit:
            break
    return result


def normalize_title(
    site_title: Any,
    title: Any,
    separator: str,
    reverse: bool = False,
    config: Optional[Configuration] = None,
) -> str:
    if config is None:
        config = get_config()
    parts = cleanup_strings(title)
    if reverse:
        parts.reverse()
    site = cleanup_string(site_title)
    separator = cleanup_string(separator, strip=False)

    site, parts = _truncate_title(site, parts, separator, config)
    if site:
        if reverse:
            parts.append(site)
        else:
            parts.insert(0, site)
    return separator.join(parts)


def _truncate_title(
    site: str, parts: List[str], separator: str, config: Configuration
) -> Tuple[Optional[str], List[str]]:
    global_limit = config.title_limit
    if not global_limit or global_limit <= 0:
        return site, parts

    # Whichever of site title / page title is kept whole gets the full limit.
    main = parts if config.truncate_site_title_first else [site]
    main_length = sum(len(part) for part in main) + (len(main) - 1) * len(separator)
    secondary_limit = max(0, global_limit - (main_length + len(separator) if main_length > 0 else 0))
    if config.truncate_site_title_first:
        site_limit, title_limit = secondary_limit, global_limit
    else:
        site_limit, title_limit = global_limit, secondary_limit

    parts = truncate_array(parts, title_limit, separator) if title_limit > 0 else []
    site = truncate(site, site_limit) if site_limit > 0 else None
    return site, parts


def normalize_description(description: Any, config: Optional[Configuration] = None) -> str:
    if config is None:
        config = get_config()
    text = cleanup_string(description)
    if is_blank(text):
        return ""
    return truncate(text, config.description_limit)


def normalize_keywords(keywords: Any, config: Optional[Configuration] = None) -> str:
    if config is None:
        config = get_config()
    words = cleanup_strings(keywords)
    if not words:
        return ""
    if config.keywords_lowercase:
        words = [word.lower() for word in words]
    separator = cleanup_string(config.keywords_separator, strip=False)
    return separator.join(truncate_array(words, config.keywords_limit, separator))


_NORMALIZERS = {
    "description": normalize_description,
    "keywords": normalize_keywords,
}


def normalize(key: str, value: Any, config: Optional[Configuration] = None) -> str:
    try:
        normalizer = _NORMALIZERS[str(key)]
    except KeyError:
        raise UnsupportedNormalizationError(f"no normalization rule for {key!r}") from None
    return normalizer(value, config)


__all__ = [
    "UnsupportedNormalizationError",
    "cleanup_string",
    "cleanup_strings",
    "normalize",
    "normalize_description",
    "normalize_keywords",
    "normalize_title",
    "strip_tags",
    "truncate",
    "truncate_array",
]

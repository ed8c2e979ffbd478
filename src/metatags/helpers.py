"""Per-page helper used by views and templates to collect and display tags."""
from __future__ import annotations

from typing import Any, Mapping, Optional

from .collection import MetaTagsCollection
from .config import Configuration
from .renderer import Renderer
from .tag import RenderContext
from .values import is_present


class PageMeta:
    """Collects tag intents while a page is built, then renders them.

    ``display_meta_tags`` renders against a temporary merge of the defaults
    and the page's tags, so the page can be displayed more than once.
    """

    def __init__(self, meta_tags: Optional[MetaTagsCollection] = None, *, config: Optional[Configuration] = None) -> None:
        self.meta_tags = meta_tags if meta_tags is not None else MetaTagsCollection(config=config)
        self.config = config

    def set_meta_tags(self, meta_tags: Any = None, **kwargs: Any) -> None:
        self.meta_tags.update(meta_tags)
        if kwargs:
            self.meta_tags.update(kwargs)

    def title(self, title: Any = None, headline: str = "") -> str:
        """Set the page title and return the headline, or the title without site name."""
        if title is not None:
            self.meta_tags["title"] = title
        if is_present(headline):
            return headline
        return self.meta_tags.page_title()

    def keywords(self, keywords: Any) -> Any:
        self.set_meta_tags(keywords=keywords)
        return keywords

    def description(self, description: Any) -> Any:
        self.set_meta_tags(description=description)
        return description

    def noindex(self, noindex: Any = True) -> Any:
        self.set_meta_tags(noindex=noindex)
        return noindex

    def nofollow(self, nofollow: Any = True) -> Any:
        self.set_meta_tags(nofollow=nofollow)
        return nofollow

    def refresh(self, refresh: Any) -> Any:
        self.set_meta_tags(refresh=refresh)
        return refresh

    def display_meta_tags(
        self,
        defaults: Optional[Mapping[str, Any]] = None,
        context: Optional[RenderContext] = None,
    ) -> str:
        with self.meta_tags.with_defaults(defaults) as meta_tags:
            return Renderer(meta_tags, config=self.config).render(context)

    def display_title(self, defaults: Optional[Mapping[str, Any]] = None) -> str:
        return self.meta_tags.full_title(defaults)


__all__ = ["PageMeta"]

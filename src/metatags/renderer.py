"""Turn a collection of tag intents into ordered head markup."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional

from .collection import MetaTagsCollection
from .config import Configuration, get_config
from .normalizer import normalize
from .tag import MarkupContext, RenderContext, TagNode, is_attribute_name
from .values import Ref, is_blank, is_present, is_sequence

logger = logging.getLogger(__name__)

LINK_RELATIONS = ("canonical", "prev", "next", "author", "publisher")
GROUPED_PROPERTY_KEY = "og"


@dataclass(frozen=True)
class TagNaming:
    """Attribute names used for the key and the value of flattened meta tags."""

    name_key: str = "name"
    value_key: str = "content"


DEFAULT_NAMING = TagNaming()
PROPERTY_NAMING = TagNaming(name_key="property")


class Renderer:
    """Renders one collection.

    The steps run in a fixed order. Values registered in
    ``normalized_meta_tags`` by the early steps (title, description,
    keywords, links) are what ``Ref`` values inside mappings resolve to in
    the later steps; a reference to anything else resolves to nothing.
    """

    def __init__(self, meta_tags: MetaTagsCollection, *, config: Optional[Configuration] = None) -> None:
        self.meta_tags = meta_tags
        if config is None:
            config = meta_tags.config if meta_tags.config is not None else get_config()
        self.config = config
        self.normalized_meta_tags: Dict[str, Any] = {}

    def render(self, context: Optional[RenderContext] = None) -> str:
        if context is None:
            context = MarkupContext()
        tags: List[TagNode] = []

        self.render_charset(tags)
        self.render_title(tags)
        self.render_with_normalization(tags, "description")
        self.render_with_normalization(tags, "keywords")
        self.render_refresh(tags)
        self.render_noindex(tags)
        self.render_alternate(tags)
        self.render_links(tags)

        self.render_hash(tags, GROUPED_PROPERTY_KEY, PROPERTY_NAMING)
        self.render_hashes(tags)
        self.render_custom(tags)

        rendered = [
            tag.render(context, open_tags=self.config.open_meta_tags)
            for tag in tags
            if not tag.is_empty()
        ]
        logger.debug("Rendered %d of %d collected tags", len(rendered), len(tags))
        return context.mark_safe("\n".join(rendered))

    def render_charset(self, tags: List[TagNode]) -> None:
        charset = self.meta_tags.extract("charset")
        if is_present(charset):
            tags.append(TagNode.build("meta", {"charset": charset}, value_attribute="charset"))

    def render_title(self, tags: List[TagNode]) -> None:
        title = self.meta_tags.extract_full_title()
        self.normalized_meta_tags["title"] = title
        if is_present(title):
            tags.append(TagNode.content_tag("title", title, {"itemprop": "name"}))

    def render_with_normalization(self, tags: List[TagNode], name: str) -> None:
        value = normalize(name, self.meta_tags.extract(name), self.config)
        self.normalized_meta_tags[name] = value
        if is_present(value):
            tags.append(TagNode.build("meta", {"name": name, "content": value}))

    def render_refresh(self, tags: List[TagNode]) -> None:
        refresh = self.meta_tags.extract("refresh")
        if is_present(refresh):
            tags.append(TagNode.build("meta", {"http-equiv": "refresh", "content": str(refresh)}))

    def render_noindex(self, tags: List[TagNode]) -> None:
        for name, content in self.meta_tags.extract_noindex():
            if is_present(content):
                tags.append(TagNode.build("meta", {"name": name, "content": content}))

    def render_alternate(self, tags: List[TagNode]) -> None:
        alternate = self.meta_tags.extract("alternate")
        if isinstance(alternate, Mapping):
            for hreflang, href in alternate.items():
                if is_present(href):
                    tags.append(
                        TagNode.build(
                            "link",
                            {"rel": "alternate", "href": href, "hreflang": hreflang},
                            value_attribute="href",
                        )
                    )
        elif is_sequence(alternate):
            for link in alternate:
                if isinstance(link, Mapping) and is_present(link.get("href")):
                    attributes = {"rel": "alternate"}
                    for name, value in link.items():
                        if is_attribute_name(str(name)):
                            attributes[str(name)] = value
                        else:
                            logger.warning("Skipping invalid alternate link attribute %r", name)
                    tags.append(TagNode.build("link", attributes, value_attribute="href"))

    def render_links(self, tags: List[TagNode]) -> None:
        for rel in LINK_RELATIONS:
            href = self.meta_tags.extract(rel)
            if is_blank(href):
                continue
            self.normalized_meta_tags[rel] = href
            attributes = {"rel": rel, "href": href}
            if rel == "canonical":
                attributes["itemprop"] = "url"
            tags.append(TagNode.build("link", attributes, value_attribute="href"))

    def render_hash(self, tags: List[TagNode], key: str, naming: TagNaming = DEFAULT_NAMING) -> None:
        data = self.meta_tags.peek_all().get(key)
        if isinstance(data, Mapping):
            self.process_hash(tags, key, data, naming)
            self.meta_tags.extract(key)

    def render_hashes(self, tags: List[TagNode], naming: TagNaming = DEFAULT_NAMING) -> None:
        for key, data in list(self.meta_tags.peek_all().items()):
            if isinstance(data, Mapping):
                self.process_hash(tags, key, data, naming)
                self.meta_tags.extract(key)

    def render_custom(self, tags: List[TagNode]) -> None:
        for name, data in list(self.meta_tags.peek_all().items()):
            values = data if is_sequence(data) else ([] if data is None else [data])
            for value in values:
                tags.append(TagNode.build("meta", {"name": name, "content": value}))
            self.meta_tags.extract(name)

    def process_tree(self, tags: List[TagNode], key: str, value: Any, naming: TagNaming = DEFAULT_NAMING) -> None:
        if isinstance(value, Mapping):
            self.process_hash(tags, key, value, naming)
        elif is_sequence(value):
            self.process_array(tags, key, value, naming)
        else:
            self.render_tag(tags, key, value, naming)

    def process_hash(
        self, tags: List[TagNode], key: str, value: Mapping[Any, Any], naming: TagNaming = DEFAULT_NAMING
    ) -> None:
        for sub_key, sub_value in value.items():
            # "_" attaches the value to the parent key itself.
            child_key = key if str(sub_key) == "_" else f"{key}:{sub_key}"
            if isinstance(sub_value, Ref):
                sub_value = self.normalized_meta_tags.get(sub_value.name)
            self.process_tree(tags, child_key, sub_value, naming)

    def process_array(self, tags: List[TagNode], key: str, value: Any, naming: TagNaming = DEFAULT_NAMING) -> None:
        for item in value:
            self.process_tree(tags, key, item, naming)

    def render_tag(self, tags: List[TagNode], key: str, value: Any, naming: TagNaming = DEFAULT_NAMING) -> None:
        if is_blank(value):
            return
        tags.append(
            TagNode.build(
                "meta",
                {naming.name_key: str(key), naming.value_key: value},
                value_attribute=naming.value_key,
            )
        )


def render_meta_tags(
    meta_tags: Any,
    context: Optional[RenderContext] = None,
    *,
    config: Optional[Configuration] = None,
) -> str:
    """Render a mapping (or collection) of tag intents in one call."""
    if not isinstance(meta_tags, MetaTagsCollection):
        meta_tags = MetaTagsCollection(meta_tags, config=config)
    return Renderer(meta_tags, config=config).render(context)


__all__ = ["Renderer", "TagNaming", "render_meta_tags", "LINK_RELATIONS"]

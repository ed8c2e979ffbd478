"""Public API for metatags."""
from .collection import MetaTagsCollection
from .config import Configuration, configure, get_config, reset_config
from .helpers import PageMeta
from .normalizer import UnsupportedNormalizationError
from .renderer import Renderer, render_meta_tags
from .tag import MarkupContext, TagNode
from .values import Ref, ref

__all__ = [
    "Configuration",
    "MarkupContext",
    "MetaTagsCollection",
    "PageMeta",
    "Ref",
    "Renderer",
    "TagNode",
    "UnsupportedNormalizationError",
    "configure",
    "get_config",
    "ref",
    "render_meta_tags",
    "reset_config",
]

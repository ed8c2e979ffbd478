"""Jinja2 globals for setting and displaying meta tags from templates.

Templates read a :class:`~metatags.helpers.PageMeta` from a context variable
(``meta_tags`` unless ``install`` is told otherwise)::

    env = install(Environment(autoescape=True))
    env.from_string("{{ display_meta_tags({'site': 'Example'}) }}").render(meta_tags=PageMeta())
"""
from __future__ import annotations

from typing import Any, Mapping, Optional

from jinja2 import Environment, pass_context
from jinja2.runtime import Context
from markupsafe import Markup

from .helpers import PageMeta

DEFAULT_VARIABLE = "meta_tags"


def install(env: Environment, *, variable: str = DEFAULT_VARIABLE) -> Environment:
    def page_meta(context: Context) -> PageMeta:
        page = context.get(variable)
        if not isinstance(page, PageMeta):
            raise TypeError(f"template variable {variable!r} must be a PageMeta, got {type(page).__name__}")
        return page

    @pass_context
    def set_meta_tags(context: Context, meta_tags: Optional[Mapping[str, Any]] = None, **kwargs: Any) -> str:
        page_meta(context).set_meta_tags(meta_tags, **kwargs)
        return ""

    @pass_context
    def display_meta_tags(context: Context, defaults: Optional[Mapping[str, Any]] = None) -> Markup:
        return Markup(page_meta(context).display_meta_tags(defaults))

    @pass_context
    def display_title(context: Context, defaults: Optional[Mapping[str, Any]] = None) -> str:
        return page_meta(context).display_title(defaults)

    env.globals.update(
        set_meta_tags=set_meta_tags,
        display_meta_tags=display_meta_tags,
        display_title=display_title,
    )
    return env


__all__ = ["install"]

from __future__ import annotations

import sys
import unittest
from pathlib import Path

from markupsafe import Markup

TESTS_DIR = Path(__file__).resolve().parent
PROJECT_ROOT = TESTS_DIR.parent
sys.path.insert(0, str(PROJECT_ROOT / "src"))

from metatags import Configuration, MetaTagsCollection, Renderer, ref, render_meta_tags
from metatags.renderer import TagNaming


def render_lines(meta_tags: dict, **kwargs) -> list[str]:
    output = render_meta_tags(meta_tags, **kwargs)
    return output.split("\n") if output else []


class _UpperContext:
    def escape(self, value: str) -> str:
        return value.upper()

    def mark_safe(self, value: str) -> str:
        return f"[{value}]"


class RenderOrderTests(unittest.TestCase):
    def test_title_only(self) -> None:
        self.assertEqual(render_meta_tags({"title": "Home"}), '<title itemprop="name">Home</title>')

    def test_fixed_order_regardless_of_input_order(self) -> None:
        lines = render_lines(
            {
                "custom": "value",
                "twitter": {"card": "summary"},
                "og": {"type": "website"},
                "publisher": "http://x/pub",
                "author": "http://x/me",
                "next": "http://x/3",
                "prev": "http://x/1",
                "canonical": "http://x/2",
                "alternate": {"en": "http://x/en"},
                "noindex": True,
                "refresh": 5,
                "keywords": ["One", "Two"],
                "description": "About",
                "title": "Home",
                "charset": "utf-8",
            }
        )
        self.assertEqual(
            lines,
            [
                '<meta charset="utf-8" />',
                '<title itemprop="name">Home</title>',
                '<meta name="description" content="About" />',
                '<meta name="keywords" content="one, two" />',
                '<meta http-equiv="refresh" content="5" />',
                '<meta name="robots" content="noindex" />',
                '<link rel="alternate" href="http://x/en" hreflang="en" />',
                '<link rel="canonical" href="http://x/2" itemprop="url" />',
                '<link rel="prev" href="http://x/1" />',
                '<link rel="next" href="http://x/3" />',
                '<link rel="author" href="http://x/me" />',
                '<link rel="publisher" href="http://x/pub" />',
                '<meta property="og:type" content="website" />',
                '<meta name="twitter:card" content="summary" />',
                '<meta name="custom" content="value" />',
            ],
        )

    def test_empty_collection_renders_empty_string(self) -> None:
        output = render_meta_tags({})
        self.assertEqual(output, "")
        self.assertIsInstance(output, Markup)

    def test_second_render_of_drained_collection_is_empty(self) -> None:
        meta_tags = MetaTagsCollection({"title": "Home", "og": {"title": ref("title")}, "custom": "x"})
        self.assertNotEqual(Renderer(meta_tags).render(), "")
        self.assertEqual(len(meta_tags), 0)
        self.assertEqual(Renderer(meta_tags).render(), "")

    def test_custom_context_escapes_and_marks_safe(self) -> None:
        meta_tags = MetaTagsCollection({"custom": "value"})
        output = Renderer(meta_tags).render(_UpperContext())
        self.assertEqual(output, '[<meta name="CUSTOM" content="VALUE" />]')

    def test_open_meta_tags(self) -> None:
        config = Configuration(open_meta_tags=True)
        lines = render_lines({"title": "Home", "custom": "x", "canonical": "http://x/"}, config=config)
        self.assertEqual(
            lines,
            [
                '<title itemprop="name">Home</title>',
                '<link rel="canonical" href="http://x/" itemprop="url">',
                '<meta name="custom" content="x">',
            ],
        )


class SpecialTagTests(unittest.TestCase):
    def test_charset_blank_is_skipped(self) -> None:
        self.assertEqual(render_meta_tags({"charset": "  "}), "")

    def test_title_is_escaped(self) -> None:
        self.assertEqual(
            render_meta_tags({"title": 'Tom & "Jerry"'}),
            '<title itemprop="name">Tom &amp; &#34;Jerry&#34;</title>',
        )

    def test_description_is_cleaned(self) -> None:
        self.assertEqual(
            render_meta_tags({"description": "  Hello   <b>world</b> "}),
            '<meta name="description" content="Hello world" />',
        )

    def test_refresh_zero_is_rendered(self) -> None:
        self.assertEqual(render_meta_tags({"refresh": 0}), '<meta http-equiv="refresh" content="0" />')

    def test_refresh_false_is_skipped(self) -> None:
        self.assertEqual(render_meta_tags({"refresh": False}), "")

    def test_noindex_and_nofollow_are_grouped(self) -> None:
        self.assertEqual(
            render_meta_tags({"noindex": True, "nofollow": True}),
            '<meta name="robots" content="noindex, nofollow" />',
        )

    def test_noindex_for_named_bot(self) -> None:
        self.assertEqual(
            render_meta_tags({"noindex": "googlebot"}),
            '<meta name="googlebot" content="noindex" />',
        )

    def test_alternate_skips_blank_href(self) -> None:
        self.assertEqual(
            render_meta_tags({"alternate": {"en": "http://x/en", "fr": ""}}),
            '<link rel="alternate" href="http://x/en" hreflang="en" />',
        )

    def test_alternate_accepts_list_of_links(self) -> None:
        lines = render_lines(
            {
                "alternate": [
                    {"href": "http://x/de", "hreflang": "de"},
                    {"href": "http://x/feed.rss", "type": "application/rss+xml", "title": "RSS"},
                    {"href": ""},
                ]
            }
        )
        self.assertEqual(
            lines,
            [
                '<link rel="alternate" href="http://x/de" hreflang="de" />',
                '<link rel="alternate" href="http://x/feed.rss" type="application/rss+xml" title="RSS" />',
            ],
        )

    def test_alternate_drops_invalid_attribute_names(self) -> None:
        with self.assertLogs("metatags.renderer", level="WARNING"):
            html = render_meta_tags({"alternate": [{"href": "x", 'a="1" onload="alert(1)" b': "y", "title": "T"}]})
        self.assertEqual(html, '<link rel="alternate" href="x" title="T" />')
        self.assertNotIn("onload", html)

    def test_blank_links_are_not_registered(self) -> None:
        meta_tags = MetaTagsCollection({"canonical": "", "og": {"url": ref("canonical")}})
        renderer = Renderer(meta_tags)
        self.assertEqual(renderer.render(), "")
        self.assertNotIn("canonical", renderer.normalized_meta_tags)

    def test_registry_holds_normalized_values(self) -> None:
        meta_tags = MetaTagsCollection(
            {"site": "Site", "title": "Home", "keywords": "A", "next": "http://x/2"}
        )
        renderer = Renderer(meta_tags)
        renderer.render()
        self.assertEqual(
            renderer.normalized_meta_tags,
            {"title": "Site | Home", "description": "", "keywords": "a", "next": "http://x/2"},
        )


class TreeResolutionTests(unittest.TestCase):
    def test_grouped_property_with_reference_and_sentinel(self) -> None:
        lines = render_lines(
            {
                "title": "Home",
                "og": {"title": ref("title"), "image": {"_": "http://x/img.png", "width": "100"}},
            }
        )
        self.assertEqual(
            lines,
            [
                '<title itemprop="name">Home</title>',
                '<meta property="og:title" content="Home" />',
                '<meta property="og:image" content="http://x/img.png" />',
                '<meta property="og:image:width" content="100" />',
            ],
        )

    def test_open_graph_alias(self) -> None:
        self.assertEqual(
            render_meta_tags({"open_graph": {"type": "article"}}),
            '<meta property="og:type" content="article" />',
        )

    def test_reference_to_unregistered_key_is_suppressed(self) -> None:
        lines = render_lines(
            {"og": {"site_name": ref("site"), "description": ref("description"), "type": "website"}}
        )
        self.assertEqual(lines, ['<meta property="og:type" content="website" />'])

    def test_references_resolve_to_links(self) -> None:
        lines = render_lines({"canonical": "http://x/", "twitter": {"url": ref("canonical")}})
        self.assertEqual(lines[-1], '<meta name="twitter:url" content="http://x/" />')

    def test_sentinel_at_any_depth(self) -> None:
        self.assertEqual(
            render_meta_tags({"a": {"b": {"_": {"_": "x", "c": "y"}}}}),
            '<meta name="a:b" content="x" />\n<meta name="a:b:c" content="y" />',
        )

    def test_sequences_emit_duplicates_in_order(self) -> None:
        lines = render_lines(
            {"og": {"image": [{"_": "a.png", "width": 10}, "b.png"], "locale": {"alternate": ["fr_FR", "de_DE"]}}}
        )
        self.assertEqual(
            lines,
            [
                '<meta property="og:image" content="a.png" />',
                '<meta property="og:image:width" content="10" />',
                '<meta property="og:image" content="b.png" />',
                '<meta property="og:locale:alternate" content="fr_FR" />',
                '<meta property="og:locale:alternate" content="de_DE" />',
            ],
        )

    def test_blank_leaves_are_skipped(self) -> None:
        lines = render_lines({"og": {"title": "", "type": None, "locale": ["", "en_US", []], "image": {}}})
        self.assertEqual(lines, ['<meta property="og:locale" content="en_US" />'])

    def test_non_mapping_og_is_rendered_as_custom(self) -> None:
        self.assertEqual(render_meta_tags({"og": "x"}), '<meta name="og" content="x" />')

    def test_process_tree_with_custom_naming(self) -> None:
        renderer = Renderer(MetaTagsCollection())
        renderer.normalized_meta_tags["title"] = "Home"
        tags: list = []
        renderer.process_tree(
            tags,
            "itemprop",
            {"name": ref("title"), "price": 10},
            TagNaming(name_key="itemprop", value_key="value"),
        )
        self.assertEqual([tag.attributes for tag in tags], [
            (("itemprop", "itemprop:name"), ("value", "Home")),
            (("itemprop", "itemprop:price"), ("value", 10)),
        ])


class CustomTagTests(unittest.TestCase):
    def test_sequence_emits_one_tag_per_item(self) -> None:
        self.assertEqual(
            render_meta_tags({"custom_key": ["a", "b"]}),
            '<meta name="custom_key" content="a" />\n<meta name="custom_key" content="b" />',
        )

    def test_blank_custom_values_are_dropped(self) -> None:
        self.assertEqual(
            render_meta_tags({"empty": "", "none": None, "list": ["", "b"]}),
            '<meta name="list" content="b" />',
        )

    def test_custom_values_are_escaped(self) -> None:
        self.assertEqual(
            render_meta_tags({"custom": "<b>'x'</b>"}),
            '<meta name="custom" content="&lt;b&gt;&#39;x&#39;&lt;/b&gt;" />',
        )

    def test_custom_values_are_stringified(self) -> None:
        lines = render_lines({"count": 3, "flag": True})
        self.assertEqual(
            lines,
            ['<meta name="count" content="3" />', '<meta name="flag" content="true" />'],
        )


if __name__ == "__main__":
    unittest.main()

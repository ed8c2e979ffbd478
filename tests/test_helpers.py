from __future__ import annotations

import sys
import unittest
from pathlib import Path

from jinja2 import Environment

TESTS_DIR = Path(__file__).resolve().parent
PROJECT_ROOT = TESTS_DIR.parent
sys.path.insert(0, str(PROJECT_ROOT / "src"))

from metatags import PageMeta, ref
from metatags.jinja import install


class PageMetaTests(unittest.TestCase):
    def test_title_returns_page_title_or_headline(self) -> None:
        page = PageMeta()
        page.set_meta_tags(site="Site")
        self.assertEqual(page.title("Page"), "Page")
        self.assertEqual(page.title("Other", headline="Welcome"), "Welcome")
        self.assertEqual(page.display_title(), "Site | Other")

    def test_setters_return_their_value(self) -> None:
        page = PageMeta()
        self.assertEqual(page.description("About"), "About")
        self.assertEqual(page.keywords(["A", "B"]), ["A", "B"])
        self.assertTrue(page.noindex())
        self.assertTrue(page.nofollow())
        self.assertEqual(page.refresh(3), 3)
        self.assertEqual(
            page.display_meta_tags().split("\n"),
            [
                '<meta name="description" content="About" />',
                '<meta name="keywords" content="a, b" />',
                '<meta http-equiv="refresh" content="3" />',
                '<meta name="robots" content="noindex, nofollow" />',
            ],
        )

    def test_display_meta_tags_can_repeat(self) -> None:
        page = PageMeta()
        page.set_meta_tags({"title": "Home", "og": {"title": ref("title")}})
        first = page.display_meta_tags({"site": "Site"})
        second = page.display_meta_tags({"site": "Site"})
        self.assertEqual(first, second)
        self.assertEqual(
            first,
            '<title itemprop="name">Site | Home</title>\n<meta property="og:title" content="Site | Home" />',
        )

    def test_page_tags_override_defaults(self) -> None:
        page = PageMeta()
        page.set_meta_tags(title="Page", og={"type": "article"})
        self.assertEqual(
            page.display_meta_tags({"title": "Default", "og": {"type": "website", "site_name": "Site"}}),
            '<title itemprop="name">Page</title>\n'
            '<meta property="og:type" content="article" />\n'
            '<meta property="og:site_name" content="Site" />',
        )


class JinjaTests(unittest.TestCase):
    def setUp(self) -> None:
        self.env = install(Environment(autoescape=True))

    def test_display_meta_tags_is_not_double_escaped(self) -> None:
        page = PageMeta()
        page.set_meta_tags(title="A & B")
        html = self.env.from_string("{{ display_meta_tags() }}").render(meta_tags=page)
        self.assertEqual(html, '<title itemprop="name">A &amp; B</title>')

    def test_set_meta_tags_from_template(self) -> None:
        template = self.env.from_string(
            "{{ set_meta_tags({'description': 'Hi'}, canonical='http://x/') }}"
            "{{ display_meta_tags({'site': 'Site'}) }}|{{ display_title() }}"
        )
        html = template.render(meta_tags=PageMeta())
        self.assertEqual(
            html,
            '<title itemprop="name">Site</title>\n'
            '<meta name="description" content="Hi" />\n'
            '<link rel="canonical" href="http://x/" itemprop="url" />|',
        )

    def test_custom_variable_name(self) -> None:
        env = install(Environment(autoescape=True), variable="head")
        page = PageMeta()
        page.set_meta_tags(title="Home")
        self.assertEqual(env.from_string("{{ display_title() }}").render(head=page), "Home")

    def test_missing_page_meta(self) -> None:
        with self.assertRaises(TypeError):
            self.env.from_string("{{ display_meta_tags() }}").render()


if __name__ == "__main__":
    unittest.main()

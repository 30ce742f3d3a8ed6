"""Tests for visible-only cloning."""

import pytest

from blockcopy.core import TreePruner, VisibilityClassifier
from blockcopy.dom import TextNode, build_document, parse_html, render_html


@pytest.fixture
def pruner() -> TreePruner:
    return TreePruner()


class TestCreateVisibleClone:
    """Tests for TreePruner.create_visible_clone."""

    def test_aria_hidden_subtree_is_dropped(self, pruner):
        """Test that aria-hidden content never reaches the clone."""
        doc = parse_html(
            '<div id="root"><p>Shown</p>'
            '<div aria-hidden="true" style="display:block">Looks visible</div></div>'
        )

        clone = pruner.create_visible_clone(doc.query("#root"))

        assert render_html(clone) == '<div id="root"><p>Shown</p></div>'

    def test_hidden_descendants_of_any_kind(self, pruner):
        """Test a mix of hiding rules."""
        doc = parse_html(
            '<div id="root">'
            '<span class="sr-only">Skip</span>'
            '<span style="opacity: 0">Faded</span>'
            "<span hidden>Gone</span>"
            "<span>Kept</span>"
            "</div>"
        )

        clone = pruner.create_visible_clone(doc.query("#root"))

        assert clone.text_content == "Kept"

    def test_whitespace_only_text_is_dropped(self, pruner):
        """Test formatting whitespace between blocks."""
        doc = parse_html("<div>\n  <p>A</p>\n  <p>B</p>\n</div>")

        clone = pruner.create_visible_clone(doc.query("div"))

        assert render_html(clone) == "<div><p>A</p><p>B</p></div>"

    def test_text_with_content_keeps_its_spacing(self, pruner):
        """Test that non-blank text is copied verbatim."""
        doc = parse_html("<p>  Hello   world  </p>")

        clone = pruner.create_visible_clone(doc.query("p"))

        assert clone.text_content == "  Hello   world  "

    def test_original_is_untouched(self, pruner):
        """Test that pruning never mutates the live tree."""
        doc = parse_html('<div>\n<p>A</p><p style="display:none">B</p></div>')
        div = doc.query("div")
        before = render_html(div)

        pruner.create_visible_clone(div)

        assert render_html(div) == before
        assert len(div.children) == 3

    def test_pruning_is_idempotent(self, pruner):
        """Test that pruning a pruned clone changes nothing."""
        doc = parse_html(
            '<section>\n <h2>Title</h2>\n <p aria-hidden="true">x</p>\n'
            " <ul><li>One</li>\n<li>Two</li></ul></section>"
        )

        once = pruner.create_visible_clone(doc.query("section"))
        twice = pruner.create_visible_clone(once)

        assert render_html(twice) == render_html(once)

    def test_clone_is_detached_but_knows_its_document(self, pruner):
        """Test the clone's place in the world."""
        doc = parse_html("<div><p>A</p></div>")

        clone = pruner.create_visible_clone(doc.query("p"))

        assert clone.parent is None
        assert clone.document is doc
        assert clone is not doc.query("p")

    def test_hidden_root_is_still_cloned(self, pruner):
        """Test that the root itself is not judged."""
        doc = parse_html('<div style="display:none"><p>Inside</p></div>')

        clone = pruner.create_visible_clone(doc.query("div"))

        assert clone.tag == "div"
        assert clone.text_content == "Inside"

    def test_code_whitespace_dropped_by_default(self, pruner):
        """Test default whitespace handling inside code."""
        doc = parse_html("<pre><code><span>a</span> <span>b</span></code></pre>")

        clone = pruner.create_visible_clone(doc.query("pre"))

        assert render_html(clone) == "<pre><code><span>a</span><span>b</span></code></pre>"

    def test_code_whitespace_can_be_kept(self):
        """Test keep_code_whitespace."""
        pruner = TreePruner(keep_code_whitespace=True)
        doc = parse_html("<div> <pre><code><span>a</span> <span>b</span></code></pre></div>")

        clone = pruner.create_visible_clone(doc.query("div"))

        assert render_html(clone) == "<div><pre><code><span>a</span> <span>b</span></code></pre></div>"

    def test_uses_given_classifier(self):
        """Test injecting visibility rules."""
        pruner = TreePruner(VisibilityClassifier(honor_presentation_role=False))
        doc = parse_html('<div><span role="presentation">Decor</span></div>')

        clone = pruner.create_visible_clone(doc.query("div"))

        assert clone.text_content == "Decor"

    def test_deep_tree(self, pruner):
        """Test that deep trees are cloned without recursion."""
        doc = parse_html("<div id='root'>" + "<div>" * 500 + "deep" + "</div>" * 500 + "</div>")

        clone = pruner.create_visible_clone(doc.query("#root"))

        assert clone.text_content == "deep"

    def test_text_nodes_are_copies(self, pruner):
        """Test that cloned text does not alias the original."""
        doc = parse_html("<p>Hello</p>")
        p = doc.query("p")

        clone = pruner.create_visible_clone(p)
        clone.children[0].text = "Changed"

        assert isinstance(p.children[0], TextNode)
        assert p.text_content == "Hello"


class TestOffscreenPruning:
    """Tests for dropping content laid out beyond the page."""

    def snapshot(self):
        return build_document(
            {
                "url": "https://x.test/",
                "viewport": {"width": 1000, "height": 800, "scroll_height": 2000},
                "root": {
                    "tag": "html",
                    "rect": [0, 0, 1000, 2000],
                    "children": [
                        {
                            "tag": "body",
                            "rect": [0, 0, 1000, 2000],
                            "children": [
                                {
                                    "tag": "div",
                                    "attrs": {"id": "block"},
                                    "rect": [0, 0, 500, 300],
                                    "children": [
                                        {"tag": "p", "rect": [0, 0, 500, 20], "children": [{"text": "On page"}]},
                                        {
                                            "tag": "p",
                                            "rect": [-10000, 5000, 500, 20],
                                            "children": [{"text": "Parked off page"}],
                                        },
                                    ],
                                }
                            ],
                        }
                    ],
                },
            }
        )

    def test_offscreen_children_are_dropped(self, pruner):
        """Test the default off-page pruning."""
        doc = self.snapshot()

        clone = pruner.create_visible_clone(doc.query("#block"))

        assert clone.text_content == "On page"

    def test_offscreen_pruning_can_be_disabled(self):
        """Test prune_offscreen=False."""
        doc = self.snapshot()

        clone = TreePruner(prune_offscreen=False).create_visible_clone(doc.query("#block"))

        assert clone.text_content == "On pageParked off page"

"""Tests for the document tree, builders and selectors."""

import pytest
from pydantic import ValidationError

from blockcopy.dom import (
    ComputedStyle,
    Document,
    ElementNode,
    SelectorError,
    SoupView,
    TextNode,
    build_document,
    compile_selector,
    parse_html,
    parse_style_attribute,
    render_html,
)


def snapshot_page(*children, title="Page", url="https://x.test/"):
    """Snapshot dict with html/body boxes covering a 1000x800 viewport."""
    return {
        "url": url,
        "title": title,
        "viewport": {"width": 1000, "height": 800},
        "root": {
            "tag": "html",
            "rect": [0, 0, 1000, 800],
            "children": [{"tag": "body", "rect": [0, 0, 1000, 800], "children": list(children)}],
        },
    }


class TestElementNode:
    """Tests for ElementNode."""

    def test_tag_is_lowercased(self):
        """Test that tag names are normalized."""
        assert ElementNode("DIV").tag == "div"

    def test_append_sets_parent_and_moves_child(self):
        """Test that append reparents a node."""
        a = ElementNode("div")
        b = ElementNode("div")
        child = ElementNode("span")
        a.append(child)
        b.append(child)

        assert child.parent is b
        assert a.children == []
        assert b.children == [child]

    def test_text_content_concatenates_descendants(self):
        """Test text_content over nested nodes."""
        root = ElementNode("p")
        root.append(TextNode("Hello "))
        em = ElementNode("em")
        em.append(TextNode("world"))
        root.append(em)

        assert root.text_content == "Hello world"

    def test_iter_ancestors_is_nearest_first(self):
        """Test ancestor order."""
        outer = ElementNode("section")
        middle = ElementNode("div")
        inner = ElementNode("p")
        outer.append(middle)
        middle.append(inner)

        assert list(inner.iter_ancestors()) == [middle, outer]

    def test_closest_includes_self(self):
        """Test that closest starts at the node itself."""
        outer = ElementNode("div", attrs={"class": "box"})
        inner = ElementNode("div", attrs={"class": "box"})
        outer.append(inner)

        assert inner.closest(lambda n: "box" in n.classes) is inner

    def test_shallow_clone_is_detached_copy(self):
        """Test that shallow clones copy attributes but not structure."""
        doc = parse_html('<div class="a"><p>One</p></div>')
        div = doc.query("div")
        clone = div.shallow_clone()

        assert clone.parent is None
        assert clone.children == []
        clone.attrs["class"] = "b"
        assert div.class_name == "a"

    def test_equality_is_identity(self):
        """Test that structurally equal nodes are distinct."""
        assert ElementNode("p") != ElementNode("p")


class TestComputedStyle:
    """Tests for ComputedStyle."""

    def test_from_declarations_accepts_both_casings(self):
        """Test kebab-case and camelCase property names."""
        style = ComputedStyle.from_declarations(
            {"clip-path": "inset(100%)", "textIndent": "-9999px", "color": "red"}
        )

        assert style.clip_path == "inset(100%)"
        assert style.text_indent == "-9999px"

    def test_parse_style_attribute(self):
        """Test inline style parsing."""
        declarations = parse_style_attribute("display: none; OPACITY:0.5 !important;;color:red")

        assert declarations == {"display": "none", "opacity": "0.5", "color": "red"}


class TestParseHtml:
    """Tests for the static HTML builder."""

    def test_fragment_is_wrapped_in_body(self):
        """Test that fragments get html and body elements."""
        doc = parse_html("<p>Hello</p>")

        assert doc.root.tag == "html"
        assert doc.body is not None
        assert doc.body.element_children[0].tag == "p"

    def test_full_document_keeps_title(self):
        """Test title extraction."""
        doc = parse_html(
            "<html><head><title>My Page</title></head><body><p>x</p></body></html>",
            url="https://x.test/",
        )

        assert doc.title == "My Page"
        assert doc.url == "https://x.test/"

    def test_inline_style_becomes_computed_style(self):
        """Test that inline style feeds the computed style."""
        doc = parse_html('<div style="visibility: hidden">x</div>')

        assert doc.query("div").style.visibility == "hidden"

    def test_hidden_attribute_and_unrendered_tags(self):
        """Test display: none for hidden and never-rendered elements."""
        doc = parse_html("<div hidden>x</div><script>var a;</script>")

        assert doc.query("div").style.display == "none"
        assert doc.query("script").style.display == "none"

    def test_contenteditable(self):
        """Test editable flags."""
        doc = parse_html('<div id="a" contenteditable>x</div><div id="b" contenteditable="false">y</div>')

        assert doc.query("#a").editable is True
        assert doc.query("#b").editable is False

    def test_no_geometry(self):
        """Test that static HTML carries no layout."""
        doc = parse_html("<p>Hello</p>")

        assert doc.query("p").rect is None

    def test_nodes_know_their_document(self):
        """Test document back-references."""
        doc = parse_html("<p>Hello</p>")

        assert doc.query("p").document is doc

    def test_render_html_round_trips_markup(self):
        """Test rendering a subtree back to markup."""
        doc = parse_html('<div class="a"><p>1 &lt; 2</p></div>')
        div = doc.query("div")

        assert render_html(div) == '<div class="a"><p>1 &lt; 2</p></div>'


class TestBuildDocument:
    """Tests for the snapshot builder."""

    def test_builds_tree_with_geometry_and_style(self):
        """Test that snapshot data reaches the nodes."""
        doc = build_document(
            snapshot_page(
                {
                    "tag": "DIV",
                    "attrs": {"ID": "main"},
                    "style": {"display": "block", "opacity": 1},
                    "rect": [10, 20, 300, 40, 300, 40],
                    "children": [{"text": "Hello"}],
                }
            )
        )
        div = doc.query("#main")

        assert div.tag == "div"
        assert div.style.opacity == "1"
        assert div.rect.width == 300
        assert div.rect.client_height == 40
        assert div.text_content == "Hello"
        assert doc.title == "Page"
        assert doc.viewport.width == 1000

    def test_rect_mapping_form(self):
        """Test the keyword rect form."""
        doc = build_document(snapshot_page({"tag": "p", "rect": {"x": 1, "y": 2, "width": 3, "height": 4}}))

        assert doc.query("p").rect.bottom == 6

    def test_node_needs_tag_or_text(self):
        """Test node kind validation."""
        with pytest.raises(ValidationError):
            build_document(snapshot_page({"tag": "p", "text": "both"}))

    def test_text_nodes_cannot_have_children(self):
        """Test that text nodes are leaves."""
        with pytest.raises(ValidationError):
            build_document(snapshot_page({"text": "x", "children": [{"text": "y"}]}))

    def test_unknown_fields_rejected(self):
        """Test strict snapshot schema."""
        with pytest.raises(ValidationError):
            build_document(snapshot_page({"tag": "p", "colour": "red"}))

    def test_deeply_nested_snapshot(self):
        """Test that deep captured pages build without recursion errors."""
        leaf = {"tag": "span", "attrs": {"id": "leaf"}, "children": [{"text": "deep"}]}
        for _ in range(1200):
            leaf = {"tag": "div", "children": [leaf]}

        doc = build_document(snapshot_page(leaf))

        assert doc.query("#leaf").text_content == "deep"
        assert len(list(doc.query("#leaf").iter_ancestors())) == 1202

    def test_errors_deep_in_tree(self):
        """Test that malformed nodes far below the root are still rejected."""
        bad = {"tag": "p", "colour": "red"}
        for _ in range(300):
            bad = {"tag": "div", "children": [bad]}

        with pytest.raises(ValidationError):
            build_document(snapshot_page(bad))

    def test_non_object_child_rejected(self):
        """Test children that are not node objects."""
        with pytest.raises(ValidationError):
            build_document(snapshot_page({"tag": "p", "children": ["loose text"]}))


class TestElementFromPoint:
    """Tests for hit testing."""

    def test_returns_deepest_box(self):
        """Test that the innermost containing element wins."""
        doc = build_document(
            snapshot_page(
                {
                    "tag": "div",
                    "rect": [0, 0, 500, 500],
                    "children": [{"tag": "p", "rect": [10, 10, 100, 30], "children": [{"text": "x"}]}],
                }
            )
        )

        assert doc.element_from_point(20, 20).tag == "p"
        assert doc.element_from_point(400, 400).tag == "div"

    def test_later_sibling_paints_on_top(self):
        """Test overlap resolution."""
        doc = build_document(
            snapshot_page(
                {"tag": "div", "attrs": {"id": "under"}, "rect": [0, 0, 100, 100]},
                {"tag": "div", "attrs": {"id": "over"}, "rect": [0, 0, 100, 100]},
            )
        )

        assert doc.element_from_point(50, 50).id == "over"

    def test_skips_display_none(self):
        """Test that undisplayed boxes are not hit."""
        doc = build_document(
            snapshot_page(
                {"tag": "div", "attrs": {"id": "shown"}, "rect": [0, 0, 100, 100]},
                {"tag": "div", "attrs": {"id": "gone"}, "style": {"display": "none"}, "rect": [0, 0, 100, 100]},
            )
        )

        assert doc.element_from_point(50, 50).id == "shown"

    def test_static_document_has_no_hits(self):
        """Test that documents without layout hit nothing."""
        assert parse_html("<p>x</p>").element_from_point(1, 1) is None


class TestSelectors:
    """Tests for CSS selector matching."""

    @pytest.fixture
    def doc(self) -> Document:
        return parse_html(
            """
            <div class="note warn" data-kind="abc-1">
                <p id="first">One</p>
                <section><p lang="en-US">Two</p></section>
            </div>
            """
        )

    def test_type_id_class(self, doc):
        """Test simple selectors."""
        assert doc.query("#first").text_content == "One"
        assert doc.query("div.note.warn") is not None
        assert doc.query("div.missing") is None

    def test_attribute_operators(self, doc):
        """Test attribute selector operators."""
        assert doc.query("[data-kind]") is not None
        assert doc.query('[data-kind="abc-1"]') is not None
        assert doc.query("[data-kind^=abc]") is not None
        assert doc.query("[data-kind$='-1']") is not None
        assert doc.query("[data-kind*=c-]") is not None
        assert doc.query("[class~=warn]") is not None
        assert doc.query("[lang|=en]") is not None
        assert doc.query("[data-kind=ABC-1 i]") is not None
        assert doc.query("[data-kind=ABC-1]") is None

    def test_combinators(self, doc):
        """Test descendant and child combinators."""
        assert len(doc.query_all("div p")) == 2
        assert [p.text_content for p in doc.query_all("div > p")] == ["One"]

    def test_groups(self, doc):
        """Test comma-separated groups."""
        assert len(doc.query_all("#first, section")) == 2

    def test_pseudo_classes_and_sibling_combinators(self):
        """Test structural pseudo-classes, negation and sibling combinators."""
        doc = parse_html(
            '<div class="x"><h2>Title</h2><p id="lead">Lead</p><p>Body</p></div>'
            '<div><ul><li id="one">1</li><li>2</li></ul></div>'
            '<table><tr><td>a</td><td id="second">b</td></tr></table>'
        )

        assert [d.query("li").id for d in doc.query_all("div:not(.x)")] == ["one"]
        assert doc.query("h2 + p").id == "lead"
        assert len(doc.query_all("h2 ~ p")) == 2
        assert doc.query("li:first-child").id == "one"
        assert doc.query("td:nth-child(2)").id == "second"
        assert doc.query("p:not(:first-of-type)").text_content == "Body"

    def test_matches_sees_ancestors(self):
        """Test that matching a node considers the rest of its tree."""
        doc = parse_html('<div data-editor="on"><p>x</p></div><div data-editor="off"><p>y</p></div>')
        on, off = doc.query_all("p")

        assert on.matches('[data-editor]:not([data-editor="off"]) p')
        assert not off.matches('[data-editor]:not([data-editor="off"]) p')

    def test_query_on_detached_subtree(self):
        """Test selection on a tree with no document."""
        root = ElementNode("section")
        item = root.append(ElementNode("p", attrs={"class": "a b"}))

        assert root.query_all(".b") == [item]
        assert item.matches("section > p.a")

    def test_view_is_shared_across_checks(self):
        """Test reusing one rendering for several nodes."""
        doc = parse_html("<ul><li>1</li><li>2</li></ul>")
        view = SoupView(doc.root)
        selector = compile_selector("li:last-child")
        first, last = doc.query_all("li")

        assert not selector.matches(first, view)
        assert selector.matches(last, view)
        assert selector.select(doc.root, view) == [last]

    def test_view_rejects_foreign_nodes(self):
        """Test nodes rendered after the view was built."""
        doc = parse_html("<p>x</p>")
        view = SoupView(doc.root)

        with pytest.raises(ValueError):
            view.tag_for(ElementNode("p"))

    def test_malformed_selectors(self):
        """Test that unparseable selectors are rejected."""
        for source in ("div[data-x", "p >", "p,", "", "p:no-such-state"):
            with pytest.raises(SelectorError):
                compile_selector(source)

    def test_selector_error_message(self):
        """Test that errors name the selector on a single line."""
        with pytest.raises(SelectorError) as exc_info:
            compile_selector("div[data-x")

        assert str(exc_info.value).startswith("'div[data-x': ")
        assert "\n" not in str(exc_info.value)

    def test_selector_error_is_value_error(self):
        """Test the exception hierarchy."""
        assert issubclass(SelectorError, ValueError)

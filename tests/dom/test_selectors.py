"""Tests for the selector engine and the in-memory document tree."""

from __future__ import annotations

import pytest

from chessmirror.dom.selectors import compile_selector
from chessmirror.dom.tree import Element, parse_html
from chessmirror.errors import SelectorError

_MARKUP = """
<div id="board" class="board">
  <div class="piece wp square-52"></div>
  <div class="highlight square-54" style="opacity: 0.5"></div>
  <div class="hint square-55"></div>
  <svg class="arrows">
    <polygon class="arrow" data-arrow="e2e4" style="fill: rgb(255, 170, 0)"></polygon>
  </svg>
</div>
<div class="player-bottom">
  <span class="user-username-component">alice</span>
  <img class="avatar" src="/a.png">
  <span class="rating">(1500)</span>
</div>
"""


@pytest.fixture
def document() -> Element:
    return parse_html(_MARKUP)


class TestTree:
    def test_root_is_document(self, document: Element) -> None:
        assert document.tag == "#document"
        assert document.parent is None

    def test_void_tags_do_not_swallow_siblings(self, document: Element) -> None:
        panel = document.select_one(".player-bottom")
        assert panel is not None
        tags = [child.tag for child in panel.children]
        assert tags == ["span", "img", "span"]

    def test_text_content_concatenates(self, document: Element) -> None:
        panel = document.select_one(".player-bottom")
        assert panel is not None
        assert "alice" in panel.text_content()
        assert "(1500)" in panel.text_content()

    def test_attributes_and_classes(self, document: Element) -> None:
        piece = document.select_one(".piece")
        assert piece is not None
        assert piece.classes == ("piece", "wp", "square-52")
        assert piece.has_class("wp")
        assert piece.get_attribute("missing") is None

    def test_closest_includes_self(self, document: Element) -> None:
        arrow = document.select_one("[data-arrow]")
        assert arrow is not None
        assert arrow.closest("[data-arrow]") is arrow
        board = arrow.closest("#board")
        assert board is not None and board.get_attribute("id") == "board"

    def test_built_tree_links_parents(self) -> None:
        child = Element("span", {"class": "x"})
        root = Element("div", children=[child, "text"])
        assert child.parent is root
        assert root.text_content() == "text"


class TestSelectors:
    def test_type_class_and_id(self, document: Element) -> None:
        assert len(document.select("div.piece")) == 1
        assert document.select_one("#board") is not None
        assert document.select("span.piece") == []

    def test_attribute_operators(self, document: Element) -> None:
        assert len(document.select('[data-arrow="e2e4"]')) == 1
        assert len(document.select("[class*=hint]")) == 1
        assert len(document.select("[data-arrow^=e2]")) == 1
        assert len(document.select("[data-arrow$=e4]")) == 1
        assert len(document.select("[class~=piece]")) == 1
        assert document.select("[data-arrow^=d2]") == []

    def test_descendant_and_child_combinators(self, document: Element) -> None:
        assert len(document.select("svg.arrows polygon[data-arrow]")) == 1
        assert len(document.select("#board > svg > .arrow")) == 1
        assert document.select("#board > .arrow") == []

    def test_comma_group_keeps_document_order(self, document: Element) -> None:
        nodes = document.select(".hint, .piece")
        assert [node.classes[0] for node in nodes] == ["piece", "hint"]

    def test_compile_is_cached(self) -> None:
        assert compile_selector(".piece") is compile_selector(".piece")

    @pytest.mark.parametrize("source", ["", "div >", "> div", "a:hover", "div + p", ".a,,.b"])
    def test_unsupported_syntax_raises(self, source: str) -> None:
        with pytest.raises(SelectorError):
            compile_selector(source)

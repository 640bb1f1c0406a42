"""In-memory document tree and HTML loader."""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from html.parser import HTMLParser

from chessmirror.dom.interfaces import IDomNode

_VOID_TAGS = frozenset(
    {
        "area",
        "base",
        "br",
        "col",
        "embed",
        "hr",
        "img",
        "input",
        "link",
        "meta",
        "param",
        "source",
        "track",
        "wbr",
    }
)


class Element(IDomNode):
    """Detached element holding attributes, children and text runs."""

    __slots__ = ("_tag", "_attrs", "_content", "_parent")

    def __init__(
        self,
        tag: str,
        attrs: Mapping[str, str | None] | None = None,
        children: Iterable[Element | str] = (),
    ) -> None:
        self._tag = tag.lower()
        self._attrs: dict[str, str] = {
            k.lower(): ("" if v is None else v) for k, v in (attrs or {}).items()
        }
        self._content: list[Element | str] = []
        self._parent: Element | None = None
        for child in children:
            self.append(child)

    def append(self, child: Element | str) -> Element | str:
        if isinstance(child, Element):
            child._parent = self
        self._content.append(child)
        return child

    def remove(self, child: Element) -> None:
        self._content.remove(child)
        child._parent = None

    def set_attribute(self, name: str, value: str) -> None:
        self._attrs[name.lower()] = value

    # ── IDomNode ─────────────────────────────────────────────────────────

    @property
    def tag(self) -> str:
        return self._tag

    @property
    def parent(self) -> Element | None:
        return self._parent

    @property
    def children(self) -> Sequence[Element]:
        return [c for c in self._content if isinstance(c, Element)]

    def get_attribute(self, name: str) -> str | None:
        return self._attrs.get(name.lower())

    def text_content(self) -> str:
        parts: list[str] = []
        for item in self._content:
            if isinstance(item, Element):
                parts.append(item.text_content())
            else:
                parts.append(item)
        return "".join(parts)

    def __repr__(self) -> str:
        cls = self._attrs.get("class")
        suffix = f" class={cls!r}" if cls else ""
        return f"<Element {self._tag}{suffix}>"


class _TreeBuilder(HTMLParser):
    def __init__(self) -> None:
        super().__init__(convert_charrefs=True)
        self.root = Element("#document")
        self._stack: list[Element] = [self.root]

    def handle_starttag(self, tag: str, attrs: list[tuple[str, str | None]]) -> None:
        element = Element(tag, dict(attrs))
        self._stack[-1].append(element)
        if element.tag not in _VOID_TAGS:
            self._stack.append(element)

    def handle_startendtag(self, tag: str, attrs: list[tuple[str, str | None]]) -> None:
        self._stack[-1].append(Element(tag, dict(attrs)))

    def handle_endtag(self, tag: str) -> None:
        tag = tag.lower()
        for depth in range(len(self._stack) - 1, 0, -1):
            if self._stack[depth].tag == tag:
                del self._stack[depth:]
                return

    def handle_data(self, data: str) -> None:
        self._stack[-1].append(data)


def parse_html(markup: str) -> Element:
    """Build a detached tree from *markup*; the returned root is ``#document``."""
    builder = _TreeBuilder()
    builder.feed(markup)
    builder.close()
    return builder.root

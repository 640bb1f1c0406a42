"""Abstract document-tree interface consumed by the snapshot extractor.

The extractor depends on this ABC only, not on a concrete browser binding.
Backends supply the structural primitives; selector queries are implemented
once here on top of them.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterator, Sequence

from chessmirror.dom.selectors import compile_selector


class IDomNode(ABC):
    """A queryable element of a document tree."""

    @property
    @abstractmethod
    def tag(self) -> str:
        """Lowercase tag name."""

    @property
    @abstractmethod
    def parent(self) -> IDomNode | None: ...

    @property
    @abstractmethod
    def children(self) -> Sequence[IDomNode]: ...

    @abstractmethod
    def get_attribute(self, name: str) -> str | None:
        """Raw attribute value, or ``None`` when absent."""

    @abstractmethod
    def text_content(self) -> str:
        """Concatenated text of this node and its descendants."""

    # ── Derived helpers ──────────────────────────────────────────────────

    @property
    def classes(self) -> tuple[str, ...]:
        return tuple((self.get_attribute("class") or "").split())

    def has_class(self, name: str) -> bool:
        return name in self.classes

    @property
    def style(self) -> str:
        return self.get_attribute("style") or ""

    def iter_descendants(self) -> Iterator[IDomNode]:
        """Depth-first, document-order traversal (excluding self)."""
        stack = list(reversed(self.children))
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.children))

    def select(self, selector: str) -> list[IDomNode]:
        """All descendants matching *selector*, in document order."""
        compiled = compile_selector(selector)
        return [node for node in self.iter_descendants() if compiled.matches(node)]

    def select_one(self, selector: str) -> IDomNode | None:
        compiled = compile_selector(selector)
        for node in self.iter_descendants():
            if compiled.matches(node):
                return node
        return None

    def closest(self, selector: str) -> IDomNode | None:
        """Nearest inclusive ancestor matching *selector*."""
        compiled = compile_selector(selector)
        node: IDomNode | None = self
        while node is not None:
            if compiled.matches(node):
                return node
            node = node.parent
        return None

    def matches(self, selector: str) -> bool:
        return compile_selector(selector).matches(self)

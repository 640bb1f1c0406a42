"""Minimal CSS selector engine for :class:`~chessmirror.dom.interfaces.IDomNode`.

Supported syntax: type (``div``, ``*``), ``.class``, ``#id``, attribute tests
(``[a]``, ``[a=v]``, ``[a*=v]``, ``[a^=v]``, ``[a$=v]``, ``[a~=v]``), compound
selectors, the descendant (whitespace) and child (``>``) combinators and
comma-separated groups. Anything else raises :class:`SelectorError`.
"""

from __future__ import annotations

import re
from collections.abc import Callable
from dataclasses import dataclass
from functools import lru_cache
from typing import TYPE_CHECKING

from chessmirror.errors import SelectorError

if TYPE_CHECKING:
    from chessmirror.dom.interfaces import IDomNode

_IDENT = r"-?[_a-zA-Z][_a-zA-Z0-9-]*"
_TOKEN_RE = re.compile(
    rf"""
    (?P<ws>\s+)
  | (?P<child>>)
  | (?P<comma>,)
  | (?P<star>\*)
  | (?P<tag>{_IDENT})
  | \.(?P<cls>{_IDENT})
  | \#(?P<id>{_IDENT})
  | \[\s*(?P<attr>{_IDENT})\s*
        (?:(?P<op>[*^$~]?=)\s*
           (?:"(?P<dq>[^"]*)"|'(?P<sq>[^']*)'|(?P<bare>[^\]\s]+))\s*)?
    \]
    """,
    re.VERBOSE,
)

_DESCENDANT = " "
_CHILD = ">"


@dataclass(frozen=True, slots=True)
class AttributeTest:
    name: str
    op: str | None = None
    value: str = ""

    def matches(self, actual: str | None) -> bool:
        if actual is None:
            return False
        if self.op is None:
            return True
        if self.op == "=":
            return actual == self.value
        if self.op == "*=":
            return bool(self.value) and self.value in actual
        if self.op == "^=":
            return bool(self.value) and actual.startswith(self.value)
        if self.op == "$=":
            return bool(self.value) and actual.endswith(self.value)
        if self.op == "~=":
            return self.value in actual.split()
        raise SelectorError(f"Unsupported attribute operator: {self.op!r}")


@dataclass(frozen=True, slots=True)
class Compound:
    """One compound selector, e.g. ``svg.arrows[data-x]``."""

    tag: str | None = None
    ids: tuple[str, ...] = ()
    classes: tuple[str, ...] = ()
    attributes: tuple[AttributeTest, ...] = ()

    def matches(self, node: IDomNode) -> bool:
        if self.tag is not None and node.tag != self.tag:
            return False
        if self.classes:
            node_classes = node.classes
            if any(cls not in node_classes for cls in self.classes):
                return False
        if self.ids and any(node.get_attribute("id") != i for i in self.ids):
            return False
        return all(test.matches(node.get_attribute(test.name)) for test in self.attributes)


# Steps are stored right-to-left: (compound, combinator linking it to the next step).
_Chain = tuple[tuple[Compound, str | None], ...]


@dataclass(frozen=True, slots=True)
class Selector:
    """Compiled selector group."""

    source: str
    chains: tuple[_Chain, ...]

    def matches(self, node: IDomNode) -> bool:
        return any(_match_chain(node, chain, 0) for chain in self.chains)


def _match_chain(node: IDomNode, chain: _Chain, index: int) -> bool:
    compound, combinator = chain[index]
    if not compound.matches(node):
        return False
    if index + 1 == len(chain):
        return True
    parent = node.parent
    if combinator == _CHILD:
        return parent is not None and _match_chain(parent, chain, index + 1)
    while parent is not None:
        if _match_chain(parent, chain, index + 1):
            return True
        parent = parent.parent
    return False


class _CompoundBuilder:
    __slots__ = ("tag", "ids", "classes", "attributes", "touched")

    def __init__(self) -> None:
        self.tag: str | None = None
        self.ids: list[str] = []
        self.classes: list[str] = []
        self.attributes: list[AttributeTest] = []
        self.touched = False

    def build(self) -> Compound:
        return Compound(
            tag=self.tag,
            ids=tuple(self.ids),
            classes=tuple(self.classes),
            attributes=tuple(self.attributes),
        )


@lru_cache(maxsize=256)
def compile_selector(source: str) -> Selector:
    """Parse *source* into a :class:`Selector` (cached)."""
    text = source.strip()
    if not text:
        raise SelectorError("Empty selector")

    chains: list[_Chain] = []
    steps: list[tuple[Compound, str | None]] = []
    current = _CompoundBuilder()
    pending: str | None = None

    def flush_compound() -> None:
        nonlocal current, pending
        if not current.touched:
            raise SelectorError(f"Dangling combinator in {source!r}")
        steps.append((current.build(), pending))
        current = _CompoundBuilder()
        pending = None

    def flush_chain() -> None:
        if not steps:
            raise SelectorError(f"Empty selector group in {source!r}")
        # Reverse so the rightmost compound is matched first; each step keeps
        # the combinator that links it to its left-hand neighbour.
        ordered: list[tuple[Compound, str | None]] = []
        for idx in range(len(steps) - 1, -1, -1):
            compound = steps[idx][0]
            link = steps[idx][1] if idx > 0 else None
            ordered.append((compound, link))
        chains.append(tuple(ordered))
        steps.clear()

    pos = 0
    while pos < len(text):
        match = _TOKEN_RE.match(text, pos)
        if match is None:
            raise SelectorError(f"Unsupported selector syntax at {text[pos:]!r}")
        pos = match.end()
        kind = match.lastgroup

        if kind == "ws":
            if current.touched and pending is None:
                flush_compound()
                pending = _DESCENDANT
            continue
        if kind == "child":
            if current.touched:
                flush_compound()
            if not steps:
                raise SelectorError(f"Child combinator without left side in {source!r}")
            pending = _CHILD
            continue
        if kind == "comma":
            if current.touched:
                flush_compound()
            pending = None
            flush_chain()
            continue

        if current.touched and pending is None and kind in ("tag", "star"):
            raise SelectorError(f"Type selector must come first in {source!r}")
        if not current.touched and steps and pending is None:
            pending = _DESCENDANT
        current.touched = True
        if kind == "tag":
            current.tag = match.group("tag").lower()
        elif kind == "cls":
            current.classes.append(match.group("cls"))
        elif kind == "id":
            current.ids.append(match.group("id"))
        elif kind == "attr" or match.group("attr"):
            value = match.group("dq")
            if value is None:
                value = match.group("sq")
            if value is None:
                value = match.group("bare") or ""
            current.attributes.append(
                AttributeTest(match.group("attr").lower(), match.group("op"), value)
            )

    if current.touched:
        flush_compound()
    elif pending == _CHILD:
        raise SelectorError(f"Dangling combinator in {source!r}")
    flush_chain()
    return Selector(source, tuple(chains))


def matcher(source: str) -> Callable[[IDomNode], bool]:
    """Return a predicate testing nodes against *source*."""
    return compile_selector(source).matches

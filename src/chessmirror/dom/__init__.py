"""Document-tree access for the snapshot extractor.

The extractor reads any :class:`IDomNode`; :func:`parse_html` builds a
detached tree and :class:`SeleniumPageSource` copies one out of a live
browser session.
"""

from chessmirror.dom.interfaces import IDomNode
from chessmirror.dom.selectors import Selector, compile_selector
from chessmirror.dom.tree import Element, parse_html

__all__ = [
    "Element",
    "IDomNode",
    "Selector",
    "compile_selector",
    "parse_html",
]

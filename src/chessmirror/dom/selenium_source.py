"""Live document source backed by a Selenium WebDriver session.

The page is instrumented with a MutationObserver that counts mutations into
a window global. The producer polls that counter to detect mutation
batches, then copies the whole document in a single ``outerHTML`` round-trip
so every extraction cycle reads one consistent tree.
"""

from __future__ import annotations

import logging

from selenium.common.exceptions import WebDriverException
from selenium.webdriver.remote.webdriver import WebDriver

from chessmirror.dom.tree import Element, parse_html
from chessmirror.errors import PageSourceError

_LOGGER = logging.getLogger(__name__)

_INSTALL_OBSERVER_JS = """
if (window.__chessmirrorObserver) {
    return window.__chessmirrorMutations;
}
window.__chessmirrorMutations = 0;
window.__chessmirrorObserver = new MutationObserver(function (records) {
    window.__chessmirrorMutations += records.length;
});
window.__chessmirrorObserver.observe(document.documentElement, {
    childList: true,
    subtree: true,
    attributes: true,
    attributeFilter: ['class', 'style', 'data-arrow'],
    characterData: true
});
return window.__chessmirrorMutations;
"""

_READ_COUNTER_JS = """
return window.__chessmirrorObserver ? window.__chessmirrorMutations : -1;
"""

_OUTER_HTML_JS = "return document.documentElement.outerHTML;"


class SeleniumPageSource:
    """Reads the rendered chess page from a running WebDriver session."""

    __slots__ = ("_driver", "_seen_mutations")

    def __init__(self, driver: WebDriver) -> None:
        self._driver = driver
        self._seen_mutations = -1

    @property
    def driver(self) -> WebDriver:
        return self._driver

    def install(self) -> None:
        """Attach the mutation counter to the current page (idempotent)."""
        count = self._execute(_INSTALL_OBSERVER_JS)
        self._seen_mutations = int(count or 0)
        _LOGGER.info("Mutation observer attached")

    def pending_mutations(self) -> bool:
        """True when the page reported mutations since the previous call.

        A missing counter means the page navigated and lost its observer;
        it is re-installed and reported as a change.
        """
        count = self._execute(_READ_COUNTER_JS)
        if count is None or int(count) < 0:
            self.install()
            return True
        count = int(count)
        if count == self._seen_mutations:
            return False
        self._seen_mutations = count
        return True

    def fetch_document(self) -> Element:
        """Copy the live document into a detached tree."""
        markup = self._execute(_OUTER_HTML_JS)
        if not isinstance(markup, str):
            raise PageSourceError("Browser returned no document markup")
        return parse_html(markup)

    def _execute(self, script: str) -> object:
        try:
            return self._driver.execute_script(script)
        except WebDriverException as exc:
            raise PageSourceError(f"WebDriver call failed: {exc.msg or exc}") from exc

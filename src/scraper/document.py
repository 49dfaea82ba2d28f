"""Queryable HTML documents backed by lxml."""
from __future__ import annotations

import logging
import re
from typing import List, Optional, Sequence

from lxml import etree, html
from lxml.html import HtmlElement

from .errors import ParseError

logger = logging.getLogger(__name__)

_XML_DECLARATION_RE = re.compile(r"\A\s*<\?xml[^>]*\?>")
_EMPTY_DOCUMENT = "<html><body></body></html>"
_COMMENT_RE = re.compile(r"<!--.*?(-->|\Z)", re.DOTALL)


class Document:
    """A parsed HTML page supporting CSS selection, text reads and removal.

    Instances belong to a single pipeline call. ``remove`` mutates the tree, so
    anything that needs the original markup must read it first.
    """

    def __init__(self, root: HtmlElement) -> None:
        self._root = root

    @property
    def root(self) -> HtmlElement:
        return self._root

    def select_all(self, selector: str) -> List[HtmlElement]:
        return self._root.cssselect(selector)

    def select_first(self, selector: str) -> Optional[HtmlElement]:
        matches = self.select_all(selector)
        return matches[0] if matches else None

    def attr(self, selector: str, name: str, default: str = "") -> str:
        """Return attribute ``name`` of the first match, or ``default``."""
        element = self.select_first(selector)
        if element is None:
            return default
        value = element.get(name)
        return default if value is None else value

    def text(self, selector: str) -> str:
        """Return the text of the first match, or an empty string."""
        element = self.select_first(selector)
        return "" if element is None else self.element_text(element)

    def body_text(self) -> str:
        body = self.select_first("body")
        return self.element_text(body if body is not None else self._root)

    def remove(self, selectors: Sequence[str]) -> int:
        """Drop every element matching any of ``selectors`` along with its subtree."""
        removed = 0
        for selector in selectors:
            for element in self.select_all(selector):
                if not self._attached(element):
                    continue
                element.drop_tree()
                removed += 1
        return removed

    def _attached(self, element: HtmlElement) -> bool:
        # Removing an ancestor earlier detaches the whole subtree.
        return any(ancestor is self._root for ancestor in element.iterancestors())

    @staticmethod
    def element_text(element: HtmlElement) -> str:
        return element.text_content()


def parse_document(markup: str) -> Document:
    """Parse ``markup`` into a :class:`Document`.

    lxml recovers from most broken markup. Input with no elements at all (an
    empty, blank or comment-only page) yields an empty document; only markup
    lxml rejects outright raises :class:`ParseError`.
    """

    # lxml refuses str input that carries an encoding declaration.
    markup = _XML_DECLARATION_RE.sub("", markup, count=1)

    if not _COMMENT_RE.sub("", markup).strip():
        logger.debug("Empty HTML document", extra={"event": "parse.empty"})
        return Document(html.document_fromstring(_EMPTY_DOCUMENT))

    try:
        root = html.document_fromstring(markup)
    except etree.ParserError:
        # lxml signals "Document is empty" this way.
        logger.debug("Empty HTML document", extra={"event": "parse.empty"})
        root = html.document_fromstring(_EMPTY_DOCUMENT)
    except (etree.XMLSyntaxError, ValueError) as exc:
        logger.debug("HTML parser rejected document: %s", exc, extra={"event": "parse.rejected"})
        raise ParseError(f"Unable to parse HTML: {exc}") from exc

    return Document(root)


__all__ = ["Document", "parse_document"]

"""
Document implementation.
This module implements the Document: the parsed tree of one HTML source
together with the indexes used to answer tag, class and id lookups.
"""

import logging
from typing import Dict, Iterator, List, Optional, Tuple, Union

from .element import Element
from .xpath_engine import XPathEngine, default_engine
from ..parser.tokenizer import Tokenizer
from ..parser.tree_builder import TreeBuilder
from ...errors import DecodeError
from ...utils.logging import PerformanceLogger

logger = logging.getLogger(__name__)

DEFAULT_ENCODING = "utf-8"


class Document:
    """
    A parsed HTML document.

    Documents are built once, through ``from_string`` or ``from_bytes``, and
    are read-only afterwards, so one instance can be queried from several
    threads. All lookups return elements in document order; a lookup that
    finds nothing returns an empty list (or None for single results).
    """

    def __init__(self,
                 root: Element,
                 doctype: Optional[str] = None,
                 parse_errors: Optional[List[str]] = None,
                 xpath_engine: Optional[XPathEngine] = None):
        """
        Initialize a Document around an already built tree.

        Args:
            root: The synthetic root element produced by the tree builder
            doctype: The DOCTYPE declaration content, if any
            parse_errors: Descriptions of the markup errors recovered from
            xpath_engine: Engine used for XPath queries
        """
        self.root = root
        self.doctype = doctype
        self.parse_errors: Tuple[str, ...] = tuple(parse_errors or ())
        self._xpath_engine = xpath_engine or default_engine

        # Element collections
        self._elements: List[Element] = []
        self._elements_by_id: Dict[str, Element] = {}
        self._elements_by_tag: Dict[str, List[Element]] = {}
        self._elements_by_class: Dict[str, List[Element]] = {}

        self._build_indexes()

    @classmethod
    def from_string(cls, html: str) -> 'Document':
        """
        Parse HTML text into a Document.

        Malformed markup never raises; the parser recovers and the recovered
        problems are listed in ``parse_errors``.

        Args:
            html: The HTML text

        Returns:
            The parsed Document
        """
        perf = PerformanceLogger(logger, "Document")
        perf.start("parse")

        if html.startswith('\ufeff'):
            html = html[1:]

        builder = TreeBuilder()
        root = builder.build(Tokenizer(html))
        document = cls(root, builder.doctype, builder.parse_errors)

        perf.end("parse")
        logger.debug(f"Parsed {len(html)} characters into {len(document)} elements "
                     f"({len(document.parse_errors)} recovered errors)")
        return document

    @classmethod
    def from_bytes(cls, data: Union[bytes, bytearray], encoding: str = DEFAULT_ENCODING) -> 'Document':
        """
        Decode and parse HTML bytes into a Document.

        Args:
            data: The raw bytes
            encoding: The encoding the bytes are declared to be in

        Returns:
            The parsed Document

        Raises:
            DecodeError: If the bytes are not valid in ``encoding`` or the
                encoding is unknown
        """
        try:
            text = bytes(data).decode(encoding)
        except LookupError as e:
            raise DecodeError(encoding, "unknown encoding") from e
        except UnicodeDecodeError as e:
            raise DecodeError(encoding, str(e)) from e

        return cls.from_string(text)

    def _build_indexes(self) -> None:
        """Index every element by tag, class and id, in document order."""
        for element in self.root.iter_elements():
            self._elements.append(element)
            self._elements_by_tag.setdefault(element.tag_name, []).append(element)

            for class_name in element.class_list:
                self._elements_by_class.setdefault(class_name, []).append(element)

            element_id = element.id
            if not element_id:
                continue
            if element_id in self._elements_by_id:
                # First element with an id keeps it
                logger.debug(f"Duplicate id {element_id!r} on <{element.tag_name}>, keeping the first")
            else:
                self._elements_by_id[element_id] = element

    @property
    def title(self) -> str:
        """Get the text of the first <title> element, or "" if there is none."""
        titles = self._elements_by_tag.get('title')
        if not titles:
            return ""
        return " ".join(titles[0].text_content.split())

    @property
    def document_element(self) -> Optional[Element]:
        """Get the first top-level element (usually <html>)."""
        children = self.root.children
        return children[0] if children else None

    def iter_elements(self) -> Iterator[Element]:
        """Iterate over all elements in document order."""
        return iter(self._elements)

    def get_elements_by_tag_name(self, tag_name: str) -> List[Element]:
        """
        Get all elements with the specified tag name.

        Args:
            tag_name: The tag name to search for (case-insensitive), or "*"

        Returns:
            List of matching elements
        """
        if tag_name == "*":
            return list(self._elements)
        return list(self._elements_by_tag.get(tag_name.lower(), ()))

    def get_elements_by_class_name(self, class_name: str) -> List[Element]:
        """
        Get all elements with the specified class name.

        Args:
            class_name: A single class name, matched exactly

        Returns:
            List of matching elements
        """
        return list(self._elements_by_class.get(class_name, ()))

    def get_element_by_id(self, element_id: str) -> Optional[Element]:
        """
        Get an element by its ID.

        Args:
            element_id: The ID to search for

        Returns:
            The first element with the specified ID, or None if not found
        """
        return self._elements_by_id.get(element_id)

    def get_elements_by_xpath(self, expression: str) -> List[Element]:
        """
        Get all elements matching an XPath expression.

        Relative expressions are evaluated from the document root.

        Raises:
            XPathParseError: If the expression uses unsupported syntax
        """
        return self._xpath_engine.select(expression, self.root)

    def get_element_by_xpath(self, expression: str) -> Optional[Element]:
        """Get the first element matching an XPath expression, or None."""
        matches = self.get_elements_by_xpath(expression)
        return matches[0] if matches else None

    # Short names for the lookups
    by_tag = get_elements_by_tag_name
    by_class = get_elements_by_class_name
    by_id = get_element_by_id
    by_xpath = get_elements_by_xpath

    @property
    def outer_html(self) -> str:
        """Serialize the whole document back to HTML."""
        html = self.root.inner_html
        if self.doctype is not None:
            html = f"<!DOCTYPE {self.doctype}>{html}" if self.doctype else f"<!DOCTYPE>{html}"
        return html

    @property
    def inner_html(self) -> str:
        """Serialize the top-level nodes, without the DOCTYPE."""
        return self.root.inner_html

    @property
    def text_content(self) -> str:
        """Get all text in the document, in document order."""
        return self.root.text_content

    def __len__(self) -> int:
        return len(self._elements)

    def __repr__(self) -> str:
        title = self.title
        return f"<Document {len(self)} elements{f' title={title!r}' if title else ''}>"

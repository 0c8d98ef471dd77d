"""
Scraper entry point.
This module builds Documents from URLs, files or strings and exposes the
lookups callers usually need.
"""

import logging
import os
from typing import List, Optional, Union

from .errors import UnsupportedSourceError
from .html.dom.document import DEFAULT_ENCODING, Document
from .html.dom.element import Element
from .network.fetcher import PageFetcher

logger = logging.getLogger(__name__)

HTML_FILE_SUFFIXES = ('.html', '.htm', '.xhtml')
STRING_SOURCE = "<string>"


class Scraper:
    """
    A parsed page and where it came from.

    Scrapers are created with ``from_url``, ``from_string`` or ``from_file``.
    """

    def __init__(self, document: Document, source: str = STRING_SOURCE):
        """
        Initialize a Scraper around a parsed document.

        Args:
            document: The parsed document
            source: The URL or path the document was read from
        """
        self.document = document
        self.source = source

    @classmethod
    def from_url(cls, url: str, fetcher: Optional[PageFetcher] = None) -> 'Scraper':
        """
        Fetch and parse a web page.

        Args:
            url: URL of the page
            fetcher: Fetcher to use; a default one is created and closed if omitted

        Returns:
            Scraper for the fetched page

        Raises:
            requests.RequestException: If the page cannot be fetched
            DecodeError: If the body does not decode under the declared charset
        """
        owns_fetcher = fetcher is None
        fetcher = fetcher or PageFetcher()
        try:
            result = fetcher.fetch(url)
        finally:
            if owns_fetcher:
                fetcher.close()

        return cls(Document.from_bytes(result.content, result.encoding), result.url)

    @classmethod
    def from_string(cls, html: str) -> 'Scraper':
        """Parse an HTML string."""
        return cls(Document.from_string(html))

    @classmethod
    def from_file(cls, path: Union[str, os.PathLike], encoding: str = DEFAULT_ENCODING) -> 'Scraper':
        """
        Read and parse an HTML file.

        Args:
            path: Path to a .html, .htm or .xhtml file
            encoding: Encoding of the file

        Returns:
            Scraper for the file

        Raises:
            UnsupportedSourceError: If the path does not name an HTML file
            FileNotFoundError: If the file does not exist
            DecodeError: If the file does not decode under ``encoding``
        """
        path = os.fspath(path)
        if not path.lower().endswith(HTML_FILE_SUFFIXES):
            raise UnsupportedSourceError(f"Not an HTML file: {path}")

        with open(path, 'rb') as f:
            data = f.read()

        logger.debug(f"Read {len(data)} bytes from {path}")
        return cls(Document.from_bytes(data, encoding), path)

    @property
    def raw_content(self) -> str:
        """The document serialized back to HTML."""
        return self.document.outer_html

    @property
    def title(self) -> str:
        return self.document.title

    def get_elements_from_tag(self, tag_name: str) -> List[Element]:
        return self.document.get_elements_by_tag_name(tag_name)

    def get_elements_from_class(self, class_name: str) -> List[Element]:
        return self.document.get_elements_by_class_name(class_name)

    def get_element_by_id(self, element_id: str) -> Optional[Element]:
        return self.document.get_element_by_id(element_id)

    def get_elements_by_xpath(self, expression: str) -> List[Element]:
        return self.document.get_elements_by_xpath(expression)

    def get_element_by_xpath(self, expression: str) -> Optional[Element]:
        return self.document.get_element_by_xpath(expression)

    def __repr__(self) -> str:
        return f"<Scraper {self.source} {self.document!r}>"

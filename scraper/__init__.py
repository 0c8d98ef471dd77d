"""
html-scraper - load HTML from URLs, files or strings and query it by tag,
class, id or XPath.
"""

import os

from scraper.utils.logging import log_file_from_env, setup_logging

# Set up basic logging
logger = setup_logging(log_file=log_file_from_env(),
                       console_level=os.environ.get("SCRAPER_LOG_LEVEL", "WARNING"))

from scraper.errors import (  # noqa: E402
    DecodeError,
    ParseError,
    ScraperError,
    UnsupportedSourceError,
    XPathParseError,
)
from scraper.html import Comment, Document, Element, Node, NodeType, Text  # noqa: E402
from scraper.scraper import Scraper  # noqa: E402

# Package information
__version__ = "1.0.0"
__description__ = "Load HTML from URLs, files or strings and query it by tag, class, id or XPath"

__all__ = [
    'Comment', 'DecodeError', 'Document', 'Element', 'Node', 'NodeType', 'ParseError',
    'Scraper', 'ScraperError', 'Text', 'UnsupportedSourceError', 'XPathParseError',
]

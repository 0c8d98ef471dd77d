"""
Exception types raised by the scraper.

Malformed HTML is never an error: the parser always recovers. Only
undecodable input, unsupported XPath syntax and unusable sources raise.
"""

from typing import Optional


class ScraperError(Exception):
    """Base class for all scraper errors."""


class DecodeError(ScraperError, ValueError):
    """Raised when bytes cannot be decoded under the declared encoding."""

    def __init__(self, encoding: str, reason: str):
        self.encoding = encoding
        self.reason = reason
        super().__init__(f"Cannot decode input as {encoding!r}: {reason}")


class ParseError(ScraperError, ValueError):
    """Raised when a query expression cannot be parsed."""


class XPathParseError(ParseError):
    """
    Raised for malformed or unsupported XPath expressions.

    Args:
        expression: The full expression being parsed
        construct: The offending part of the expression
        message: Optional explanation, defaults to "unsupported construct"
    """

    def __init__(self, expression: str, construct: str, message: Optional[str] = None):
        self.expression = expression
        self.construct = construct
        message = message or "unsupported construct"
        super().__init__(f"{message} {construct!r} in XPath expression {expression!r}")


class UnsupportedSourceError(ScraperError, ValueError):
    """Raised when a source cannot be used to build a document."""

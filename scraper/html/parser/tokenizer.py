"""
HTML tokenizer.
This module turns HTML source text into a lazy stream of tokens. It never
fails: markup it cannot make sense of is passed through as literal text.
"""

import re
from enum import IntEnum
from typing import Dict, Iterator, List, Optional, Tuple

from .constants import RAW_TEXT_ELEMENTS
from .entities import unescape

_TAG_NAME_RE = re.compile(r'[A-Za-z][^\s/>]*')
_ATTR_NAME_RE = re.compile(r'[^\s/>=]+')
_UNQUOTED_VALUE_RE = re.compile(r'[^\s>]*')
_WHITESPACE_RE = re.compile(r'\s*')


class TokenType(IntEnum):
    """Kinds of token produced by the tokenizer."""
    START_TAG = 1
    END_TAG = 2
    TEXT = 3
    COMMENT = 4
    DOCTYPE = 5


class Token:
    """
    A single token.

    Tags use ``name`` (and ``attributes``/``self_closing`` for start tags);
    text, comments and doctypes use ``data``.
    """

    def __init__(self,
                 token_type: TokenType,
                 name: str = "",
                 data: str = "",
                 attributes: Optional[Dict[str, str]] = None,
                 self_closing: bool = False):
        self.type = token_type
        self.name = name
        self.data = data
        self.attributes = attributes if attributes is not None else {}
        self.self_closing = self_closing

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Token):
            return NotImplemented
        return (self.type == other.type and self.name == other.name
                and self.data == other.data and self.attributes == other.attributes
                and self.self_closing == other.self_closing)

    def __repr__(self) -> str:
        if self.type in (TokenType.START_TAG, TokenType.END_TAG):
            return f"Token({self.type.name}, {self.name!r}, {self.attributes!r})"
        return f"Token({self.type.name}, {self.data!r})"


class Tokenizer:
    """
    Tokenizer for HTML source text.

    Iterating a tokenizer yields tokens lazily; every new iteration starts
    again from the beginning of the source.
    """

    def __init__(self, source: str):
        """
        Initialize the tokenizer.

        Args:
            source: The HTML text to tokenize
        """
        self.source = source
        self._raw_text_end_patterns: Dict[str, 're.Pattern'] = {}

        # No tag, doctype or bogus comment can start after this index: each needs a '>'
        self._last_gt = source.rfind('>')

    def __iter__(self) -> Iterator[Token]:
        return self._tokens()

    def _tokens(self) -> Iterator[Token]:
        source = self.source
        length = len(source)
        pos = 0
        pending: List[str] = []

        while pos < length:
            lt = source.find('<', pos)
            if lt == -1:
                pending.append(source[pos:])
                break
            if lt > pos:
                pending.append(source[pos:lt])

            token, end = self._read_markup(lt)
            if token is None:
                # Not markup after all, keep it as text and move on
                pending.append(source[lt:end])
                pos = end
                continue

            if pending:
                yield Token(TokenType.TEXT, data=unescape("".join(pending)))
                pending = []
            yield token
            pos = end

            if (token.type == TokenType.START_TAG and token.name in RAW_TEXT_ELEMENTS
                    and not token.self_closing):
                raw_end = self._find_raw_text_end(token.name, pos)
                if raw_end > pos:
                    yield Token(TokenType.TEXT, data=source[pos:raw_end])
                if raw_end < length and raw_end > self._last_gt:
                    # The end tag is cut off by the end of input; it still ends the element
                    yield Token(TokenType.END_TAG, name=token.name)
                    raw_end = length
                pos = raw_end

        if pending:
            yield Token(TokenType.TEXT, data=unescape("".join(pending)))

    def _find_raw_text_end(self, tag_name: str, start: int) -> int:
        """Find where the raw text content of ``tag_name`` stops."""
        pattern = self._raw_text_end_patterns.get(tag_name)
        if pattern is None:
            pattern = re.compile(r'</' + re.escape(tag_name) + r'(?=[\s/>])', re.IGNORECASE)
            self._raw_text_end_patterns[tag_name] = pattern

        match = pattern.search(self.source, start)
        return match.start() if match else len(self.source)

    def _skip_whitespace(self, pos: int) -> int:
        return _WHITESPACE_RE.match(self.source, pos).end()

    def _read_markup(self, lt: int) -> Tuple[Optional[Token], int]:
        """
        Read the markup construct starting at a '<'.

        Args:
            lt: Index of the '<' in the source

        Returns:
            The token and the index just past it, or None and the index
            where the literal text that replaces it ends
        """
        source = self.source

        if source.startswith('<!--', lt):
            close = source.find('-->', lt + 4)
            if close == -1:
                return Token(TokenType.COMMENT, data=source[lt + 4:]), len(source)
            return Token(TokenType.COMMENT, data=source[lt + 4:close]), close + 3

        if lt > self._last_gt:
            return None, lt + 1

        marker = source[lt + 1:lt + 2]

        if marker in ('!', '?'):
            close = source.find('>', lt + 2)
            if close == -1:
                return None, lt + 1
            if marker == '!':
                body = source[lt + 2:close]
                if body[:7].lower() == 'doctype':
                    return Token(TokenType.DOCTYPE, data=body[7:].strip()), close + 1
                return Token(TokenType.COMMENT, data=body), close + 1
            # Processing instructions are kept as comments
            return Token(TokenType.COMMENT, data=source[lt + 1:close]), close + 1

        if marker == '/':
            match = _TAG_NAME_RE.match(source, lt + 2)
            if not match:
                return None, lt + 1
            close = source.find('>', match.end())
            if close == -1:
                return None, lt + 1
            return Token(TokenType.END_TAG, name=match.group(0).lower()), close + 1

        match = _TAG_NAME_RE.match(source, lt + 1)
        if not match:
            return None, lt + 1
        return self._read_start_tag(lt, match)

    def _read_start_tag(self, lt: int, name_match: 're.Match') -> Tuple[Optional[Token], int]:
        source = self.source
        length = len(source)
        name = name_match.group(0).lower()
        attributes: Dict[str, str] = {}
        pos = name_match.end()

        while True:
            pos = self._skip_whitespace(pos)
            if pos >= length:
                # A tag cut off by the end of input takes the rest with it as text
                return None, length

            char = source[pos]
            if char == '>':
                return Token(TokenType.START_TAG, name=name, attributes=attributes), pos + 1
            if source.startswith('/>', pos):
                return Token(TokenType.START_TAG, name=name, attributes=attributes,
                             self_closing=True), pos + 2
            if char == '/':
                pos += 1
                continue

            attr_match = _ATTR_NAME_RE.match(source, pos)
            if not attr_match:
                # A stray '=' where a name should be
                pos += 1
                continue

            attr_name = attr_match.group(0).lower()
            value = ""
            pos = self._skip_whitespace(attr_match.end())

            if pos < length and source[pos] == '=':
                pos = self._skip_whitespace(pos + 1)
                if pos >= length:
                    return None, length
                quote = source[pos]
                if quote in ('"', "'"):
                    close = source.find(quote, pos + 1)
                    if close == -1:
                        # Unclosed quote
                        return None, length
                    value = unescape(source[pos + 1:close])
                    pos = close + 1
                else:
                    value_match = _UNQUOTED_VALUE_RE.match(source, pos)
                    value = unescape(value_match.group(0))
                    pos = value_match.end()

            # First occurrence of a repeated attribute wins
            attributes.setdefault(attr_name, value)

"""
Tree builder.
This module assembles tokens into an element tree, recovering from
unbalanced markup instead of failing.
"""

import logging
from typing import Iterable, List, Optional

from .constants import IMPLICIT_CLOSE, ROOT_TAG
from .tokenizer import Token, TokenType
from ..dom.comment import Comment
from ..dom.element import Element
from ..dom.node import NodeType
from ..dom.text import Text

logger = logging.getLogger(__name__)


class TreeBuilder:
    """
    Build an element tree from a token stream.

    The builder keeps a stack of open elements whose bottom is a synthetic
    root element. Elements are attached to their parent as soon as they are
    opened, so anything left open at the end of input is still in the tree.
    """

    def __init__(self):
        """Initialize the tree builder."""
        self.root = Element(ROOT_TAG)
        self.doctype: Optional[str] = None
        self.parse_errors: List[str] = []
        self._open_elements: List[Element] = [self.root]

    @property
    def current(self) -> Element:
        """The innermost open element."""
        return self._open_elements[-1]

    def build(self, tokens: Iterable[Token]) -> Element:
        """
        Consume a token stream and return the root of the resulting tree.

        Args:
            tokens: Tokens, usually a Tokenizer

        Returns:
            The synthetic root element
        """
        for token in tokens:
            self.process(token)
        self.finish()
        return self.root

    def process(self, token: Token) -> None:
        """Apply a single token to the tree."""
        if token.type == TokenType.START_TAG:
            self._start_tag(token)
        elif token.type == TokenType.END_TAG:
            self._end_tag(token)
        elif token.type == TokenType.TEXT:
            self._text(token)
        elif token.type == TokenType.COMMENT:
            self.current._append_child(Comment(token.data))
        elif token.type == TokenType.DOCTYPE:
            if self.doctype is None:
                self.doctype = token.data
            else:
                self._error(f"extra doctype {token.data!r} ignored")

    def finish(self) -> None:
        """Close whatever is still open at the end of input."""
        for element in reversed(self._open_elements[1:]):
            self._error(f"<{element.tag_name}> not closed before end of input")
        del self._open_elements[1:]

    def _start_tag(self, token: Token) -> None:
        self._close_implied(token.name)

        element = Element(token.name, token.attributes)
        self.current._append_child(element)

        if not element.is_void_element and not token.self_closing:
            self._open_elements.append(element)

    def _close_implied(self, tag_name: str) -> None:
        """Pop open elements that ``tag_name`` implicitly closes."""
        while len(self._open_elements) > 1:
            closers = IMPLICIT_CLOSE.get(self.current.tag_name)
            if closers is None or tag_name not in closers:
                break
            self._open_elements.pop()

    def _end_tag(self, token: Token) -> None:
        stack = self._open_elements
        for index in range(len(stack) - 1, 0, -1):
            if stack[index].tag_name == token.name:
                for element in stack[index + 1:]:
                    self._error(f"<{element.tag_name}> closed by </{token.name}>")
                del stack[index:]
                return

        self._error(f"</{token.name}> has no open element, ignored")

    def _text(self, token: Token) -> None:
        if not token.data:
            return

        last = self.current.last_child
        if last is not None and last.node_type == NodeType.TEXT_NODE:
            # Text split by an ignored tag stays one node
            last.data += token.data
        else:
            self.current._append_child(Text(token.data))

    def _error(self, message: str) -> None:
        logger.debug(f"Recovered from malformed markup: {message}")
        self.parse_errors.append(message)

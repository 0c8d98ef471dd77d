"""
XPath Engine implementation.
This module implements the subset of XPath used for scraping:

    /html/body/div       absolute paths
    //li                 descendants at any depth
    div/p, ./p, ..       paths relative to an element
    child::p, *          the child axis and wildcard name tests
    [2], [last()]        positional predicates (per parent)
    [@href]              attribute present
    [@class='x']         attribute equals
    [text()='x']         a text child equals
    [contains(@a,'x')]   attribute contains
    [contains(text(),'x')]

Anything else raises XPathParseError naming the construct; an expression
is never partially evaluated.
"""

import logging
import re
import threading
from collections import namedtuple
from typing import Dict, List, Optional

from .node import Node, NodeType
from ...errors import XPathParseError

logger = logging.getLogger(__name__)

_TOKEN_RE = re.compile(r"""
    (?P<ws>\s+)
  | (?P<dslash>//)
  | (?P<slash>/)
  | (?P<lbracket>\[)
  | (?P<rbracket>\])
  | (?P<lparen>\()
  | (?P<rparen>\))
  | (?P<comma>,)
  | (?P<at>@)
  | (?P<eq>=)
  | (?P<dotdot>\.\.)
  | (?P<dot>\.)
  | (?P<star>\*)
  | (?P<axis>[A-Za-z_][\w.-]*::)
  | (?P<number>\d+(?:\.\d*)?)
  | (?P<string>"[^"]*"|'[^']*')
  | (?P<name>[A-Za-z_][\w.:-]*)
  | (?P<other>.)
""", re.VERBOSE | re.DOTALL)

_Token = namedtuple('_Token', 'kind text')

# axis is one of: child, descendant (the '//' abbreviation), self, parent
Step = namedtuple('Step', 'axis name_test predicates')
Predicate = namedtuple('Predicate', 'kind name value')
XPathExpression = namedtuple('XPathExpression', 'source absolute steps')


class _XPathParser:
    """Recursive-descent parser for one expression."""

    def __init__(self, expression: str):
        self.expression = expression
        self.tokens = [
            _Token(match.lastgroup, match.group())
            for match in _TOKEN_RE.finditer(expression)
            if match.lastgroup != 'ws'
        ]
        self.pos = 0

    def _peek(self) -> Optional[str]:
        if self.pos < len(self.tokens):
            return self.tokens[self.pos].kind
        return None

    def _next(self) -> _Token:
        if self.pos >= len(self.tokens):
            last = self.tokens[-1].text if self.tokens else ""
            raise XPathParseError(self.expression, last, "unexpected end of expression after")
        token = self.tokens[self.pos]
        self.pos += 1
        return token

    def _expect(self, kind: str) -> _Token:
        token = self._next()
        if token.kind != kind:
            self._unsupported(token)
        return token

    def _unsupported(self, token: _Token) -> None:
        if token.kind == 'other' and token.text in ('"', "'"):
            raise XPathParseError(self.expression, self.expression[self.expression.rfind(token.text):],
                                  "unterminated string")
        raise XPathParseError(self.expression, token.text)

    def _string(self) -> str:
        token = self._next()
        if token.kind != 'string':
            self._unsupported(token)
        return token.text[1:-1]

    def parse(self) -> XPathExpression:
        if not self.tokens:
            raise XPathParseError(self.expression, self.expression, "empty expression")

        absolute = False
        axis = 'child'
        if self._peek() == 'slash':
            self._next()
            absolute = True
            if self._peek() is None:
                raise XPathParseError(self.expression, "/", "empty location path")
        elif self._peek() == 'dslash':
            self._next()
            absolute = True
            axis = 'descendant'

        steps = [self._step(axis)]
        while self._peek() is not None:
            token = self._next()
            if token.kind == 'slash':
                steps.append(self._step('child'))
            elif token.kind == 'dslash':
                steps.append(self._step('descendant'))
            else:
                self._unsupported(token)

        return XPathExpression(self.expression, absolute, tuple(steps))

    def _step(self, axis: str) -> Step:
        token = self._next()

        if token.kind in ('dot', 'dotdot'):
            if axis == 'descendant':
                raise XPathParseError(self.expression, "//" + token.text)
            return Step('self' if token.kind == 'dot' else 'parent', '*', ())

        if token.kind == 'axis':
            if token.text != 'child::':
                raise XPathParseError(self.expression, token.text, "unsupported axis")
            token = self._next()

        if token.kind == 'star':
            name_test = '*'
        elif token.kind == 'name':
            if self._peek() == 'lparen':
                raise XPathParseError(self.expression, f"{token.text}()", "unsupported node test")
            name_test = token.text.lower()
        elif token.kind == 'at':
            raise XPathParseError(self.expression, "@", "unsupported attribute step")
        else:
            self._unsupported(token)

        predicates = []
        while self._peek() == 'lbracket':
            self._next()
            predicates.append(self._predicate())
            self._expect('rbracket')

        return Step(axis, name_test, tuple(predicates))

    def _predicate(self) -> Predicate:
        token = self._next()

        if token.kind == 'number':
            if '.' in token.text:
                raise XPathParseError(self.expression, token.text, "position must be an integer, got")
            return Predicate('position', None, int(token.text))

        if token.kind == 'at':
            name = self._expect('name').text.lower()
            if self._peek() == 'eq':
                self._next()
                return Predicate('attr_equals', name, self._string())
            return Predicate('attr_exists', name, None)

        if token.kind == 'name':
            function = token.text
            if self._peek() != 'lparen':
                raise XPathParseError(self.expression, function, "unsupported predicate")
            self._next()

            if function == 'last':
                self._expect('rparen')
                return Predicate('last', None, None)

            if function == 'text':
                self._expect('rparen')
                self._expect('eq')
                return Predicate('text_equals', None, self._string())

            if function == 'contains':
                target = self._next()
                if target.kind == 'at':
                    kind, name = 'contains_attr', self._expect('name').text.lower()
                elif target.kind == 'name' and target.text == 'text':
                    self._expect('lparen')
                    self._expect('rparen')
                    kind, name = 'contains_text', None
                else:
                    self._unsupported(target)
                self._expect('comma')
                value = self._string()
                self._expect('rparen')
                return Predicate(kind, name, value)

            raise XPathParseError(self.expression, f"{function}()", "unsupported function")

        self._unsupported(token)


def _direct_texts(element) -> List[str]:
    return [child.data for child in element.child_nodes if child.node_type == NodeType.TEXT_NODE]


class XPathEngine:
    """
    XPath Engine for element queries.

    Parsed expressions are cached; the engine holds no other state, so one
    instance can serve many documents and threads.
    """

    def __init__(self):
        """Initialize the XPath engine."""
        self._expression_cache: Dict[str, XPathExpression] = {}
        self._cache_lock = threading.Lock()

    def parse(self, expression: str) -> XPathExpression:
        """
        Parse an expression, using the cache if available.

        Args:
            expression: The XPath expression

        Returns:
            The parsed expression

        Raises:
            XPathParseError: If the expression is malformed or unsupported
        """
        with self._cache_lock:
            parsed = self._expression_cache.get(expression)
        if parsed is not None:
            return parsed

        parsed = _XPathParser(expression).parse()
        with self._cache_lock:
            self._expression_cache[expression] = parsed
        logger.debug(f"Parsed XPath {expression!r} into {len(parsed.steps)} steps")
        return parsed

    def select(self, expression: str, context: Node) -> List['Element']:
        """
        Find all elements matching an expression.

        Args:
            expression: The XPath expression
            context: The node relative paths start from

        Returns:
            List of matching elements in document order, without duplicates
        """
        parsed = self.parse(expression)

        root = context
        while root.parent_node is not None:
            root = root.parent_node
        order = {id(node): index for index, node in enumerate(root.iter_descendants(), 1)}
        order[id(root)] = 0

        nodes = [root] if parsed.absolute else [context]
        for step in parsed.steps:
            nodes = self._apply_step(step, nodes, order)
            if not nodes:
                break

        # The synthetic root is never a result
        return [node for node in nodes if not node.is_root]

    def _apply_step(self, step: Step, nodes: List[Node], order: Dict[int, int]) -> List[Node]:
        if step.axis == 'self':
            return nodes

        if step.axis == 'parent':
            parents = [node.parent_node for node in nodes if node.parent_node is not None]
            return self._in_document_order(parents, order)

        if step.axis == 'descendant':
            contexts = []
            covered = None
            for node in nodes:
                # nodes are in document order, so a node inside the last
                # expanded subtree has already been collected
                if covered is not None and covered.contains(node):
                    continue
                covered = node
                contexts.append(node)
                contexts.extend(descendant for descendant in node.iter_descendants()
                                if descendant.node_type == NodeType.ELEMENT_NODE)
        else:
            contexts = nodes

        matched = []
        for parent in contexts:
            candidates = [child for child in parent.children
                          if step.name_test == '*' or child.tag_name == step.name_test]
            for predicate in step.predicates:
                if not candidates:
                    break
                candidates = self._filter(candidates, predicate)
            matched.extend(candidates)

        return self._in_document_order(matched, order)

    def _filter(self, candidates: List['Element'], predicate: Predicate) -> List['Element']:
        kind = predicate.kind
        if kind == 'position':
            if predicate.value < 1:
                return []
            return candidates[predicate.value - 1:predicate.value]
        if kind == 'last':
            return candidates[-1:]
        if kind == 'attr_exists':
            return [element for element in candidates if element.has_attribute(predicate.name)]
        if kind == 'attr_equals':
            return [element for element in candidates
                    if element.get_attribute(predicate.name) == predicate.value]
        if kind == 'contains_attr':
            # A missing attribute compares as ""
            return [element for element in candidates
                    if predicate.value in element.get_attribute(predicate.name, "")]
        if kind == 'text_equals':
            return [element for element in candidates if predicate.value in _direct_texts(element)]
        if kind == 'contains_text':
            # XPath compares the first text child only
            return [element for element in candidates
                    if predicate.value in (_direct_texts(element) or [""])[0]]
        raise ValueError(f"Unknown predicate kind: {kind}")

    @staticmethod
    def _in_document_order(nodes: List[Node], order: Dict[int, int]) -> List[Node]:
        unique = {id(node): node for node in nodes}
        return sorted(unique.values(), key=lambda node: order[id(node)])


default_engine = XPathEngine()

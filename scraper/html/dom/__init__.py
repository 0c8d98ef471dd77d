"""
Document tree for parsed HTML.
This package provides read-only nodes, the Document with its lookup indexes,
and the XPath engine.
"""

from .node import Node, NodeType
from .element import Element
from .text import Text
from .comment import Comment
from .xpath_engine import XPathEngine
from .document import Document

__all__ = [
    'Node', 'NodeType', 'Element', 'Text', 'Comment', 'Document', 'XPathEngine'
]

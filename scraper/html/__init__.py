"""
HTML parsing and querying.
"""

from .dom import Comment, Document, Element, Node, NodeType, Text

__all__ = ['Comment', 'Document', 'Element', 'Node', 'NodeType', 'Text']

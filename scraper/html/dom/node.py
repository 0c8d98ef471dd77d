"""
Node implementation for the document tree.
This module implements the base Node shared by elements, text and comments.
"""

from enum import IntEnum
from typing import List, Optional, Iterator, Tuple


class NodeType(IntEnum):
    """Node types, numbered as in the DOM."""
    ELEMENT_NODE = 1
    TEXT_NODE = 3
    COMMENT_NODE = 8


class Node:
    """
    Base Node implementation for the document tree.

    Nodes are built once by the tree builder and are read-only afterwards:
    navigation is exposed, mutation is not.
    """

    def __init__(self, node_type: NodeType):
        """
        Initialize a new Node.

        Args:
            node_type: The type of this node
        """
        self.node_type = node_type
        self.node_name: str = "#node"

        # Node relationships
        self.parent_node: Optional['Element'] = None
        self.previous_sibling: Optional['Node'] = None
        self.next_sibling: Optional['Node'] = None
        self._child_nodes: List['Node'] = []

    @property
    def child_nodes(self) -> Tuple['Node', ...]:
        """Get all child nodes, in document order."""
        return tuple(self._child_nodes)

    @property
    def children(self) -> List['Element']:
        """Get a list of child elements."""
        return [child for child in self._child_nodes if child.node_type == NodeType.ELEMENT_NODE]

    @property
    def first_child(self) -> Optional['Node']:
        return self._child_nodes[0] if self._child_nodes else None

    @property
    def last_child(self) -> Optional['Node']:
        return self._child_nodes[-1] if self._child_nodes else None

    @property
    def child_element_count(self) -> int:
        """Get the number of child elements."""
        return sum(1 for child in self._child_nodes if child.node_type == NodeType.ELEMENT_NODE)

    def has_child_nodes(self) -> bool:
        """Check if this node has any child nodes."""
        return len(self._child_nodes) > 0

    def _append_child(self, child: 'Node') -> 'Node':
        """
        Append a child node to this node.

        Only the tree builder calls this, while the tree is being built.

        Args:
            child: The node to append

        Returns:
            The appended node
        """
        child.parent_node = self

        if self._child_nodes:
            last_child = self._child_nodes[-1]
            last_child.next_sibling = child
            child.previous_sibling = last_child

        self._child_nodes.append(child)
        return child

    def iter_descendants(self) -> Iterator['Node']:
        """
        Iterate over all descendant nodes in document (pre-)order.

        The node itself is not included.
        """
        stack = list(reversed(self._child_nodes))
        while stack:
            node = stack.pop()
            yield node
            if node._child_nodes:
                stack.extend(reversed(node._child_nodes))

    def contains(self, other: Optional['Node']) -> bool:
        """
        Check if this node contains another node.

        Args:
            other: The node to check

        Returns:
            True if ``other`` is this node or one of its descendants
        """
        current = other
        while current is not None:
            if current is self:
                return True
            current = current.parent_node
        return False

    @property
    def text_content(self) -> str:
        """
        Get the text of all descendant text nodes, in document order.
        """
        return "".join(node.data for node in self.iter_descendants()
                       if node.node_type == NodeType.TEXT_NODE)

    @property
    def outer_html(self) -> str:
        raise NotImplementedError

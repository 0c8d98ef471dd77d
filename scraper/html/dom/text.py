"""
Text node implementation for the document tree.
"""

from .node import Node, NodeType
from ..parser.constants import RAW_TEXT_ELEMENTS
from ..parser.entities import escape_text


class Text(Node):
    """
    Text node implementation.

    This class represents a run of character data in the tree.
    """

    def __init__(self, data: str):
        """
        Initialize a text node.

        Args:
            data: The decoded text content
        """
        super().__init__(NodeType.TEXT_NODE)

        if data is None:
            data = ""

        self.node_name = "#text"
        self.data = data

    @property
    def length(self) -> int:
        return len(self.data)

    @property
    def text_content(self) -> str:
        return self.data

    @property
    def outer_html(self) -> str:
        """Serialize the text, escaped unless it is script or style content."""
        parent = self.parent_node
        if parent is not None and getattr(parent, 'tag_name', None) in RAW_TEXT_ELEMENTS:
            return self.data
        return escape_text(self.data)

    def __repr__(self) -> str:
        return f"<Text {self.data!r}>"

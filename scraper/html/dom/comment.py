"""
Comment node implementation for the document tree.
"""

from .node import Node, NodeType


class Comment(Node):
    """Comment node, holding the text between ``<!--`` and ``-->``."""

    def __init__(self, data: str):
        super().__init__(NodeType.COMMENT_NODE)

        if data is None:
            data = ""

        self.node_name = "#comment"
        self.data = data

    @property
    def text_content(self) -> str:
        # Comments do not contribute to an element's text
        return ""

    @property
    def outer_html(self) -> str:
        return f"<!--{self.data}-->"

    def __repr__(self) -> str:
        return f"<Comment {self.data!r}>"

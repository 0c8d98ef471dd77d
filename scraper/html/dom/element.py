"""
Element implementation for the document tree.
This module implements HTML elements: attributes, scoped lookups and
serialization back to HTML.
"""

from types import MappingProxyType
from typing import Dict, List, Mapping, Optional, Tuple

from .node import Node, NodeType
from ..parser.constants import ROOT_TAG, VOID_ELEMENTS
from ..parser.entities import escape_attribute


class Element(Node):
    """
    Element node implementation.

    Tag and attribute names are stored lower-cased; attributes keep the
    order in which they appeared in the source.
    """

    def __init__(self, tag_name: str, attributes: Optional[Dict[str, str]] = None):
        """
        Initialize a new Element.

        Args:
            tag_name: Name of the element tag (e.g., "div", "span")
            attributes: Attribute names mapped to their decoded values
        """
        super().__init__(NodeType.ELEMENT_NODE)

        self.tag_name = tag_name.lower()
        self.node_name = self.tag_name.upper()

        self._attributes: Dict[str, str] = {}
        for name, value in (attributes or {}).items():
            self._attributes.setdefault(name.lower(), value)

        # Flag for whether this is a void element (self-closing)
        self.is_void_element = self.tag_name in VOID_ELEMENTS

    @property
    def is_root(self) -> bool:
        """Whether this is the synthetic element at the top of a tree."""
        return self.parent_node is None and self.tag_name == ROOT_TAG

    @property
    def attributes(self) -> Mapping[str, str]:
        """Get a read-only view of the element's attributes."""
        return MappingProxyType(self._attributes)

    @property
    def id(self) -> str:
        """Get the ID of the element."""
        return self._attributes.get('id', "")

    @property
    def class_name(self) -> str:
        """Get the class attribute of the element."""
        return self._attributes.get('class', "")

    @property
    def class_list(self) -> Tuple[str, ...]:
        """Get the classes applied to this element, without repeats."""
        return tuple(dict.fromkeys(self.class_name.split()))

    def has_attribute(self, name: str) -> bool:
        """
        Check if the element has the specified attribute.

        Args:
            name: The attribute name (case-insensitive)

        Returns:
            True if the attribute exists, False otherwise
        """
        return name.lower() in self._attributes

    def get_attribute(self, name: str, default: Optional[str] = None) -> Optional[str]:
        """
        Get the value of an attribute.

        Args:
            name: The attribute name (case-insensitive)
            default: Value returned when the attribute is missing

        Returns:
            The attribute value, or ``default`` if the attribute doesn't exist
        """
        return self._attributes.get(name.lower(), default)

    def has_attributes(self) -> bool:
        """Check if the element has any attributes."""
        return bool(self._attributes)

    def iter_elements(self):
        """Iterate over descendant elements in document order."""
        for node in self.iter_descendants():
            if node.node_type == NodeType.ELEMENT_NODE:
                yield node

    def get_elements_by_tag_name(self, tag_name: str) -> List['Element']:
        """
        Get all descendant elements with the given tag name.

        Args:
            tag_name: The tag name to match (case-insensitive), or "*"

        Returns:
            List of matching elements in document order
        """
        if tag_name == "*":
            return list(self.iter_elements())

        tag_name_lower = tag_name.lower()
        return [element for element in self.iter_elements() if element.tag_name == tag_name_lower]

    def get_elements_by_class_name(self, class_name: str) -> List['Element']:
        """
        Get all descendant elements with the given class name.

        Args:
            class_name: The class name to match

        Returns:
            List of matching elements in document order
        """
        return [element for element in self.iter_elements() if class_name in element.class_list]

    def xpath(self, expression: str) -> List['Element']:
        """
        Evaluate an XPath expression with this element as the context node.

        Args:
            expression: The XPath expression

        Returns:
            List of matching elements in document order
        """
        from .xpath_engine import default_engine
        return default_engine.select(expression, self)

    def _start_tag(self) -> str:
        parts = [self.tag_name]
        for name, value in self._attributes.items():
            parts.append(f'{name}="{escape_attribute(value)}"')
        return "<" + " ".join(parts) + ">"

    @property
    def inner_html(self) -> str:
        """Get the HTML content of the element."""
        result: List[str] = []

        # Walk with an explicit stack so deep trees don't hit the recursion limit
        stack = [(child, False) for child in reversed(self._child_nodes)]
        while stack:
            node, closing = stack.pop()
            if closing:
                result.append(f"</{node.tag_name}>")
            elif node.node_type != NodeType.ELEMENT_NODE:
                result.append(node.outer_html)
            else:
                result.append(node._start_tag())
                if node.is_void_element:
                    continue
                stack.append((node, True))
                stack.extend((child, False) for child in reversed(node._child_nodes))

        return "".join(result)

    @property
    def outer_html(self) -> str:
        """Get the outer HTML of the element, including the element itself."""
        if self.is_root:
            return self.inner_html
        if self.is_void_element:
            return self._start_tag()
        return f"{self._start_tag()}{self.inner_html}</{self.tag_name}>"

    def __repr__(self) -> str:
        attrs = "".join(f' {name}="{value}"' for name, value in self._attributes.items())
        return f"<Element {self.tag_name}{attrs}>"

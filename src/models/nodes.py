"""
Element tree built by the parser

The tree is owned top-down: a node holds its children strongly and its
parent through a weak reference, so closing a scope is just moving the
"current" pointer back to a parent and no reference cycle is formed.

Example:
    For message "<red>hi</red>":
    RootNode {
      TagNode('red') {
        TextNode('hi')
      }
    }
"""

import weakref
from typing import List, Optional, TYPE_CHECKING

from .parser import Token, TagPart
from .component import Component, plain_text

if TYPE_CHECKING:
    from .tags import Tag
    from ..lib.placeholders import Replacement


class ElementNode:
    """
    Base node of the element tree

    Attributes:
        token: Token the node was built from (None for the root)
        source_message: The message the token indexes into
        depth: Number of ancestors (0 for the root)
    """

    def __init__(self, parent: Optional['ElementNode'], token: Optional[Token], source_message: str):
        self._parent = weakref.ref(parent) if parent is not None else None
        self.token = token
        self.source_message = source_message
        self.depth = parent.depth + 1 if parent is not None else 0
        self._children: List['ElementNode'] = []

    @property
    def parent(self) -> Optional['ElementNode']:
        return self._parent() if self._parent is not None else None

    @property
    def children(self) -> List['ElementNode']:
        return list(self._children)

    def add_child(self, child: 'ElementNode') -> None:
        self._children.append(child)

    def ancestors(self):
        """Yield the parent, grandparent, ... up to and including the root"""
        node = self.parent
        while node is not None:
            yield node
            node = node.parent

    def node_describe(self) -> str:
        return "Node"

    def build_string(self, indent: int = 0) -> str:
        """Render the subtree as indented lines"""
        pad = "  " * indent
        if not self._children:
            return pad + self.node_describe()
        lines = [pad + self.node_describe() + " {"]
        for child in self._children:
            lines.append(child.build_string(indent + 1))
        lines.append(pad + "}")
        return "\n".join(lines)

    def __str__(self) -> str:
        return self.build_string()


class RootNode(ElementNode):
    """
    Root of a parsed message

    Attributes:
        source_message: Message after placeholder pre-processing
        input: Message as passed by the caller
    """

    def __init__(self, source_message: str, input: Optional[str] = None):
        super().__init__(None, None, source_message)
        self.input = input if input is not None else source_message

    def node_describe(self) -> str:
        return "RootNode"


class ValueNode(ElementNode):
    """A leaf that carries literal text"""

    def __init__(self, parent: ElementNode, token: Optional[Token], source_message: str, value: str):
        super().__init__(parent, token, source_message)
        self.value = value

    def node_describe(self) -> str:
        return f"{type(self).__name__}({self.value!r})"


class TextNode(ValueNode):
    """Literal text from the message, already unescaped"""
    pass


class PlaceholderNode(ValueNode):
    """
    A placeholder replacement inserted without being reparsed

    value is the replacement string, or the plain text of a component
    replacement.
    """

    def __init__(self, parent: ElementNode, token: Token, source_message: str, replacement: 'Replacement'):
        self.replacement = replacement
        literal = replacement.value
        if isinstance(literal, Component):
            literal = plain_text(literal)
        super().__init__(parent, token, source_message, literal)

    @property
    def component(self) -> Optional[Component]:
        """The component replacement, or None for a string replacement"""
        value = self.replacement.value
        return value if isinstance(value, Component) else None


class TagNode(ElementNode):
    """
    An opened tag and the content between it and its close

    Attributes:
        parts: Name followed by the arguments, unescaped
        tag: Resolved tag, set by the parser once the factory accepted the parts
        closed: Whether the tag has been sealed
    """

    def __init__(self, parent: ElementNode, token: Token, source_message: str, parts: List[TagPart]):
        super().__init__(parent, token, source_message)
        if not parts:
            raise RuntimeError("A tag node must have at least a name")
        self.parts = parts
        self.tag: Optional['Tag'] = None
        self.closed = False

    @property
    def name(self) -> str:
        """Lower-cased tag name"""
        return self.parts[0].value.lower()

    @property
    def arguments(self) -> List[TagPart]:
        return self.parts[1:]

    def close(self) -> None:
        self.closed = True

    def add_child(self, child: ElementNode) -> None:
        if self.closed:
            raise RuntimeError(f"Tag '{self.name}' is already closed")
        super().add_child(child)

    def node_describe(self) -> str:
        return "TagNode(" + ", ".join(repr(p.value) for p in self.parts) + ")"

"""
Compiler from element tree to component

Applies the resolved tags of a parsed tree and assembles the final
component.
"""

from typing import Any, Optional

from ..models.nodes import ElementNode, ValueNode, PlaceholderNode, TagNode
from ..models.tags import Modifying, TagKind
from ..models.component import (
    Component, TextComponent, HoverAction, text,
)
from .errors import StructureError
from .log import LOG


class Compiler:
    """
    Compiles an element tree to a component

    Responsibilities:
    - Turn text and placeholder nodes into text components
    - Insert the value of inserting tags, with their content as children
    - Run the visit / post_visit / apply protocol of modifying tags
    - Reject components that would become part of their own hover text
    - Flatten the result
    """

    def __init__(self, root: ElementNode) -> None:
        """
        Initialize compiler

        Args:
            root: Root of a tree built by the parser
        """
        self.root = root

    def compile(self) -> Component:
        """
        Compile the tree

        Returns:
            The flattened component

        Raises:
            StructureError: If a component would be nested in its own hover text
        """
        LOG("Starting tag application...", level=3)
        component = self.node_compile(self.root)
        return component_flatten(component)

    def node_compile(self, node: ElementNode) -> Component:
        """
        Compile a single node and its subtree

        Children are compiled first and appended to the node's own
        component; a modifying tag then rewrites the assembled subtree.

        Args:
            node: Node to compile

        Returns:
            Component for this node
        """
        component: Optional[Component] = None
        modifying: Optional[Modifying] = None

        if isinstance(node, PlaceholderNode) and node.component is not None:
            self.hoverCycle_check(node, node.component)
            component = node.component
        elif isinstance(node, ValueNode):
            component = text(node.value)
        elif isinstance(node, TagNode):
            tag = node.tag
            if tag is None:
                raise RuntimeError(f"Tag node '{node.name}' was never resolved")
            if tag.kind is TagKind.INSERTING:
                component = tag.value()
                self.hoverCycle_check(node, component)
            elif tag.kind is TagKind.MODIFYING:
                modifying = tag
                self.modifying_visit(modifying, node, 0)
                modifying.post_visit()
                LOG(f"<{node.name}> visited its subtree", level=3)
            else:
                raise RuntimeError(f"Parser directive '{node.name}' found in the element tree")

        if component is None:
            component = text("")

        children = [self.node_compile(child) for child in node.children]
        if children:
            component = component.with_children(component.children + tuple(children))

        if modifying is not None:
            component = self.modifying_apply(modifying, component, 0)
        return component

    def modifying_visit(self, tag: Modifying, node: ElementNode, depth: int) -> None:
        """Visit node and its descendants in document order"""
        tag.visit(node, depth)
        for child in node.children:
            self.modifying_visit(tag, child, depth + 1)

    def modifying_apply(self, tag: Modifying, current: Component, depth: int) -> Component:
        """Apply the tag to current, then to each of its children one level deeper"""
        result = tag.apply(current, depth)
        for child in current.children:
            result = result.append(self.modifying_apply(tag, child, depth + 1))
        return result

    def hoverCycle_check(self, node: ElementNode, component: Any) -> None:
        """
        Reject a component that is the hover text of an enclosing tag

        The check is by identity: the inserted component must not be the
        show_text payload of any ancestor, nor part of it.
        """
        for ancestor in node.ancestors():
            if not isinstance(ancestor, TagNode) or ancestor.tag is None:
                continue
            if ancestor.tag.kind is not TagKind.INSERTING:
                continue
            hover = ancestor.tag.value().style.hover_event
            if hover is None or hover.action is not HoverAction.SHOW_TEXT:
                continue
            if any(part is component for part in hover.value.walk()):
                raise StructureError(
                    f"<{ancestor.name}> would contain its own hover text"
                )


def component_flatten(component: Component) -> Component:
    """
    Remove the empty wrapper left around the top level of a message

    An unstyled empty text root with a single child becomes that child.
    Otherwise, if its first child is childless unstyled text, the root
    takes over that text.

    Example:
        text("", children=[text("hi")])  ->  text("hi")
    """
    if not isinstance(component, TextComponent) or component.content or component.has_styling():
        return component
    if len(component.children) == 1:
        return component.children[0]
    if component.children:
        first = component.children[0]
        if isinstance(first, TextComponent) and not first.has_styling() and not first.children:
            return text(first.content, children=component.children[1:])
    return component

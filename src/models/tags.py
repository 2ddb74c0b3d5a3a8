"""
Tag specification and capability models

A resolved tag is one of three kinds, told apart by its `kind`
discriminant rather than by class checks:

    INSERTING         produces one component; may own following content
    MODIFYING         sees its whole subtree, then rewrites each node
    PARSER_DIRECTIVE  changes the parser state and never enters the tree

Tag factories receive their arguments through an ArgumentQueue and a
per-parse Context.
"""

import math
import re
from abc import ABC, abstractmethod
from enum import Enum
from dataclasses import dataclass, field
from typing import Any, Callable, ClassVar, List, Optional, Set, TYPE_CHECKING

from .parser import Token
from .component import Component, Style, text

if TYPE_CHECKING:
    from .nodes import ElementNode


class TagKind(Enum):
    INSERTING = "inserting"
    MODIFYING = "modifying"
    PARSER_DIRECTIVE = "parser_directive"


class Tag(ABC):
    """Base of the three tag kinds"""
    kind: ClassVar[TagKind]


class Inserting(Tag):
    """A tag that contributes a single component at its position"""
    kind = TagKind.INSERTING

    @abstractmethod
    def value(self) -> Component:
        ...

    def allows_children(self) -> bool:
        """False for self-closing tags such as <newline>"""
        return True


class Modifying(Tag):
    """
    A tag that transforms its subtree in two phases

    visit() is called for the tag node itself and every descendant in
    document order, then post_visit() once. apply() is then called for
    each component assembled below the tag.
    """
    kind = TagKind.MODIFYING

    def visit(self, node: 'ElementNode', depth: int) -> None:
        pass

    def post_visit(self) -> None:
        pass

    @abstractmethod
    def apply(self, current: Component, depth: int) -> Component:
        ...


class ParserDirective(Tag):
    """A tag the parser acts on directly"""
    kind = TagKind.PARSER_DIRECTIVE
    RESET: ClassVar['ParserDirective']

    def __init__(self, name: str):
        self.name = name

    def __repr__(self) -> str:
        return f"ParserDirective({self.name!r})"


ParserDirective.RESET = ParserDirective("reset")


class StylingTag(Inserting):
    """Inserts an empty component that carries a style for its children"""

    def __init__(self, style: Style):
        self.style = style

    def value(self) -> Component:
        return text("", style=self.style)


class InsertingTag(Inserting):
    """Inserts a fixed component"""

    def __init__(self, component: Component, children: bool = True):
        self.component = component
        self.children = children

    def value(self) -> Component:
        return self.component

    def allows_children(self) -> bool:
        return self.children


_INT_PATTERN = re.compile(r'^[+-]?\d+$')


@dataclass(frozen=True)
class Argument:
    """
    One tag argument

    Derived views are computed on every call.

    Attributes:
        value: Unescaped argument text
        token: Source token, used to point at the argument in errors
    """
    value: str
    token: Optional[Token] = field(default=None, compare=False)

    def lower_value(self) -> str:
        return self.value.lower()

    def is_true(self) -> bool:
        return self.lower_value() in ("true", "on")

    def is_false(self) -> bool:
        return self.lower_value() in ("false", "off")

    def as_int(self) -> Optional[int]:
        if _INT_PATTERN.match(self.value):
            return int(self.value)
        return None

    def as_float(self) -> Optional[float]:
        if "_" in self.value:
            return None
        try:
            value = float(self.value)
        except ValueError:
            return None
        return value if math.isfinite(value) else None

    def __str__(self) -> str:
        return self.value


@dataclass
class Context:
    """
    Per-parse state handed to tag factories

    Attributes:
        message: Message being parsed, after placeholder pre-processing
        strict: Whether the parse is strict
        deserializer: Parses nested markup (hover text, translation arguments)
                      with the same tags and placeholders
    """
    message: str
    strict: bool = False
    deserializer: Optional[Callable[[str], Component]] = None

    def deserialize(self, message: str) -> Component:
        if self.deserializer is None:
            return text(message)
        return self.deserializer(message)

    def new_error(self, message: str, arguments: Any = ()) -> Exception:
        """Build a ParsingError pointing at the given arguments"""
        from ..lib.errors import ParsingError

        if isinstance(arguments, ArgumentQueue):
            arguments = arguments.consumed()
        tokens = [a.token for a in arguments if a.token is not None]
        return ParsingError(message, self.message, tokens)


class ArgumentQueue:
    """
    The arguments of a tag, consumed front to back

    Example:
        >>> queue = ArgumentQueue(Context("<c:red>"), [Argument("red")])
        >>> queue.pop().value
        'red'
        >>> queue.has_next()
        False
    """

    def __init__(self, context: Context, arguments: List[Argument]):
        self.context = context
        self.arguments = list(arguments)
        self.index = 0

    def pop(self) -> Argument:
        return self.pop_or("Missing argument for this tag")

    def pop_or(self, error_message: str) -> Argument:
        """Take the next argument, raising ParsingError if there is none"""
        if not self.has_next():
            raise self.context.new_error(error_message, self)
        argument = self.arguments[self.index]
        self.index += 1
        return argument

    def peek(self) -> Optional[Argument]:
        return self.arguments[self.index] if self.has_next() else None

    def has_next(self) -> bool:
        return self.index < len(self.arguments)

    def remaining(self) -> List[Argument]:
        return self.arguments[self.index:]

    def consumed(self) -> List[Argument]:
        return self.arguments[:self.index] if self.index else list(self.arguments)

    def reset(self) -> None:
        self.index = 0

    def __len__(self) -> int:
        return len(self.arguments)


class TagCategory(Enum):
    """
    Categories of tags

    Used for organization and for the CLI tag listing.
    """
    COLOR = "color"              # <red>, <#ff00ff>, <color:...>
    DECORATION = "decoration"    # <bold>, <italic>, ...
    EVENT = "event"              # <click>, <hover>
    INSERTION = "insertion"      # <insert>, <font>
    COMPONENT = "component"      # <lang>, <key>, <newline>
    MODIFYING = "modifying"      # <gradient>, <rainbow>
    DIRECTIVE = "directive"      # <reset>


TagFactory = Callable[[str, ArgumentQueue, Context], Optional[Tag]]


@dataclass
class TagSpec:
    """
    Specification for a tag

    Attributes:
        name: Tag name, lower case
        category: Category for organization
        description: Human-readable description
        factory: Builds the tag from (name, arguments, context); raises
                 ParsingError when the arguments are unusable
        aliases: Alternative names for the tag
        matcher: Predicate for tags whose names form a family (e.g. #rrggbb)
        examples: Example usage strings
    """
    name: str
    category: TagCategory
    description: str
    factory: TagFactory
    aliases: List[str] = field(default_factory=list)
    matcher: Optional[Callable[[str], bool]] = None
    examples: List[str] = field(default_factory=list)

    def matches(self, tag_name: str) -> bool:
        """
        Check if this spec handles a tag name

        Args:
            tag_name: Lower-cased name to check

        Returns:
            True for the name, an alias or a name accepted by the matcher
        """
        if self.name == tag_name:
            return True
        if tag_name in self.aliases:
            return True
        if self.matcher is not None:
            return self.matcher(tag_name)
        return False


# Names the parser handles itself
RESERVED_TAGS: Set[str] = {
    'reset',
    'r',
}


def reset_is(tag_name: str) -> bool:
    """Check if a tag name is the reset directive"""
    return tag_name.lower() in RESERVED_TAGS


TAG_NAME_PATTERN = re.compile(r'^[!?#]?[a-z0-9_-]*$')


def tag_name_valid(tag_name: str) -> bool:
    """Check if a lower-cased tag name is syntactically a tag name"""
    return TAG_NAME_PATTERN.match(tag_name) is not None

"""
Styled text value model

Immutable components produced by the tag application pass. A component has
a style and an ordered tuple of children; children inherit the style of
their parent when rendered.

Example:
    >>> c = text("Hello ", color=NAMED_COLORS["red"]).append(text("world"))
    >>> plain_text(c)
    'Hello world'
"""

import math
import re
from enum import Enum
from dataclasses import dataclass, field, fields, replace
from typing import Any, Dict, Iterator, Optional, Tuple


_HEX_PATTERN = re.compile(r'^#([0-9a-fA-F]{6})$')


@dataclass(frozen=True)
class TextColor:
    """A 24-bit RGB colour"""
    value: int

    @property
    def red(self) -> int:
        return (self.value >> 16) & 0xFF

    @property
    def green(self) -> int:
        return (self.value >> 8) & 0xFF

    @property
    def blue(self) -> int:
        return self.value & 0xFF

    def as_hex_string(self) -> str:
        return f"#{self.value:06x}"

    @staticmethod
    def from_rgb(red: int, green: int, blue: int) -> 'TextColor':
        """Create a colour from channels, each masked to 8 bits"""
        return TextColor(((red & 0xFF) << 16) | ((green & 0xFF) << 8) | (blue & 0xFF))

    @staticmethod
    def from_hex_string(value: str) -> Optional['TextColor']:
        """Parse '#rrggbb', returning None when the string is not a hex colour"""
        match = _HEX_PATTERN.match(value)
        if not match:
            return None
        return TextColor(int(match.group(1), 16))

    @staticmethod
    def lerp(t: float, a: 'TextColor', b: 'TextColor') -> 'TextColor':
        """
        Linearly interpolate between two colours

        Args:
            t: Position between a (0.0) and b (1.0), clamped to that range
            a: Start colour
            b: End colour
        """
        t = min(1.0, max(0.0, t))

        def channel(x: int, y: int) -> int:
            return math.floor(x + t * (y - x) + 0.5)

        return TextColor.from_rgb(
            channel(a.red, b.red),
            channel(a.green, b.green),
            channel(a.blue, b.blue),
        )

    def __str__(self) -> str:
        return self.as_hex_string()


@dataclass(frozen=True)
class NamedTextColor(TextColor):
    """One of the sixteen standard colours"""
    name: str = ""

    def __str__(self) -> str:
        return self.name


NAMED_COLORS: Dict[str, NamedTextColor] = {
    color.name: color
    for color in (
        NamedTextColor(0x000000, "black"),
        NamedTextColor(0x0000AA, "dark_blue"),
        NamedTextColor(0x00AA00, "dark_green"),
        NamedTextColor(0x00AAAA, "dark_aqua"),
        NamedTextColor(0xAA0000, "dark_red"),
        NamedTextColor(0xAA00AA, "dark_purple"),
        NamedTextColor(0xFFAA00, "gold"),
        NamedTextColor(0xAAAAAA, "gray"),
        NamedTextColor(0x555555, "dark_gray"),
        NamedTextColor(0x5555FF, "blue"),
        NamedTextColor(0x55FF55, "green"),
        NamedTextColor(0x55FFFF, "aqua"),
        NamedTextColor(0xFF5555, "red"),
        NamedTextColor(0xFF55FF, "light_purple"),
        NamedTextColor(0xFFFF55, "yellow"),
        NamedTextColor(0xFFFFFF, "white"),
    )
}


class TextDecoration(Enum):
    OBFUSCATED = "obfuscated"
    BOLD = "bold"
    STRIKETHROUGH = "strikethrough"
    UNDERLINED = "underlined"
    ITALIC = "italic"


class ClickAction(Enum):
    OPEN_URL = "open_url"
    OPEN_FILE = "open_file"
    RUN_COMMAND = "run_command"
    SUGGEST_COMMAND = "suggest_command"
    CHANGE_PAGE = "change_page"
    COPY_TO_CLIPBOARD = "copy_to_clipboard"


@dataclass(frozen=True)
class ClickEvent:
    action: ClickAction
    value: str


class HoverAction(Enum):
    SHOW_TEXT = "show_text"
    SHOW_ITEM = "show_item"
    SHOW_ENTITY = "show_entity"


@dataclass(frozen=True)
class ShowItem:
    item: str
    count: int = 1


@dataclass(frozen=True)
class ShowEntity:
    type: str
    id: str
    name: Optional['Component'] = None


@dataclass(frozen=True)
class HoverEvent:
    """
    Hover payload

    value is a Component for SHOW_TEXT, a ShowItem for SHOW_ITEM and a
    ShowEntity for SHOW_ENTITY.
    """
    action: HoverAction
    value: Any

    @staticmethod
    def show_text(component: 'Component') -> 'HoverEvent':
        return HoverEvent(HoverAction.SHOW_TEXT, component)


@dataclass(frozen=True)
class Style:
    """
    Style attributes of a component

    Every attribute is optional; None means "inherit from the parent".
    """
    color: Optional[TextColor] = None
    obfuscated: Optional[bool] = None
    bold: Optional[bool] = None
    strikethrough: Optional[bool] = None
    underlined: Optional[bool] = None
    italic: Optional[bool] = None
    click_event: Optional[ClickEvent] = None
    hover_event: Optional[HoverEvent] = None
    insertion: Optional[str] = None
    font: Optional[str] = None

    def decoration(self, decoration: TextDecoration) -> Optional[bool]:
        return getattr(self, decoration.value)

    def with_decoration(self, decoration: TextDecoration, state: Optional[bool]) -> 'Style':
        return replace(self, **{decoration.value: state})

    def is_empty(self) -> bool:
        return all(getattr(self, f.name) is None for f in fields(self))

    def merge(self, other: 'Style') -> 'Style':
        """Fill the attributes missing here with those of other"""
        changes = {
            f.name: getattr(other, f.name)
            for f in fields(self)
            if getattr(self, f.name) is None and getattr(other, f.name) is not None
        }
        return replace(self, **changes) if changes else self


EMPTY_STYLE = Style()


@dataclass(frozen=True, kw_only=True)
class Component:
    """Base of all component variants"""
    style: Style = EMPTY_STYLE
    children: Tuple['Component', ...] = field(default_factory=tuple)

    def append(self, child: 'Component') -> 'Component':
        return replace(self, children=self.children + (child,))

    def with_children(self, children) -> 'Component':
        return replace(self, children=tuple(children))

    def with_style(self, style: Style) -> 'Component':
        return replace(self, style=style)

    def merge_style(self, other: 'Component') -> 'Component':
        """Take every style attribute this component does not set from other"""
        return replace(self, style=self.style.merge(other.style))

    def color(self) -> Optional[TextColor]:
        return self.style.color

    def has_styling(self) -> bool:
        return not self.style.is_empty()

    def walk(self) -> Iterator['Component']:
        """Yield this component and all descendants in document order"""
        yield self
        for child in self.children:
            yield from child.walk()


@dataclass(frozen=True, kw_only=True)
class TextComponent(Component):
    content: str = ""


@dataclass(frozen=True, kw_only=True)
class TranslatableComponent(Component):
    key: str
    args: Tuple[Component, ...] = field(default_factory=tuple)


@dataclass(frozen=True, kw_only=True)
class KeybindComponent(Component):
    keybind: str


def text(content: str = "", color: Optional[TextColor] = None, style: Optional[Style] = None,
         children=()) -> TextComponent:
    """Create a text component"""
    style = style or EMPTY_STYLE
    if color is not None:
        style = replace(style, color=color)
    return TextComponent(content=content, style=style, children=tuple(children))


def empty() -> TextComponent:
    return TextComponent()


def plain_text(component: Component) -> str:
    """Concatenate the content of every text component, in document order"""
    return "".join(c.content for c in component.walk() if isinstance(c, TextComponent))


def component_describe(component: Component, indent: int = 0) -> str:
    """Render a component tree as indented lines, for debugging and CLI output"""
    pad = "  " * indent
    if isinstance(component, TextComponent):
        head = f"text {component.content!r}"
    elif isinstance(component, TranslatableComponent):
        head = f"translatable {component.key!r}"
    elif isinstance(component, KeybindComponent):
        head = f"keybind {component.keybind!r}"
    else:
        head = type(component).__name__

    attributes = []
    for f in fields(component.style):
        value = getattr(component.style, f.name)
        if value is not None:
            attributes.append(f"{f.name}={value}")
    if attributes:
        head += " [" + ", ".join(attributes) + "]"

    lines = [pad + head]
    if isinstance(component, TranslatableComponent):
        for arg in component.args:
            lines.append(pad + "  with:")
            lines.append(component_describe(arg, indent + 2))
    for child in component.children:
        lines.append(component_describe(child, indent + 1))
    return "\n".join(lines)

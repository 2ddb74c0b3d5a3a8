"""
Colour-changing modifying tags

<gradient> and <rainbow> colour every character of their content. The
colour of a character depends on its position relative to the total
number of characters, so both tags count the characters of their subtree
in the visit phase and only then colour them in the apply phase.

Content that carries its own colour is left alone, but its characters
still advance the colour position so that the text after it continues
the sequence. Keybinds and translatables have no characters of their
own; they are kept as they are and take no colour step.

Example:
    <rainbow>hello</rainbow>   five characters, one full colour cycle
    <gradient:red:blue>hi<green>!</green>there</gradient>
"""

import math
from abc import abstractmethod
from typing import List, Optional

from ..models.tags import Modifying, TagKind, ArgumentQueue, Context
from ..models.nodes import ElementNode, ValueNode, TagNode
from ..models.component import (
    Component, TextComponent, TextColor, NAMED_COLORS, empty, plain_text, text,
)


class ColorChangingTag(Modifying):
    """
    Shared visit/apply logic of the colour-changing tags

    Subclasses provide init(), color() and advance_color().
    """

    def __init__(self) -> None:
        self.size = 0
        self.visited = False
        self.disable_depth = -1

    def visit(self, node: ElementNode, depth: int) -> None:
        if self.visited:
            raise RuntimeError("Colour changing tag instances cannot be re-used, create a new one for each parse")
        if isinstance(node, ValueNode):
            self.size += len(node.value)
        elif isinstance(node, TagNode) and node.tag is not None and node.tag.kind is TagKind.INSERTING:
            self.size += len(plain_text(node.tag.value()))

    def post_visit(self) -> None:
        self.visited = True
        self.init()

    def apply(self, current: Component, depth: int) -> Component:
        if (self.disable_depth != -1 and depth > self.disable_depth) or current.color() is not None:
            if self.disable_depth == -1 or depth < self.disable_depth:
                self.disable_depth = depth
            if isinstance(current, TextComponent):
                for _ in current.content:
                    self.advance_color()
            return current.with_children(())

        self.disable_depth = -1
        if not isinstance(current, TextComponent):
            # keybinds and translatables have no characters to colour
            return current.with_children(())
        if current.content:
            characters = []
            for character in current.content:
                characters.append(text(character, self.color()))
                self.advance_color()
            return empty().merge_style(current).with_children(characters)

        return empty().with_style(current.style)

    @abstractmethod
    def init(self) -> None:
        ...

    @abstractmethod
    def color(self) -> TextColor:
        """Colour of the character at the current position"""
        ...

    @abstractmethod
    def advance_color(self) -> None:
        ...


class RainbowTag(ColorChangingTag):
    """
    Cycle through the hue wheel once over the content

    Arguments: an optional '!' to run the cycle backwards, followed by an
    optional integer phase.
    """
    NAME = "rainbow"
    REVERSE = "!"

    def __init__(self, reverse: bool = False, phase: int = 0):
        super().__init__()
        self.reversed = reverse
        self.phase = phase
        self.color_index = 0
        self.frequency = 1.0

    @classmethod
    def create(cls, args: ArgumentQueue, ctx: Context) -> 'RainbowTag':
        reverse = False
        phase = 0
        if args.has_next():
            value = args.pop().value
            if value.startswith(cls.REVERSE):
                reverse = True
                value = value[len(cls.REVERSE):]
            if value:
                try:
                    phase = int(value)
                except ValueError:
                    raise ctx.new_error(f"Expected phase, got {value}", args)
        return cls(reverse, phase)

    def init(self) -> None:
        self.frequency = math.pi * 2 / self.size if self.size else 1.0
        if self.reversed:
            self.color_index = self.size - 1

    def color(self) -> TextColor:
        def channel(offset: int) -> int:
            return int(math.sin(self.frequency * self.color_index + offset + self.phase) * 127 + 128)

        return TextColor.from_rgb(channel(2), channel(0), channel(4))

    def advance_color(self) -> None:
        self.color_index += -1 if self.reversed else 1

    def __repr__(self) -> str:
        return f"RainbowTag(reversed={self.reversed}, phase={self.phase})"


class GradientTag(ColorChangingTag):
    """
    Interpolate between two or more colours over the content

    Arguments: colours (named or #rrggbb), optionally followed by a phase
    in [-1, 1]. Without arguments the gradient runs from white to black.
    """
    NAME = "gradient"
    DEFAULT_COLORS = (TextColor(0xFFFFFF), TextColor(0x000000))

    def __init__(self, phase: float = 0.0, colors: Optional[List[TextColor]] = None):
        super().__init__()
        colors = list(colors) if colors else list(self.DEFAULT_COLORS)
        if phase < 0:
            self.negative_phase = True
            self.phase = 1 + phase
            colors.reverse()
        else:
            self.negative_phase = False
            self.phase = phase
        self.colors = colors
        self.index = 0
        self.color_index = 0
        self.factor_step = 0.0

    @classmethod
    def create(cls, args: ArgumentQueue, ctx: Context) -> 'GradientTag':
        phase = 0.0
        colors: List[TextColor] = []
        if not args.has_next():
            return cls(phase, colors)

        while args.has_next():
            argument = args.pop()
            if not args.has_next():
                possible_phase = argument.as_float()
                if possible_phase is not None:
                    if possible_phase < -1.0 or possible_phase > 1.0:
                        raise ctx.new_error(
                            f"Gradient phase is out of range ({possible_phase}). "
                            f"Must be in the range [-1.0, 1.0] (inclusive).",
                            args,
                        )
                    phase = possible_phase
                    break

            value = argument.value
            if value.startswith("#"):
                color = TextColor.from_hex_string(value)
            else:
                color = NAMED_COLORS.get(argument.lower_value())
            if color is None:
                raise ctx.new_error(
                    f"Unable to parse a color from '{value}'. "
                    f"Please use named colours or hex (#RRGGBB) colors.",
                    args,
                )
            colors.append(color)

        if len(colors) < 2:
            raise ctx.new_error(
                "Invalid gradient, not enough colors. Gradients must have at least two colors.",
                args,
            )
        return cls(phase, colors)

    def init(self) -> None:
        sector_length = max(1, self.size // (len(self.colors) - 1))
        self.factor_step = 1.0 / sector_length
        self.phase = self.phase * sector_length
        self.index = 0

    def _position(self):
        """(color_index, index) after a pending switch to the next colour pair"""
        if self.factor_step * self.index > 1:
            return min(self.color_index + 1, len(self.colors) - 2), 0
        return self.color_index, self.index

    def color(self) -> TextColor:
        color_index, index = self._position()
        factor = self.factor_step * (index + self.phase)
        if factor > 1:
            factor = 1 - (factor - 1)

        if self.negative_phase and len(self.colors) % 2 != 0:
            return TextColor.lerp(factor, self.colors[color_index + 1], self.colors[color_index])
        return TextColor.lerp(factor, self.colors[color_index], self.colors[color_index + 1])

    def advance_color(self) -> None:
        self.color_index, self.index = self._position()
        self.index += 1

    def __repr__(self) -> str:
        return f"GradientTag(phase={self.phase}, colors={[str(c) for c in self.colors]})"

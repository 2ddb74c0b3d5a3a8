"""
Modifying tag tests - rainbow and gradient

Tests the colour sequences and how content with its own colour is
skipped over.
"""

import pytest

from minimessage.lib.gradients import RainbowTag, GradientTag
from minimessage.lib.minimessage import MiniMessage
from minimessage.models.nodes import RootNode
from minimessage.models.component import (
    NAMED_COLORS, TextColor, TextComponent, KeybindComponent, TranslatableComponent, plain_text,
)


def letters(component):
    """Single-character text components, in document order"""
    return [
        c for c in component.walk()
        if isinstance(c, TextComponent) and len(c.content) == 1
    ]


def rainbow_colors(size, reverse=False, phase=0):
    tag = RainbowTag(reverse, phase)
    tag.size = size
    tag.post_visit()
    colors = []
    for _ in range(size):
        colors.append(tag.color())
        tag.advance_color()
    return colors


@pytest.fixture
def mm():
    return MiniMessage()


class TestRainbow:
    """Test the <rainbow> tag"""

    def test_every_character_coloured(self, mm):
        """Each character gets its own colour"""
        component = mm.deserialize("<rainbow>hello")
        chars = letters(component)
        assert "".join(c.content for c in chars) == "hello"
        assert all(c.style.color is not None for c in chars)

    def test_deterministic(self, mm):
        """The same message gives the same colours"""
        assert mm.deserialize("<rainbow>hello") == mm.deserialize("<rainbow>hello")

    def test_first_colour(self):
        """Position 0 of a five character rainbow"""
        assert rainbow_colors(5)[0] == TextColor.from_rgb(243, 128, 31)

    def test_colours_follow_sequence(self, mm):
        """Parsed colours match the tag's own sequence"""
        component = mm.deserialize("<rainbow>hello")
        assert [c.style.color for c in letters(component)] == rainbow_colors(5)

    def test_reverse(self):
        """'!' runs the sequence backwards"""
        assert rainbow_colors(5, reverse=True) == list(reversed(rainbow_colors(5)))

    def test_phase_argument(self, mm):
        """An integer argument shifts the phase"""
        component = mm.deserialize("<rainbow:2>hello")
        assert [c.style.color for c in letters(component)] == rainbow_colors(5, phase=2)

    def test_bad_phase_is_text(self, mm):
        """A non-integer phase rejects the tag"""
        assert plain_text(mm.deserialize("<rainbow:abc>x")) == "<rainbow:abc>x"

    def test_coloured_child_keeps_colour(self, mm):
        """Content with its own colour is left alone but still counted"""
        component = mm.deserialize("<rainbow>a<red>b</red>c")
        assert plain_text(component) == "abc"
        red = [c for c in component.walk() if c.style.color == NAMED_COLORS["red"]]
        assert plain_text(red[0]) == "b"
        expected = rainbow_colors(3)
        by_char = {c.content: c.style.color for c in letters(component)}
        assert by_char["a"] == expected[0]
        assert by_char["c"] == expected[2]

    def test_instance_not_reusable(self):
        """A visited tag refuses a second visit"""
        tag = RainbowTag()
        tag.post_visit()
        with pytest.raises(RuntimeError):
            tag.visit(RootNode("x"), 0)

    def test_keybind_kept(self, mm):
        """A keybind inside the rainbow survives and takes no colour step"""
        component = mm.deserialize("<rainbow>a<key:key.jump>b")
        keybinds = [c for c in component.walk() if isinstance(c, KeybindComponent)]
        assert [k.keybind for k in keybinds] == ["key.jump"]
        expected = rainbow_colors(2)
        assert [c.style.color for c in letters(component)] == expected

    def test_translatable_kept(self, mm):
        """A translatable inside the rainbow survives"""
        component = mm.deserialize("<rainbow>a<lang:block.minecraft.diamond_block>")
        keys = [c.key for c in component.walk() if isinstance(c, TranslatableComponent)]
        assert keys == ["block.minecraft.diamond_block"]


class TestGradient:
    """Test the <gradient> tag"""

    def test_two_colours(self, mm):
        """Colours are interpolated across the content"""
        chars = letters(mm.deserialize("<gradient:red:blue>ab"))
        assert [c.style.color.value for c in chars] == [0xFF5555, 0xAA55AA]

    def test_default_colours(self, mm):
        """Without arguments the gradient runs white to black"""
        chars = letters(mm.deserialize("<gradient>ab"))
        assert [c.style.color.value for c in chars] == [0xFFFFFF, 0x808080]

    def test_hex_colours(self, mm):
        """Hex colours are accepted"""
        chars = letters(mm.deserialize("<gradient:#000000:#ffffff>ab"))
        assert chars[0].style.color.value == 0x000000

    def test_three_colours_reach_each(self, mm):
        """Each colour pair gets its own sector"""
        chars = letters(mm.deserialize("<gradient:red:green:blue>abcd"))
        assert chars[0].style.color.value == NAMED_COLORS["red"].value
        assert chars[2].style.color.value == NAMED_COLORS["green"].value

    @pytest.mark.parametrize(
        "markup",
        [
            "<gradient:red>x",
            "<gradient:red:notacolor>x",
            "<gradient:red:blue:2>x",
        ],
    )
    def test_rejected_arguments(self, mm, markup):
        """Bad gradients are kept as text"""
        assert plain_text(mm.deserialize(markup)) == markup

    def test_phase_in_range(self, mm):
        """A trailing number in range is the phase"""
        chars = letters(mm.deserialize("<gradient:red:blue:0.5>ab"))
        assert len(chars) == 2

    def test_negative_phase_reverses(self):
        """A negative phase flips the colour order"""
        tag = GradientTag(-0.5, [NAMED_COLORS["red"], NAMED_COLORS["blue"]])
        assert tag.negative_phase
        assert tag.colors[0] == NAMED_COLORS["blue"]
        assert tag.phase == pytest.approx(0.5)


class TestLerp:
    """Test colour interpolation"""

    def test_endpoints(self):
        """t=0 and t=1 are the end colours"""
        a, b = TextColor(0x000000), TextColor(0xFFFFFF)
        assert TextColor.lerp(0.0, a, b) == a
        assert TextColor.lerp(1.0, a, b) == b

    def test_clamped(self):
        """t outside [0, 1] is clamped"""
        a, b = TextColor(0x000000), TextColor(0xFFFFFF)
        assert TextColor.lerp(2.0, a, b) == b

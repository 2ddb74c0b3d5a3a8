"""
MiniMessage facade tests - deserialize, string helpers and options
"""

import pytest

from minimessage.lib.errors import ParsingError
from minimessage.lib.minimessage import MiniMessage
from minimessage.models.component import NAMED_COLORS, plain_text, text


@pytest.fixture
def mm():
    return MiniMessage()


class TestDeserialize:
    """Test message to component"""

    def test_plain_text(self, mm):
        """Plain text keeps its content"""
        assert plain_text(mm.deserialize("hello")) == "hello"

    def test_unknown_tags_kept(self, mm):
        """Unknown tags come back as written"""
        assert plain_text(mm.deserialize("<blink>hi</blink>")) == "<blink>hi</blink>"

    def test_default_placeholders(self):
        """Placeholders given to the constructor apply to every call"""
        mm = MiniMessage(placeholders={"server": "Example"})
        assert plain_text(mm.deserialize("Welcome to <server>")) == "Welcome to Example"

    def test_call_placeholders_first(self):
        """Per-call placeholders shadow the defaults"""
        mm = MiniMessage(placeholders={"who": "default"})
        assert plain_text(mm.deserialize("<who>", {"who": "call"})) == "call"

    def test_hover_sees_placeholders(self, mm):
        """Nested hover markup resolves the same placeholders"""
        component = mm.deserialize("<hover:show_text:'<who>'>x", {"who": "Steve"})
        assert plain_text(component.style.hover_event.value) == "Steve"

    def test_strict_option(self):
        """Strict facades raise on unclosed tags"""
        with pytest.raises(ParsingError):
            MiniMessage(strict=True).deserialize("<red>hi")

    def test_tree(self, mm):
        """deserialize_tree stops before tags are applied"""
        root = mm.deserialize_tree("<red>hi")
        assert root.children[0].name == "red"


class TestStringHelpers:
    """Test helpers that rewrite markup"""

    def test_resolve_string(self, mm):
        """Only string placeholders are substituted"""
        assert mm.resolve_string("Hi <name>!", {"name": "<gold>Steve</gold>"}) == "Hi <gold>Steve</gold>!"

    def test_escape_tags(self, mm):
        """Known tags are escaped"""
        assert mm.escape_tags("<red>hi</red>") == "\\<red>hi\\</red>"

    def test_escape_leaves_unknown(self, mm):
        """Unknown tags are not escaped"""
        assert mm.escape_tags("<blink>") == "<blink>"

    def test_escape_placeholder_names(self, mm):
        """Placeholder names count as known"""
        assert mm.escape_tags("<name>", {"name": "x"}) == "\\<name>"

    def test_escape_inner_tag_start(self, mm):
        """Every '<' inside a tag is escaped"""
        assert mm.escape_tags("<hover:show_text:'<red>x'>") == "\\<hover:show_text:'\\<red>x'>"

    def test_strip_tags(self, mm):
        """Known tags are removed"""
        assert mm.strip_tags("<red>Hello</red> <unknown>") == "Hello <unknown>"

    def test_strip_reset(self, mm):
        """Reset counts as known"""
        assert mm.strip_tags("<red>a<reset>b") == "ab"

    def test_strip_then_parse(self, mm):
        """Stripped markup parses to its own text"""
        stripped = mm.strip_tags("<bold>a</bold><gradient:red:blue>b")
        assert stripped == "ab"
        assert mm.deserialize(stripped) == text("ab")


class TestColorNames:
    """Test colour lookup through the facade"""

    @pytest.mark.parametrize("name", list(NAMED_COLORS))
    def test_named_colors(self, mm, name):
        """Every named colour is a tag"""
        assert mm.deserialize(f"<{name}>x").style.color == NAMED_COLORS[name]

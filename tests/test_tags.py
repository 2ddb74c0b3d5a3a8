"""
Tag registry tests - lookup, aliases and argument handling
"""

import pytest

from minimessage.lib.errors import ParsingError
from minimessage.lib.tags import TagRegistry, color_resolve
from minimessage.lib.gradients import GradientTag, RainbowTag
from minimessage.models.tags import (
    Argument, ArgumentQueue, Context, TagCategory, TagKind, ParserDirective,
    StylingTag, reset_is, tag_name_valid,
)
from minimessage.models.component import NAMED_COLORS


@pytest.fixture
def registry():
    return TagRegistry()


def resolve(registry, name, *args):
    context = Context(f"<{name}>")
    return registry.resolve(name, ArgumentQueue(context, [Argument(a) for a in args]), context)


class TestRegistryLookup:
    """Test which names the registry knows"""

    @pytest.mark.parametrize(
        "name",
        ["red", "grey", "#00ff00", "color", "c", "bold", "b", "!italic", "em",
         "click", "hover", "insert", "font", "lang", "tr", "key", "br",
         "gradient", "rainbow", "reset", "r"],
    )
    def test_known(self, registry, name):
        """Standard tags and aliases exist"""
        assert registry.exists(name)

    @pytest.mark.parametrize("name", ["blink", "#00ff0", "#gggggg", "name", ""])
    def test_unknown(self, registry, name):
        """Other names do not"""
        assert not registry.exists(name)

    def test_lookup_case_insensitive(self, registry):
        """Lookup ignores case"""
        assert registry.exists("BOLD")

    def test_matcher_spec(self, registry):
        """Hex colours resolve through the colour matcher"""
        assert registry.spec_get("#00ff00").name == "color"

    def test_list_by_category(self, registry):
        """Each spec is listed once per category"""
        decorations = registry.tags_listByCategory(TagCategory.DECORATION)
        assert sorted(s.name for s in decorations) == [
            "bold", "italic", "obfuscated", "strikethrough", "underlined",
        ]
        assert [s.name for s in registry.tags_listByCategory(TagCategory.MODIFYING)] == [
            "gradient", "rainbow",
        ]


class TestResolve:
    """Test that factories build the right tags"""

    def test_named_color(self, registry):
        """<red> is a styling tag"""
        tag = resolve(registry, "red")
        assert isinstance(tag, StylingTag)
        assert tag.kind is TagKind.INSERTING
        assert tag.value().style.color == NAMED_COLORS["red"]

    def test_color_argument(self, registry):
        """<color:gold> reads its argument"""
        assert resolve(registry, "color", "gold").value().style.color == NAMED_COLORS["gold"]

    def test_color_missing_argument(self, registry):
        """<color> without an argument is rejected"""
        with pytest.raises(ParsingError):
            resolve(registry, "color")

    def test_reset_is_directive(self, registry):
        """reset resolves to the directive"""
        assert resolve(registry, "r") is ParserDirective.RESET

    def test_modifying_tags_are_fresh(self, registry):
        """Every resolve creates a new instance"""
        first = resolve(registry, "rainbow")
        assert isinstance(first, RainbowTag)
        assert first is not resolve(registry, "rainbow")
        assert isinstance(resolve(registry, "gradient", "red", "blue"), GradientTag)

    def test_hover_entity_uuid(self, registry):
        """show_entity needs a valid UUID"""
        with pytest.raises(ParsingError, match="not a valid UUID"):
            resolve(registry, "hover", "show_entity", "pig", "nope")
        tag = resolve(registry, "hover", "show_entity", "pig", "2d3c6e3e-9a3b-4b8e-8f4b-1d1c5a3e6f7a")
        assert tag.value().style.hover_event.value.type == "pig"

    def test_unregistered_resolves_none(self, registry):
        """Unknown names resolve to None"""
        assert resolve(registry, "blink") is None

    def test_color_resolve_error(self):
        """Unknown colour names raise"""
        with pytest.raises(ParsingError, match="Unable to parse a color"):
            color_resolve("mauve", Context("<mauve>"))


class TestArguments:
    """Test argument conversions and the argument queue"""

    @pytest.mark.parametrize(
        "value, expected",
        [("12", 12), ("-3", -3), ("+4", 4), ("1.5", None), ("x", None), ("", None)],
    )
    def test_as_int(self, value, expected):
        """Only whole integers convert"""
        assert Argument(value).as_int() == expected

    @pytest.mark.parametrize(
        "value, expected",
        [("0.5", 0.5), ("-1", -1.0), ("1_0", None), ("nan", None), ("inf", None), ("x", None)],
    )
    def test_as_float(self, value, expected):
        """Finite floats convert"""
        assert Argument(value).as_float() == expected

    def test_true_false(self):
        """Boolean words are recognised case-insensitively"""
        assert Argument("TRUE").is_true()
        assert Argument("off").is_false()
        assert not Argument("maybe").is_true()

    def test_queue(self):
        """Arguments are consumed in order"""
        queue = ArgumentQueue(Context("<a:b:c>"), [Argument("b"), Argument("c")])
        assert len(queue) == 2
        assert queue.peek().value == "b"
        assert queue.pop().value == "b"
        assert [a.value for a in queue.remaining()] == ["c"]
        assert queue.pop().value == "c"
        assert not queue.has_next()
        with pytest.raises(ParsingError, match="needed"):
            queue.pop_or("needed")
        queue.reset()
        assert queue.has_next()


class TestNames:
    """Test name helpers"""

    @pytest.mark.parametrize("name", ["red", "!bold", "#ff00ff", "dark_red", "a-b", "?x"])
    def test_valid_names(self, name):
        """Names with an optional marker and simple characters are valid"""
        assert tag_name_valid(name)

    @pytest.mark.parametrize("name", ["a b", "a.b", "!!x", "Red"])
    def test_invalid_names(self, name):
        """Other characters are not allowed"""
        assert not tag_name_valid(name)

    def test_reset_names(self):
        """reset and r are reserved"""
        assert reset_is("RESET")
        assert reset_is("r")
        assert not reset_is("red")

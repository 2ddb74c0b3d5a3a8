"""
Parser nesting tests - scopes, implicit closes, reset and depth

Tests how the tree builder opens and closes scopes in lenient mode.
"""

import pytest

from minimessage.config import appsettings
from minimessage.lib.parser import Parser
from minimessage.lib.errors import ParsingError
from minimessage.models.nodes import TextNode, TagNode


def texts(node):
    return [child.value for child in node.children if isinstance(child, TextNode)]


class TestBalancedNesting:
    """Test properly nested tags"""

    def test_two_levels(self):
        """Nested tags nest in the tree"""
        root = Parser("<red><bold>hi</bold></red>").parse()
        red = root.children[0]
        bold = red.children[0]
        assert bold.name == "bold"
        assert texts(bold) == ["hi"]
        assert bold.parent is red
        assert red.parent is root

    def test_siblings(self):
        """Tags closed in turn are siblings"""
        root = Parser("<red>a</red><blue>b</blue>").parse()
        assert [c.name for c in root.children] == ["red", "blue"]

    def test_depth(self):
        """Depth counts ancestors"""
        root = Parser("<red><bold>hi").parse()
        bold = root.children[0].children[0]
        assert root.depth == 0
        assert bold.depth == 2
        assert bold.children[0].depth == 3

    def test_every_tag_closed_after_parse(self):
        """Open tags are closed at the end of input"""
        root = Parser("<red><bold>hi").parse()
        red = root.children[0]
        assert red.closed
        assert red.children[0].closed


class TestImplicitClose:
    """Test closes that skip inner open tags"""

    def test_outer_close_closes_inner(self):
        """Closing red also closes the bold opened inside it"""
        root = Parser("<red><bold>hi</red>after").parse()
        red, after = root.children
        assert red.name == "red"
        assert red.children[0].closed
        assert after.value == "after"

    def test_unmatched_close_is_text(self):
        """A close with no matching open tag stays text"""
        root = Parser("hi</red>").parse()
        assert texts(root) == ["hi", "</red>"]

    def test_close_with_argument(self):
        """A close may repeat the open tag's arguments"""
        root = Parser("<color:red>a</color:red>b").parse()
        assert texts(root) == ["b"]
        assert texts(root.children[0]) == ["a"]

    def test_close_with_other_argument_is_text(self):
        """A close with different arguments does not match"""
        root = Parser("<color:red>a</color:blue>b").parse()
        assert texts(root.children[0]) == ["a", "</color:blue>", "b"]


class TestReset:
    """Test the <reset> directive in lenient mode"""

    @pytest.mark.parametrize("reset", ["<reset>", "<r>", "<RESET>"])
    def test_reset_closes_everything(self, reset):
        """Reset returns to the root"""
        root = Parser(f"<red><bold>a{reset}b").parse()
        red, b = root.children
        assert red.name == "red"
        assert b.value == "b"

    def test_reset_close_ignored(self):
        """</reset> is dropped"""
        root = Parser("a</reset>b").parse()
        assert texts(root) == ["a", "b"]


class TestDepthLimit:
    """Test the nesting limit"""

    def test_tag_past_limit_is_text(self, monkeypatch):
        """A tag past the limit stays text in lenient mode"""
        monkeypatch.setattr(appsettings, "max_nesting_depth", 2)
        root = Parser("<red><bold><italic>x").parse()
        bold = root.children[0].children[0]
        assert texts(bold) == ["<italic>", "x"]

    def test_tag_past_limit_strict(self, monkeypatch):
        """A tag past the limit is an error in strict mode"""
        monkeypatch.setattr(appsettings, "max_nesting_depth", 2)
        with pytest.raises(ParsingError, match="nested more than 2 levels"):
            Parser("<red><bold><italic>x</italic></bold></red>", strict=True).parse()

    def test_siblings_do_not_count(self, monkeypatch):
        """Only open tags count towards the limit"""
        monkeypatch.setattr(appsettings, "max_nesting_depth", 1)
        root = Parser("<red>a</red><blue>b</blue><green>c</green>").parse()
        assert all(isinstance(c, TagNode) for c in root.children)

    @pytest.mark.parametrize("inner", ["<br>", "<key:key.jump>", "<blue/>"])
    def test_childless_tags_at_limit(self, monkeypatch, inner):
        """Tags that open no scope are allowed at the limit"""
        monkeypatch.setattr(appsettings, "max_nesting_depth", 1)
        root = Parser(f"<red>{inner}x").parse()
        red = root.children[0]
        assert isinstance(red.children[0], TagNode)
        assert texts(red) == ["x"]

    def test_childless_tags_at_limit_strict(self, monkeypatch):
        """Tags that open no scope do not raise at the limit in strict mode"""
        monkeypatch.setattr(appsettings, "max_nesting_depth", 1)
        root = Parser("<red><br><blue/>x</red>", strict=True).parse()
        red = root.children[0]
        assert [c.name for c in red.children if isinstance(c, TagNode)] == ["br", "blue"]

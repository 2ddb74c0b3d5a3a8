"""
Tokenizer tests - tag boundaries, tag values and unescaping

Tests the two tokenizer passes on their own, without building a tree.
"""

import pytest

from minimessage.lib.tokenizer import tokenize, unescape, unquote_and_escape, text_unescape
from minimessage.models.parser import TokenType


def values(message):
    """Tag values of every tag token, in order"""
    return [
        [child.get(message) for child in token.child_tokens]
        for token in tokenize(message)
        if token.child_tokens
    ]


class TestTokenBoundaries:
    """Test where text and tag tokens start and end"""

    def test_plain_text(self):
        """Text without tags is a single TEXT token"""
        tokens = tokenize("hello")
        assert len(tokens) == 1
        assert tokens[0].type is TokenType.TEXT
        assert (tokens[0].start_index, tokens[0].end_index) == (0, 5)

    def test_empty_message(self):
        """Empty message is a single empty TEXT token"""
        tokens = tokenize("")
        assert len(tokens) == 1
        assert tokens[0].type is TokenType.TEXT
        assert tokens[0].start_index == tokens[0].end_index == 0

    def test_open_text_close(self):
        """Open tag, text and close tag"""
        message = "<red>hi</red>"
        tokens = tokenize(message)
        assert [t.type for t in tokens] == [TokenType.OPEN_TAG, TokenType.TEXT, TokenType.CLOSE_TAG]
        assert [t.get(message) for t in tokens] == ["<red>", "hi", "</red>"]

    def test_self_closing(self):
        """<br/> is an OPEN_CLOSE_TAG"""
        tokens = tokenize("<br/>")
        assert tokens[0].type is TokenType.OPEN_CLOSE_TAG
        assert values("<br/>") == [["br"]]

    def test_empty_angle_brackets_are_text(self):
        """<> is not a tag"""
        tokens = tokenize("a<>b")
        assert len(tokens) == 1
        assert tokens[0].type is TokenType.TEXT

    def test_unterminated_tag_is_text(self):
        """A '<' with no closing '>' stays text"""
        tokens = tokenize("<red")
        assert [t.type for t in tokens] == [TokenType.TEXT]

    def test_tag_after_unterminated_start(self):
        """A later tag is still found after a stray '<'"""
        message = "a < b <red>c"
        tokens = tokenize(message)
        assert [t.get(message) for t in tokens] == ["a < b ", "<red>", "c"]

    def test_escaped_tag_is_text(self):
        """Escaped '<' does not start a tag"""
        tokens = tokenize("\\<red>hi")
        assert [t.type for t in tokens] == [TokenType.TEXT]

    def test_tokens_cover_message(self):
        """Top-level tokens tile the message with no gaps"""
        message = "a<red>b</red>c<br/>d"
        tokens = tokenize(message)
        assert "".join(t.get(message) for t in tokens) == message
        for left, right in zip(tokens, tokens[1:]):
            assert left.end_index == right.start_index


class TestTagValues:
    """Test the split of tag tokens into TAG_VALUE children"""

    def test_name_only(self):
        """A tag without arguments has one value"""
        assert values("<bold>") == [["bold"]]

    def test_close_tag_value(self):
        """Close tag values skip the '</'"""
        assert values("</red>") == [["red"]]

    def test_quoted_argument_keeps_separator(self):
        """Separators inside quotes do not split"""
        message = "<hover:show_text:'a:b'>hi"
        tokens = tokenize(message)
        assert len(tokens[0].child_tokens) == 3
        assert all(c.type is TokenType.TAG_VALUE for c in tokens[0].child_tokens)
        assert values(message) == [["hover", "show_text", "'a:b'"]]

    def test_quoted_argument_keeps_tag_end(self):
        """'>' inside quotes does not end the tag"""
        assert values("<insert:'a>b'>x") == [["insert", "'a>b'"]]

    def test_url_is_not_split(self):
        """':' followed by '//' is not a separator"""
        assert values("<click:open_url:https://example.org>x") == [
            ["click", "open_url", "https://example.org"]
        ]

    def test_adjacent_separators(self):
        """'::' produces an empty value"""
        assert values("<a::b>") == [["a", "", "b"]]


class TestUnescape:
    """Test removal of escapes"""

    def test_unescape_selected_characters(self):
        """Only accepted characters are unescaped"""
        assert unescape("a\\<b\\c", 0, 6, lambda c: c == "<") == "a<b\\c"

    def test_text_unescape(self):
        """Text only unescapes '<'"""
        message = "\\<red>\\n"
        assert text_unescape(message, 0, len(message)) == "<red>\\n"

    @pytest.mark.parametrize(
        "message, start, end, expected",
        [
            ("<a:'b:c'>", 3, 8, ("b:c", True)),
            ("<a:plain>", 3, 8, ("plain", False)),
            ("<a:'it\\'s'>", 3, 10, ("it's", True)),
            ("<a:>", 3, 3, ("", False)),
        ],
    )
    def test_unquote_and_escape(self, message, start, end, expected):
        """Quotes are removed and quote escapes resolved"""
        assert unquote_and_escape(message, start, end) == expected

"""
Custom Pygments lexer for minimessage syntax highlighting

Highlights <tag:arg> markup for the CLI's HTML source rendering.

Token types:
- Punctuation: '<', '</', '>', '/>' and ':' separators
- Name.Tag: Tag names (e.g., red, bold, hover)
- Keyword.Declaration: Modifying tags (gradient, rainbow)
- Keyword.Reserved: Parser directives (reset, r)
- Number.Hex: Hex colour tags (#ff00aa)
- String: Quoted arguments
- Name.Attribute: Unquoted arguments
- String.Escape: '\\<' escapes
- Comment: Lines starting with '#'
- Text: Everything else
"""

from pygments.lexer import RegexLexer, bygroups
from pygments.token import (
    Text,
    Punctuation,
    Name,
    String,
    Keyword,
    Number,
    Comment,
)


class MiniMessageLexer(RegexLexer):
    """
    Lexer for minimessage markup

    Example:
        <gradient:red:blue>Hello</gradient>

    Tokens:
        < → Punctuation
        gradient → Keyword.Declaration
        : → Punctuation
        red → Name.Attribute
        Hello → Text
    """

    name = 'MiniMessage'
    aliases = ['minimessage', 'mm']
    filenames = ['*.mm']

    tokens = {
        'root': [
            # Comment lines in message files
            (r'^#.*?$', Comment),

            # Escaped tag start
            (r'\\<', String.Escape),

            # Tag openers; the name decides the colour
            (r'(</?)(gradient|rainbow)\b', bygroups(Punctuation, Keyword.Declaration), 'tag'),
            (r'(</?)(reset|r)(?=[:/>])', bygroups(Punctuation, Keyword.Reserved), 'tag'),
            (r'(</?)(#[0-9a-fA-F]{6})', bygroups(Punctuation, Number.Hex), 'tag'),
            (r'(</?)([!?#]?[a-zA-Z0-9_-]+)', bygroups(Punctuation, Name.Tag), 'tag'),

            # Everything else is text
            (r'[^<\\\n]+', Text),
            (r'\n', Text),
            (r'.', Text),
        ],

        'tag': [
            (r'/?>', Punctuation, '#pop'),
            (r':', Punctuation),
            (r"'(\\\\|\\'|[^'])*'", String.Single),
            (r'"(\\\\|\\"|[^"])*"', String.Double),
            (r'[^:>\'"/]+', Name.Attribute),
            (r'[/\'"]', Name.Attribute),
        ],
    }


def get_lexer() -> MiniMessageLexer:
    """
    Get the MiniMessageLexer instance

    Returns:
        MiniMessageLexer instance ready for use with Pygments
    """
    return MiniMessageLexer()

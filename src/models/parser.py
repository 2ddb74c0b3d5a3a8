"""
Parser-specific data models

Token and tag-part structures shared by the tokenizer, the placeholder
pre-processor and the tree builder.
"""

from enum import Enum
from dataclasses import dataclass, field
from typing import List


class TokenType(Enum):
    """
    Kinds of tokens produced by the tokenizer

    TEXT, OPEN_TAG, OPEN_CLOSE_TAG and CLOSE_TAG are top-level tokens.
    TAG_VALUE tokens only ever appear as children of tag tokens.
    """
    TEXT = "text"
    OPEN_TAG = "open_tag"              # <name:arg>
    OPEN_CLOSE_TAG = "open_close_tag"  # <name:arg/>
    CLOSE_TAG = "close_tag"            # </name>
    TAG_VALUE = "tag_value"            # one ':'-separated part inside a tag


TAG_TOKEN_TYPES = (TokenType.OPEN_TAG, TokenType.OPEN_CLOSE_TAG, TokenType.CLOSE_TAG)


@dataclass(eq=False)
class Token:
    """
    A span [start_index, end_index) over the source message

    Tag tokens own the TAG_VALUE tokens found by the second tokenizer pass,
    in source order.

    Attributes:
        start_index: Index of the first character of the token
        end_index: Index one past the last character of the token
        type: Token kind
        child_tokens: TAG_VALUE children (tag tokens only)

    Example:
        For message "<red>hi":
        Token(0, 5, OPEN_TAG, child_tokens=[Token(1, 4, TAG_VALUE)])
        Token(5, 7, TEXT)
    """
    start_index: int
    end_index: int
    type: TokenType
    child_tokens: List['Token'] = field(default_factory=list)

    def get(self, message: str) -> str:
        """Return the slice of message covered by this token"""
        return message[self.start_index:self.end_index]

    def __repr__(self) -> str:
        return f"Token({self.start_index}, {self.end_index}, {self.type.name})"


@dataclass(frozen=True)
class TagPart:
    """
    One unescaped ':'-separated segment of a tag (name or argument)

    Attributes:
        value: Unquoted, unescaped value
        token: The TAG_VALUE token the part was read from
        quoted: Whether the raw segment was wrapped in quotes
    """
    value: str
    token: Token
    quoted: bool = False

    def __str__(self) -> str:
        return self.value

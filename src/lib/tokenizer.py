r"""
Two-pass tokenizer for <tag:arg> markup

The first pass is a small state machine (NORMAL, TAG, STRING) that finds
tag boundaries and hands every span to a MatchedTokenConsumer. The second
pass looks inside each tag token and splits it into ':'-separated
TAG_VALUE children.

Escapes:
- '\<' outside a tag makes the '<' literal
- '\"' or "\'" inside a quoted argument makes the quote literal
Any other backslash is kept verbatim.

Example:
    >>> tokens = tokenize("<hover:show_text:'a:b'>hi")
    >>> tokens
    [Token(0, 23, OPEN_TAG), Token(23, 25, TEXT)]
    >>> [t.get("<hover:show_text:'a:b'>hi") for t in tokens[0].child_tokens]
    ['hover', 'show_text', "'a:b'"]
"""

from abc import ABC, abstractmethod
from enum import Enum
from typing import Callable, Generic, List, Tuple, TypeVar

from ..models.parser import Token, TokenType, TAG_TOKEN_TYPES


TAG_START = '<'
TAG_END = '>'
CLOSE_TAG = '/'
SEPARATOR = ':'
ESCAPE = '\\'
QUOTES = ('\'', '"')


class _ScanState(Enum):
    NORMAL = "normal"
    TAG = "tag"
    STRING = "string"


R = TypeVar("R")


class MatchedTokenConsumer(ABC, Generic[R]):
    """
    Receives the spans found by the first pass, in source order

    Attributes:
        message: The message being scanned
        last_end_index: End of the most recently accepted span, -1 before any
    """

    def __init__(self, message: str):
        self.message = message
        self.last_end_index = -1

    def accept(self, start: int, end: int, token_type: TokenType) -> None:
        self.last_end_index = end

    @abstractmethod
    def result(self) -> R:
        ...


class TokenListProducer(MatchedTokenConsumer[List[Token]]):
    """Collects the spans as a flat token list"""

    def __init__(self, message: str):
        super().__init__(message)
        self.tokens: List[Token] = []

    def accept(self, start: int, end: int, token_type: TokenType) -> None:
        super().accept(start, end, token_type)
        self.tokens.append(Token(start, end, token_type))

    def result(self) -> List[Token]:
        return self.tokens


def string_scan(message: str, consumer: MatchedTokenConsumer) -> None:
    """
    First pass: find text and tag spans

    A quote inside a tag only starts a string if the same quote occurs
    again later. If the input ends inside an unterminated '<', scanning
    resumes right after that '<' in the normal state, so tags written
    inside an unclosed quote are still found.

    Args:
        message: Text to scan
        consumer: Receives (start, end, type) for every span
    """
    state = _ScanState.NORMAL
    escaped = False
    current_token_end = 0
    marker = -1
    string_char = ''
    length = len(message)

    i = 0
    while i < length:
        c = message[i]
        if escaped:
            escaped = False
            i += 1
            continue
        if c == ESCAPE and i + 1 < length:
            following = message[i + 1]
            if state is _ScanState.NORMAL:
                escaped = following == TAG_START
            elif state is _ScanState.STRING:
                escaped = following == string_char
            if escaped:
                i += 1
                continue

        if state is _ScanState.NORMAL:
            if c == TAG_START:
                marker = i
                state = _ScanState.TAG
        elif state is _ScanState.TAG:
            if c == TAG_END:
                if i == marker + 1:
                    # <> is not a tag
                    state = _ScanState.NORMAL
                else:
                    if current_token_end != marker:
                        consumer.accept(current_token_end, marker, TokenType.TEXT)
                    current_token_end = i + 1

                    token_type = TokenType.OPEN_TAG
                    if marker + 1 < length and message[marker + 1] == CLOSE_TAG:
                        token_type = TokenType.CLOSE_TAG
                    elif marker + 2 < length and message[i - 1] == CLOSE_TAG:
                        token_type = TokenType.OPEN_CLOSE_TAG
                    consumer.accept(marker, current_token_end, token_type)
                    state = _ScanState.NORMAL
            elif c == TAG_START:
                marker = i
            elif c in QUOTES:
                string_char = c
                if message.find(c, i + 1) != -1:
                    state = _ScanState.STRING
        elif c == string_char:
            state = _ScanState.TAG

        if i == length - 1 and state is _ScanState.TAG:
            i = marker
            state = _ScanState.NORMAL
        i += 1

    end = consumer.last_end_index
    if end == -1:
        consumer.accept(0, length, TokenType.TEXT)
    elif end != length:
        consumer.accept(end, length, TokenType.TEXT)


def tagValues_split(message: str, tokens: List[Token]) -> None:
    """
    Second pass: split every tag token into TAG_VALUE children

    Only the text between '<' (or '</') and '>' (or '/>') is examined.
    A ':' followed by '//' is not a separator, so URLs survive, and
    nothing inside quotes is split. Two adjacent separators produce an
    empty value.
    """
    length = len(message)
    for token in tokens:
        if token.type not in TAG_TOKEN_TYPES:
            continue

        start = token.start_index + (2 if token.type is TokenType.CLOSE_TAG else 1)
        end = token.end_index - (2 if token.type is TokenType.OPEN_CLOSE_TAG else 1)

        in_string = False
        escaped = False
        string_char = ''
        marker = start

        i = start
        while i < end:
            c = message[i]
            if escaped:
                escaped = False
                i += 1
                continue
            if c == ESCAPE and i + 1 < length:
                following = message[i + 1]
                escaped = following == string_char if in_string else following == TAG_START
                if escaped:
                    i += 1
                    continue

            if not in_string:
                if c == SEPARATOR:
                    url = i + 2 < length and message[i + 1] == '/' and message[i + 2] == '/'
                    if not url:
                        if marker == i:
                            token.child_tokens.append(Token(i, i, TokenType.TAG_VALUE))
                            marker += 1
                        else:
                            token.child_tokens.append(Token(marker, i, TokenType.TAG_VALUE))
                            marker = i + 1
                elif c in QUOTES:
                    in_string = True
                    string_char = c
            elif c == string_char:
                in_string = False
            i += 1

        if not token.child_tokens:
            token.child_tokens.append(Token(start, end, TokenType.TAG_VALUE))
        else:
            last_end = token.child_tokens[-1].end_index
            if last_end != end:
                token.child_tokens.append(Token(last_end + 1, end, TokenType.TAG_VALUE))


def tokenize(message: str) -> List[Token]:
    """
    Tokenize a message into TEXT and tag tokens

    Args:
        message: Markup to tokenize

    Returns:
        Top-level tokens in source order; tag tokens carry their values
    """
    producer = TokenListProducer(message)
    string_scan(message, producer)
    tokens = producer.result()
    tagValues_split(message, tokens)
    return tokens


def unescape(text: str, start_index: int, end_index: int, escapes: Callable[[str], bool]) -> str:
    r"""
    Remove each backslash that precedes a character accepted by escapes

    Other backslashes are kept.

    Example:
        >>> unescape(r"a\<b\c", 0, 6, lambda c: c == '<')
        'a<b\\c'
    """
    from_index = start_index
    i = text.find(ESCAPE, from_index)
    if i == -1 or i >= end_index:
        return text[from_index:end_index]

    parts: List[str] = []
    while i != -1 and i + 1 < end_index:
        if escapes(text[i + 1]):
            parts.append(text[from_index:i])
            i += 1
            parts.append(text[i])
            i += 1
            if i >= end_index:
                from_index = end_index
                break
        else:
            i += 1
            parts.append(text[from_index:i])
        from_index = i
        i = text.find(ESCAPE, from_index)

    parts.append(text[from_index:end_index])
    return "".join(parts)


def unquote_and_escape(text: str, start_index: int, end_index: int) -> Tuple[str, bool]:
    """
    Read one tag value, removing surrounding quotes and quote escapes

    Returns:
        (value, quoted) where quoted tells whether the value started with a quote

    Example:
        >>> unquote_and_escape("<a:'b:c'>", 3, 8)
        ('b:c', True)
    """
    if start_index >= end_index:
        return "", False

    first = text[start_index]
    if first not in QUOTES:
        return text[start_index:end_index], False

    inner_start = start_index + 1
    inner_end = end_index
    if text[end_index - 1] in QUOTES and end_index - 1 >= inner_start:
        inner_end -= 1
    return unescape(text, inner_start, inner_end, lambda c: c == first), True


def text_unescape(text: str, start_index: int, end_index: int) -> str:
    """Unescape literal text, where only '\\<' is an escape"""
    return unescape(text, start_index, end_index, lambda c: c == TAG_START)

"""
Tree builder for <tag:arg> markup

Turns the token list produced by the tokenizer into an element tree.

The builder keeps a single "current" node. Text is appended to it, an
open tag that owns content becomes the new current node, and a close tag
moves current back to the parent of the nearest matching open tag,
implicitly closing everything opened inside it.

Lenient mode (the default) never fails on user input: unknown tags,
rejected arguments and unmatched closes all become literal text. Strict
mode raises ParsingError for <reset>, for closing a tag while an inner
one is still open, and for tags left open at the end of the message.

Example:
    >>> root = Parser("<red><bold>hi</bold></red>").parse()
    >>> print(root)
    RootNode {
      TagNode('red') {
        TagNode('bold') {
          TextNode('hi')
        }
      }
    }
"""

from typing import Callable, List, Optional

from ..config import appsettings
from ..models.parser import Token, TokenType, TagPart
from ..models.nodes import ElementNode, RootNode, TextNode, PlaceholderNode, TagNode
from ..models.tags import (
    Tag, TagKind, Argument, ArgumentQueue, Context, reset_is, tag_name_valid,
)
from .errors import ParsingError
from .tokenizer import (
    TAG_START, TAG_END, tokenize, text_unescape, unquote_and_escape,
)
from .placeholders import (
    PlaceholderResolver, placeholderName_sanitize, resolve_placeholders, resolver_make,
)
from .log import LOG


def tagParts_make(token: Token, message: str, resolver: PlaceholderResolver) -> List[TagPart]:
    """
    Read the name and arguments of a tag token

    An argument written as <name> is replaced by the value of the string
    placeholder of that name, if there is one.
    """
    parts: List[TagPart] = []
    for index, child in enumerate(token.child_tokens):
        value, quoted = unquote_and_escape(message, child.start_index, child.end_index)
        if index > 0 and len(value) > 2 and value[0] == TAG_START and value[-1] == TAG_END:
            replacement = resolver.resolve(placeholderName_sanitize(value[1:-1]))
            if replacement is not None and replacement.string_is():
                value = replacement.value
        parts.append(TagPart(value, child, quoted))
    return parts


def tag_closes(close_parts: List[str], open_parts: List[TagPart]) -> bool:
    """
    Check whether a close tag matches an open tag

    The name is compared case-insensitively, arguments exactly. A close
    tag may give fewer arguments than the open tag, never more.

    Example:
        </hover> and </hover:show_text> both close <hover:show_text:hi>
    """
    if len(close_parts) > len(open_parts):
        return False
    if close_parts[0].lower() != open_parts[0].value.lower():
        return False
    for close_part, open_part in zip(close_parts[1:], open_parts[1:]):
        if close_part != open_part.value:
            return False
    return True


class _TreeBuilder:
    """Single-use state for one build_tree() call"""

    def __init__(
        self,
        tag_factory: Callable[[TagNode], Optional[Tag]],
        tag_name_checker: Callable[[str], bool],
        placeholder_resolver: PlaceholderResolver,
        message: str,
        strict: bool,
        original: Optional[str],
    ):
        self.tag_factory = tag_factory
        self.tag_name_checker = tag_name_checker
        self.resolver = placeholder_resolver
        self.message = message
        self.strict = strict
        self.root = RootNode(message, original)
        self.current: ElementNode = self.root

    def literal_add(self, token: Token) -> None:
        value = text_unescape(self.message, token.start_index, token.end_index)
        self.current.add_child(TextNode(self.current, token, self.message, value))

    def scopes_close(self, until: ElementNode) -> None:
        """Seal every open tag from current up to, not including, until"""
        node = self.current
        while node is not None and node is not until:
            if isinstance(node, TagNode):
                node.close()
            node = node.parent
        self.current = until

    def reset_handle(self, token: Token) -> None:
        if self.strict:
            raise ParsingError(
                "<reset> tags are not allowed when strict mode is enabled",
                self.message, [token],
            )
        LOG("Reset closes all open tags", level=3)
        self.scopes_close(self.root)

    def tag_open(self, token: Token) -> None:
        name_token = token.child_tokens[0]
        if not tag_name_valid(name_token.get(self.message).lower()):
            self.literal_add(token)
            return

        parts = tagParts_make(token, self.message, self.resolver)
        name = parts[0].value.lower()

        if reset_is(name):
            self.reset_handle(token)
            return

        known = self.tag_name_checker(name)
        replacement = self.resolver.resolve(name)
        # string replacements for tag names were skipped by pre-processing too
        if replacement is not None and not (known and replacement.string_is()):
            self.current.add_child(PlaceholderNode(self.current, token, self.message, replacement))
            return
        if not known:
            LOG(f"Unknown tag <{name}> kept as text", level=3)
            self.literal_add(token)
            return

        tag_node = TagNode(self.current, token, self.message, parts)
        tag = self.tag_factory(tag_node)
        if tag is None:
            self.literal_add(token)
            return
        if tag.kind is TagKind.PARSER_DIRECTIVE:
            self.reset_handle(token)
            return

        opens_scope = token.type is TokenType.OPEN_TAG and (
            tag.kind is not TagKind.INSERTING or tag.allows_children()
        )
        # only tags that open a scope add nesting
        if opens_scope and appsettings.depth_exceeded(self.current.depth + 1):
            if self.strict:
                raise ParsingError(
                    f"Tags may not be nested more than {appsettings.max_nesting_depth} levels deep",
                    self.message, [token],
                )
            LOG(f"<{name}> exceeds the nesting limit, kept as text", level=2)
            self.literal_add(token)
            return

        tag_node.tag = tag
        self.current.add_child(tag_node)
        if opens_scope:
            self.current = tag_node
        else:
            tag_node.close()

    def tag_close(self, token: Token) -> None:
        if not token.child_tokens:
            raise RuntimeError(
                f"Close tag token has no values; the tokenizer should not allow this. "
                f"Original text: {self.message}"
            )

        close_values = [
            unquote_and_escape(self.message, child.start_index, child.end_index)[0]
            for child in token.child_tokens
        ]
        close_name = close_values[0].lower()

        if reset_is(close_name):
            return
        if not self.tag_name_checker(close_name):
            self.literal_add(token)
            return

        node = self.current
        while isinstance(node, TagNode):
            if tag_closes(close_values, node.parts):
                if node is not self.current and self.strict:
                    inner = self.current
                    raise ParsingError(
                        f"Unclosed tag encountered; {inner.name} is not closed, "
                        f"because {close_values[0]} was closed first.",
                        self.message, [node.token, inner.token, token],
                    )
                parent = node.parent
                if parent is None:
                    raise RuntimeError(f"Tag node without parent. Original text: {self.message}")
                self.scopes_close(parent)
                return
            node = node.parent

        LOG(f"</{close_name}> matches no open tag, kept as text", level=3)
        self.literal_add(token)

    def openTags_check(self) -> None:
        if self.current is self.root:
            return

        open_tags = []
        node = self.current
        while isinstance(node, TagNode):
            open_tags.append(node)
            node = node.parent

        if self.strict:
            raise ParsingError(
                "All tags must be explicitly closed while in strict mode. "
                "End of string found with open tags: " + ", ".join(t.name for t in open_tags),
                self.message, [t.token for t in open_tags],
            )
        self.scopes_close(self.root)

    def build(self, tokens: List[Token]) -> RootNode:
        for token in tokens:
            if token.type is TokenType.TEXT:
                self.literal_add(token)
            elif token.type in (TokenType.OPEN_TAG, TokenType.OPEN_CLOSE_TAG):
                self.tag_open(token)
            elif token.type is TokenType.CLOSE_TAG:
                self.tag_close(token)
        self.openTags_check()
        return self.root


def build_tree(
    tag_factory: Callable[[TagNode], Optional[Tag]],
    tag_name_checker: Callable[[str], bool],
    placeholder_resolver: PlaceholderResolver,
    tokens: List[Token],
    message: str,
    strict: bool,
    original: Optional[str] = None,
) -> RootNode:
    """
    Build the element tree for a tokenized message

    Args:
        tag_factory: Resolves a tag node to a Tag, or None to keep it as text
        tag_name_checker: True for names that are registered tags
        placeholder_resolver: Source of placeholders for names that are not tags
        tokens: Output of tokenize(message)
        message: The tokenized message
        strict: Raise ParsingError instead of degrading malformed markup
        original: The message before placeholder pre-processing

    Returns:
        The root node, with every tag node closed
    """
    builder = _TreeBuilder(tag_factory, tag_name_checker, placeholder_resolver, message, strict, original)
    return builder.build(tokens)


class Parser:
    """
    Parser for <tag:arg> markup

    Runs placeholder pre-processing, tokenizing and tree building for one
    message. Tag instances are created fresh for every parse.
    """

    def __init__(
        self,
        message: str,
        registry=None,
        placeholders=None,
        strict: Optional[bool] = None,
        deserializer: Optional[Callable] = None,
    ):
        """
        Initialize parser with a message

        Args:
            message: Markup to parse
            registry: TagRegistry to resolve tags with (standard tags if None)
            placeholders: Dict or PlaceholderResolver
            strict: Strict mode; defaults to appsettings.strict_mode
            deserializer: Parses nested markup for tags such as <hover>
        """
        self.message = message
        if registry is None:
            from .tags import TagRegistry
            registry = TagRegistry()
        self.registry = registry
        self.resolver = resolver_make(placeholders)
        self.strict = appsettings.strict_mode if strict is None else strict
        self.deserializer = deserializer
        self.context = Context(message, self.strict, deserializer)

    def tagName_check(self, name: str) -> bool:
        return self.registry.exists(name)

    def tag_resolve(self, node: TagNode) -> Optional[Tag]:
        """Resolve a tag node through the registry; rejected arguments give None"""
        arguments = ArgumentQueue(
            self.context, [Argument(part.value, part.token) for part in node.arguments]
        )
        try:
            return self.registry.resolve(node.name, arguments, self.context)
        except ParsingError as e:
            LOG(f"<{node.name}> rejected: {e.message}", level=3)
            return None

    def preprocess(self) -> str:
        return resolve_placeholders(self.message, self.tagName_check, self.resolver)

    def parse(self) -> RootNode:
        """
        Parse the message

        Returns:
            Root of the element tree

        Raises:
            ParsingError: Malformed markup in strict mode
        """
        processed = self.preprocess()
        self.context = Context(processed, self.strict, self.deserializer)
        tokens = tokenize(processed)
        LOG(f"Tokenized message into {len(tokens)} tokens", level=3)

        root = build_tree(
            self.tag_resolve, self.tagName_check, self.resolver,
            tokens, processed, self.strict, original=self.message,
        )
        if appsettings.debug_mode:
            LOG(f"Element tree:\n{root}", level=1)
        return root

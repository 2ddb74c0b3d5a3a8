"""
MiniMessage facade

Entry point for turning markup into components, plus the string-level
helpers that work on markup without building a component.

Example:
    >>> mm = MiniMessage()
    >>> plain_text(mm.deserialize("<red>Hello <bold>world"))
    'Hello world'
    >>> mm.resolve_string("Hi <name>!", {"name": "<gold>Steve</gold>"})
    'Hi <gold>Steve</gold>!'
    >>> mm.strip_tags("<red>Hello</red> <unknown>")
    'Hello <unknown>'
"""

from typing import Callable, List, Optional

from ..config import appsettings
from ..models.parser import Token, TAG_TOKEN_TYPES
from ..models.nodes import RootNode
from ..models.component import Component
from ..models.tags import reset_is
from .tokenizer import TAG_START, ESCAPE, tokenize, unquote_and_escape
from .placeholders import (
    PlaceholderResolver, CombiningPlaceholderResolver, resolver_make, resolve_placeholders,
)
from .parser import Parser
from .compiler import Compiler
from .tags import TagRegistry
from .log import LOG


class MiniMessage:
    """
    Parses markup with a tag registry and default placeholders

    Attributes:
        registry: Tags available to every message
        strict: Strict parsing; defaults to appsettings.strict_mode
        placeholders: Resolver consulted after any per-call placeholders
    """

    def __init__(self, registry: Optional[TagRegistry] = None, strict: Optional[bool] = None, placeholders=None):
        self.registry = registry if registry is not None else TagRegistry()
        self.strict = appsettings.strict_mode if strict is None else strict
        self.placeholders = resolver_make(placeholders)

    def resolver_combine(self, placeholders=None) -> PlaceholderResolver:
        """Per-call placeholders first, then the defaults"""
        if placeholders is None:
            return self.placeholders
        return CombiningPlaceholderResolver([resolver_make(placeholders), self.placeholders])

    def parser_make(self, message: str, resolver: PlaceholderResolver) -> Parser:
        return Parser(
            message,
            registry=self.registry,
            placeholders=resolver,
            strict=self.strict,
            deserializer=lambda nested: self.deserialize(nested, resolver),
        )

    def deserialize_tree(self, message: str, placeholders=None) -> RootNode:
        """
        Parse a message into its element tree without applying tags

        Raises:
            ParsingError: Malformed markup in strict mode
        """
        return self.parser_make(message, self.resolver_combine(placeholders)).parse()

    def deserialize(self, message: str, placeholders=None) -> Component:
        """
        Parse a message into a component

        Args:
            message: Markup
            placeholders: Dict or PlaceholderResolver for this call only

        Raises:
            ParsingError: Malformed markup in strict mode
            StructureError: A component nested in its own hover text
        """
        root = self.deserialize_tree(message, placeholders)
        LOG(f"Parsed message of {len(message)} characters", level=2)
        return Compiler(root).compile()

    def resolve_string(self, message: str, placeholders=None) -> str:
        """Substitute string placeholders only; all tags are left as written"""
        return resolve_placeholders(message, self.registry.exists, self.resolver_combine(placeholders))

    def tagName_known(self, name: str, resolver: PlaceholderResolver) -> bool:
        name = name.lower()
        return reset_is(name) or self.registry.exists(name) or resolver.can_resolve(name)

    def tags_process(self, message: str, placeholders, tag_handler: Callable[[str], str]) -> str:
        """Rebuild message, passing the text of every known tag through tag_handler"""
        resolver = self.resolver_combine(placeholders)
        parts: List[str] = []
        for token in tokenize(message):
            raw = token.get(message)
            if token.type in TAG_TOKEN_TYPES and self.tagName_known(self.tokenName_get(token, message), resolver):
                parts.append(tag_handler(raw))
            else:
                parts.append(raw)
        return "".join(parts)

    @staticmethod
    def tokenName_get(token: Token, message: str) -> str:
        name_token = token.child_tokens[0]
        return unquote_and_escape(message, name_token.start_index, name_token.end_index)[0]

    def escape_tags(self, message: str, placeholders=None) -> str:
        r"""
        Escape every known tag so that it renders as literal text

        Example:
            '<red>hi</red>'  ->  '\<red>hi\</red>'
        """
        return self.tags_process(message, placeholders, lambda raw: raw.replace(TAG_START, ESCAPE + TAG_START))

    def strip_tags(self, message: str, placeholders=None) -> str:
        """Remove every known tag; text and unknown tags are kept as written"""
        return self.tags_process(message, placeholders, lambda raw: "")

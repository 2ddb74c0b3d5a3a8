"""
Models package for minimessage

Contains data structures and type definitions for the parser and the CLI
pipeline.
"""

from .state import ProgramState, ParsedMessage, pipeline
from .parser import Token, TokenType, TagPart
from .nodes import ElementNode, RootNode, ValueNode, TextNode, PlaceholderNode, TagNode
from .tags import (
    TagKind, Tag, Inserting, Modifying, ParserDirective, StylingTag, InsertingTag,
    Argument, ArgumentQueue, Context, TagSpec, TagCategory, RESERVED_TAGS,
)
from .component import Component, TextComponent, Style, TextColor, plain_text

__all__ = [
    "ProgramState",
    "ParsedMessage",
    "pipeline",
    "Token",
    "TokenType",
    "TagPart",
    "ElementNode",
    "RootNode",
    "ValueNode",
    "TextNode",
    "PlaceholderNode",
    "TagNode",
    "TagKind",
    "Tag",
    "Inserting",
    "Modifying",
    "ParserDirective",
    "StylingTag",
    "InsertingTag",
    "Argument",
    "ArgumentQueue",
    "Context",
    "TagSpec",
    "TagCategory",
    "RESERVED_TAGS",
    "Component",
    "TextComponent",
    "Style",
    "TextColor",
    "plain_text",
]

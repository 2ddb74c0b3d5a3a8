"""
Placeholders and the string pre-processor

A placeholder is a tag name that a PlaceholderResolver knows. String
replacements are substituted into the message before tokenizing, so they
may contain markup themselves; registered tag names are never replaced
this way. Component replacements are left in place and become
PlaceholderNodes when the tree is built.

Placeholder files for the CLI are plain YAML mappings:

    name: "<red>Steve</red>"
    server: Example
"""

from abc import ABC, abstractmethod
from pathlib import Path
from dataclasses import dataclass
from typing import Callable, Dict, Iterable, Optional, Union

import yaml

from ..models.parser import TokenType
from ..models.component import Component
from ..models.tags import tag_name_valid
from .tokenizer import MatchedTokenConsumer, SEPARATOR, string_scan
from .log import LOG


# Upper bound on substitution passes, so that placeholders expanding into
# each other terminate
MAX_PASSES = 16


class PlaceholderError(Exception):
    """Raised when a placeholder file cannot be loaded"""
    pass


@dataclass(frozen=True)
class Replacement:
    """
    The value a placeholder stands for

    Attributes:
        value: Markup string (pre-processed) or a Component (inserted as is)
    """
    value: Union[str, Component]

    def string_is(self) -> bool:
        return isinstance(self.value, str)


def placeholderName_sanitize(name: str) -> str:
    return name.lower()


class PlaceholderResolver(ABC):
    """Looks up placeholder replacements by name"""

    @abstractmethod
    def resolve(self, name: str) -> Optional[Replacement]:
        ...

    def can_resolve(self, name: str) -> bool:
        return self.resolve(name) is not None


class EmptyPlaceholderResolver(PlaceholderResolver):
    def resolve(self, name: str) -> Optional[Replacement]:
        return None


EMPTY_RESOLVER = EmptyPlaceholderResolver()


class MapPlaceholderResolver(PlaceholderResolver):
    """
    Resolver backed by a dict

    Keys are matched case-insensitively. Values may be strings, components
    or Replacement instances.

    Example:
        >>> resolver = MapPlaceholderResolver({"Name": "<red>Steve"})
        >>> resolver.resolve("name").value
        '<red>Steve'
    """

    def __init__(self, placeholders: Dict[str, Union[str, Component, Replacement]]):
        self.placeholders: Dict[str, Replacement] = {}
        for name, value in placeholders.items():
            if not isinstance(value, Replacement):
                value = Replacement(value)
            self.placeholders[placeholderName_sanitize(name)] = value

    def resolve(self, name: str) -> Optional[Replacement]:
        return self.placeholders.get(placeholderName_sanitize(name))

    def __len__(self) -> int:
        return len(self.placeholders)


class CombiningPlaceholderResolver(PlaceholderResolver):
    """Asks each resolver in turn; the first hit wins"""

    def __init__(self, resolvers: Iterable[PlaceholderResolver]):
        self.resolvers = list(resolvers)

    def resolve(self, name: str) -> Optional[Replacement]:
        for resolver in self.resolvers:
            replacement = resolver.resolve(name)
            if replacement is not None:
                return replacement
        return None


def resolver_make(placeholders) -> PlaceholderResolver:
    """Accept None, a dict or a resolver wherever placeholders are passed"""
    if placeholders is None:
        return EMPTY_RESOLVER
    if isinstance(placeholders, PlaceholderResolver):
        return placeholders
    return MapPlaceholderResolver(placeholders)


class StringResolvingConsumer(MatchedTokenConsumer[str]):
    """
    Rebuilds the message during a first-pass scan, replacing open tags
    whose name has a string replacement
    """

    def __init__(
        self,
        message: str,
        tag_name_checker: Callable[[str], bool],
        resolver: PlaceholderResolver,
    ):
        super().__init__(message)
        self.tag_name_checker = tag_name_checker
        self.resolver = resolver
        self.parts = []

    def accept(self, start: int, end: int, token_type: TokenType) -> None:
        super().accept(start, end, token_type)
        match = self.message[start:end]
        if token_type is not TokenType.OPEN_TAG:
            self.parts.append(match)
            return

        name = placeholderName_sanitize(self.message[start + 1:end - 1].split(SEPARATOR, 1)[0])
        if tag_name_valid(name) and not self.tag_name_checker(name):
            replacement = self.resolver.resolve(name)
            if replacement is not None and replacement.string_is():
                LOG(f"Placeholder <{name}> replaced", level=3)
                self.parts.append(replacement.value)
                return
        self.parts.append(match)

    def result(self) -> str:
        return "".join(self.parts)


def resolve_placeholders(
    message: str,
    tag_name_checker: Callable[[str], bool],
    resolver: PlaceholderResolver,
) -> str:
    """
    Substitute string placeholders until nothing changes

    Args:
        message: Raw markup
        tag_name_checker: True for names that are registered tags; those are
                          never treated as placeholders
        resolver: Placeholder source

    Returns:
        The message fed into the last pass. At most MAX_PASSES passes run;
        when the bound is hit the output of the final pass is discarded, so
        placeholders that expand into each other stop after MAX_PASSES - 1
        substitutions.
    """
    last = message
    for passes in range(1, MAX_PASSES + 1):
        consumer = StringResolvingConsumer(last, tag_name_checker, resolver)
        string_scan(last, consumer)
        result = consumer.result()
        if result == last:
            break
        if passes == MAX_PASSES:
            LOG(f"Placeholder expansion stopped after {MAX_PASSES} passes", level=2)
            break
        last = result
    return last


def placeholders_load(path: Path) -> MapPlaceholderResolver:
    """
    Load a YAML mapping of placeholder name to replacement string

    Raises:
        PlaceholderError: If the file is missing, malformed or not a mapping
    """
    path = Path(path)
    if not path.exists():
        raise PlaceholderError(f"Placeholder file not found: {path}")
    try:
        with open(path, 'r') as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise PlaceholderError(f"Failed to parse {path.name}: {e}")

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise PlaceholderError(f"{path.name} must contain a mapping of name to text")
    return MapPlaceholderResolver({str(k): str(v) for k, v in data.items()})

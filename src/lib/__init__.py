"""
minimessage - Tag markup parser for styled text

Parses <tag:arg>...</tag> markup into styled text components.
"""

__version__ = "1.0.0"

from .parser import Parser
from .compiler import Compiler
from .tags import TagRegistry
from .minimessage import MiniMessage
from .errors import ParsingError, StructureError
from .log import LOG, state_connectToLogger

__all__ = [
    "Parser",
    "Compiler",
    "TagRegistry",
    "MiniMessage",
    "ParsingError",
    "StructureError",
    "LOG",
    "state_connectToLogger",
    "__version__",
]

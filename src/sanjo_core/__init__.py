"""sanjo-core: parser for the indentation-based sanjo configuration format."""

from .config import (
    ASSIGNMENT_OPERATOR,
    CLASS_PREFIX,
    KEY_PREFIX,
    FormatConfig,
)
from .errors import (
    ConfigurationError,
    IllegalIndentationError,
    MalformedLineError,
    ParseError,
    SanjoError,
)
from .getter import resolve
from .model import ClassNode, Value
from .parser import Parser, parse, parse_file, parse_text
from .repl import SanjoRepl
from .source import FileSource, LineSource, TextSource

__all__ = [
    "parse",
    "parse_file",
    "parse_text",
    "resolve",
    "Parser",
    "FormatConfig",
    "CLASS_PREFIX",
    "KEY_PREFIX",
    "ASSIGNMENT_OPERATOR",
    "ClassNode",
    "Value",
    "LineSource",
    "FileSource",
    "TextSource",
    "SanjoError",
    "ConfigurationError",
    "ParseError",
    "IllegalIndentationError",
    "MalformedLineError",
    "SanjoRepl",
]

"""Error taxonomy for sanjo-core."""

from __future__ import annotations


class SanjoError(Exception):
    """Base class for every error raised by sanjo-core."""


class ConfigurationError(SanjoError):
    """Raised when a FormatConfig is built from invalid values."""


class ParseError(SanjoError):
    """A parse was aborted at a specific line of a source."""

    def __init__(self, source: str, line: int, reason: str) -> None:
        self.source = source
        self.line = line
        self.reason = reason
        super().__init__(f"Error parsing file {source}: {reason} in line {line}")


class IllegalIndentationError(ParseError):
    """Indentation is not a multiple of the width, or a line is nested too deep."""


class MalformedLineError(ParseError):
    """A key/value line without an assignment operator."""

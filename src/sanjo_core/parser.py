"""Parser: resolves indentation of sanjo lines into a ClassNode tree."""

from __future__ import annotations

import logging
from pathlib import Path

from .config import ASSIGNMENT_OPERATOR, CLASS_PREFIX, KEY_PREFIX, FormatConfig
from .errors import IllegalIndentationError, MalformedLineError
from .model import ClassNode, Value
from .source import FileSource, LineSource, TextSource


LOG = logging.getLogger(__name__)

SPACE = " "


# ---------------------------------------------------------------------------
# Line helpers
# ---------------------------------------------------------------------------

def split_indentation(raw_line: str) -> tuple[int, str]:
    """Return the count of leading spaces and the line without them.

    Only spaces count as indentation; a tab ends it.
    """
    line = raw_line.lstrip(SPACE)
    return len(raw_line) - len(line), line


def create_value(snippet: str, config: FormatConfig) -> Value | None:
    """Build a Value from a key/value line stripped of its indentation.

    Returns ``None`` when the assignment operator is missing.
    """
    key, sep, raw = snippet.partition(ASSIGNMENT_OPERATOR)
    if not sep:
        return None
    data: str | tuple[str, ...]
    if key.endswith(config.list_suffix):
        data = tuple(raw.split(config.list_separator))
        key = key[: -len(config.list_suffix)]
    else:
        data = raw
    if key.startswith(KEY_PREFIX):
        key = key[len(KEY_PREFIX):]
    return Value(key=key, data=data)


# ---------------------------------------------------------------------------
# Parser
# ---------------------------------------------------------------------------

class Parser:
    """Single forward pass over a LineSource.

    Indentation levels: the root is level 0 and a line indented by
    ``n * width`` spaces is level ``n + 1``. ``working_classes[level]`` is the
    class most recently declared at that level. After a class line the
    tracked level is one deeper than the class, since its content is nested.

    State is reset at the start of every ``parse()``; an instance must not
    be shared between threads.
    """

    def __init__(self, config: FormatConfig | None = None) -> None:
        self.config = config if config is not None else FormatConfig()
        self._reset()

    def _reset(self) -> None:
        self.root = ClassNode.default()
        self.working_classes: list[ClassNode] = [self.root]
        self.last_indent_level = 1
        self._identifier = "<unknown>"

    def parse(self, source: LineSource) -> ClassNode:
        lines = source.read_lines()
        self._reset()
        self._identifier = source.identifier
        classes = values = 0

        for line_number, raw_line in enumerate(lines, 1):
            indentation, line = split_indentation(raw_line)
            level = indentation // self.config.indentation_width + 1

            if line.startswith(CLASS_PREFIX):
                self._check_indentation(indentation, line_number)
                self._add_class(line[len(CLASS_PREFIX):], level, line_number)
                classes += 1
                level += 1
            elif line.startswith(KEY_PREFIX):
                self._check_indentation(indentation, line_number)
                self._add_value(line, level, line_number)
                values += 1
            else:
                continue

            self.last_indent_level = level

        LOG.debug(
            "Parsed %s: %d lines, %d classes, %d values",
            self._identifier, len(lines), classes, values,
        )
        return self.root

    # -- Line handlers --------------------------------------------------

    def _add_class(self, name: str, level: int, line_number: int) -> None:
        if level > self.last_indent_level:
            raise IllegalIndentationError(
                self._identifier, line_number, "class definition is indented too deep"
            )
        node = ClassNode(name)
        parent = self.working_classes[level - 1]
        parent.add_child(node)
        if level < len(self.working_classes):
            self.working_classes[level] = node
        else:
            self.working_classes.append(node)
        LOG.debug("line %d: class %r under %r", line_number, name, parent.name)

    def _add_value(self, line: str, level: int, line_number: int) -> None:
        if level > self.last_indent_level:
            raise IllegalIndentationError(
                self._identifier, line_number, "value is indented deeper than its class"
            )
        value = create_value(line, self.config)
        if value is None:
            raise MalformedLineError(
                self._identifier,
                line_number,
                f"missing assignment operator {ASSIGNMENT_OPERATOR!r}",
            )
        owner = self.working_classes[level - 1]
        owner.put_value(value)
        LOG.debug("line %d: value %r in %r", line_number, value.key, owner.name)

    def _check_indentation(self, indentation: int, line_number: int) -> None:
        width = self.config.indentation_width
        if indentation % width != 0:
            raise IllegalIndentationError(
                self._identifier,
                line_number,
                f"indentation is not a multiple of {width}",
            )


# ---------------------------------------------------------------------------
# Convenience entry points
# ---------------------------------------------------------------------------

def parse(source: LineSource, config: FormatConfig | None = None) -> ClassNode:
    """Parse *source* with a fresh Parser and return the root class."""
    return Parser(config).parse(source)


def parse_text(
    text: str, config: FormatConfig | None = None, identifier: str = "<string>"
) -> ClassNode:
    return parse(TextSource(text, identifier), config)


def parse_file(path: Path | str, config: FormatConfig | None = None) -> ClassNode:
    return parse(FileSource(path), config)

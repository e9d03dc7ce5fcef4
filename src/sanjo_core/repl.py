"""SanjoRepl: incremental shell for exploring sanjo text.

Also provides the ``sanjo`` CLI entry point via ``app``.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import IO

import typer

from .config import (
    ASSIGNMENT_OPERATOR,
    CLASS_PREFIX,
    DEFAULT_INDENTATION_WIDTH,
    DEFAULT_LIST_SEPARATOR,
    DEFAULT_LIST_SUFFIX,
    INDENTATION_WIDTH_KEY,
    KEY_PREFIX,
    LIST_SEPARATOR_KEY,
    LIST_SUFFIX_KEY,
    FormatConfig,
)
from .errors import ConfigurationError, SanjoError
from .getter import Target, resolve
from .model import ClassNode, Value
from .parser import Parser, parse_file
from .source import FileSource, TextSource


LOG = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# SanjoRepl class (notebook / programmatic use)
# ---------------------------------------------------------------------------

class SanjoRepl:
    """Stateful shell that accumulates sanjo lines across calls.

    Usage::

        repl = SanjoRepl()
        repl.feed(":Server")
        repl.feed("    .host=localhost")
        repl.get("Server.host")   # → Value(key='host', data='localhost')

        repl.root     # tree of everything fed so far
        repl.reset()  # clear state

    The whole buffer is parsed again after every ``feed()`` because the
    placement of a line depends on all lines before it.
    """

    def __init__(self, config: FormatConfig | None = None) -> None:
        self.parser = Parser(config)
        self.reset()

    def feed(self, text: str) -> ClassNode:
        """Append *text* to the buffer and return the updated tree.

        If the extended buffer does not parse, the error propagates and the
        buffer is left as it was.
        """
        candidate = self.lines + text.splitlines()
        self.root = self.parser.parse(TextSource("\n".join(candidate), self.identifier))
        self.lines = candidate
        return self.root

    def load(self, path: Path | str) -> ClassNode:
        """Replace the buffer with the lines of a file."""
        source = FileSource(path)
        lines = source.read_lines()
        self.root = self.parser.parse(TextSource("\n".join(lines), source.identifier))
        self.lines = lines
        self.identifier = source.identifier
        LOG.info("Loaded %s", source.identifier)
        return self.root

    def get(self, path: str) -> Target | None:
        return resolve(self.root, path)

    def reset(self) -> None:
        """Clear all accumulated lines."""
        self.lines: list[str] = []
        self.identifier = "<repl>"
        self.root = ClassNode.default()


# ---------------------------------------------------------------------------
# CLI helpers
# ---------------------------------------------------------------------------

def _fmt_inline(target: Target | None) -> str:
    """Format a single target for compact one-line display."""
    if isinstance(target, str):
        return f'"{target}"'
    if isinstance(target, Value):
        if target.is_list:
            return "[" + ", ".join(f'"{item}"' for item in target.items) + "]"
        return f'"{target.data}"'
    if isinstance(target, ClassNode):
        return f"ClassNode({target.path or target.name})"
    return repr(target)


def _fmt_inspect(target: Target | None) -> str:
    """Pretty-print a target for inspect() / i()."""
    if isinstance(target, ClassNode):
        header = f"ClassNode({target.path or target.name})"
        if not target.values and not target.children:
            return f"{header} {{}}"
        lines = [f"{header} {{"]
        if target.values:
            width = max(len(k) for k in target.values)
            for key, value in target.values.items():
                lines.append(f"  {key:<{width}}: {_fmt_inline(value)}")
        for node in target.children:
            lines.append(f"  :{node.name}")
        lines.append("}")
        return "\n".join(lines)

    if isinstance(target, Value) and target.is_list:
        lines = [f"Value({target.key}) ["]
        for i, item in enumerate(target.items, 1):
            lines.append(f"  {i}: {_fmt_inline(item)}")
        lines.append("]")
        return "\n".join(lines)

    return _fmt_inline(target)


def _fmt_value_line(value: Value, config: FormatConfig) -> str:
    if value.is_list:
        return (
            f"{KEY_PREFIX}{value.key}{config.list_suffix}{ASSIGNMENT_OPERATOR}"
            + config.list_separator.join(value.items)
        )
    return f"{KEY_PREFIX}{value.key}{ASSIGNMENT_OPERATOR}{value.data}"


def _fmt_tree(node: ClassNode, config: FormatConfig | None = None, depth: int = 0) -> str:
    """Render *node*'s content as sanjo class and key/value lines."""
    if config is None:
        config = FormatConfig()
    pad = " " * (config.indentation_width * depth)
    lines: list[str] = []
    for value in node.values.values():
        lines.append(pad + _fmt_value_line(value, config))
    for child in node.children:
        lines.append(f"{pad}{CLASS_PREFIX}{child.name}")
        nested = _fmt_tree(child, config, depth + 1)
        if nested:
            lines.append(nested)
    return "\n".join(lines)


def _show_tree(repl: SanjoRepl, dest: IO[str]) -> None:
    tree = _fmt_tree(repl.root, repl.parser.config)
    if not tree:
        print("  (empty)", file=dest)
        return
    print(tree, file=dest)


def _process_line(repl: SanjoRepl, line: str, dest: IO[str]) -> bool:
    """Process one input line.  Returns False when the session should end."""
    command = line.strip()
    if not command:
        return True

    # ── Exit ──────────────────────────────────────────────────────────────
    if command in ("/q", "/quit"):
        return False

    # ── Control commands ──────────────────────────────────────────────────
    if command == "/tree":
        _show_tree(repl, dest)
        return True

    if command == "/reset":
        repl.reset()
        return True

    if command.startswith("/load "):
        filepath = command[6:].strip()
        try:
            repl.load(filepath)
        except (OSError, UnicodeDecodeError) as exc:
            print(f"Error reading '{filepath}': {exc}", file=sys.stderr)
        except SanjoError as exc:
            print(str(exc), file=sys.stderr)
        return True

    # ── inspect() / i() ───────────────────────────────────────────────────
    for prefix in ("inspect(", "i("):
        if command.startswith(prefix) and command.endswith(")"):
            path = command[len(prefix):-1].strip()
            print(_fmt_inspect(repl.get(path)), file=dest)
            return True

    # ── ? path ────────────────────────────────────────────────────────────
    if command.startswith("? "):
        print(_fmt_inline(repl.get(command[2:].strip())), file=dest)
        return True

    # ── Regular sanjo input, indentation kept ─────────────────────────────
    try:
        repl.feed(line.rstrip("\n"))
    except SanjoError as exc:
        print(str(exc), file=sys.stderr)
    return True


def main(repl: SanjoRepl | None = None) -> None:
    """Interactive sanjo shell (``python -m sanjo_core.repl``)."""
    if repl is None:
        repl = SanjoRepl()

    print("sanjo shell  (/q to quit  |  /tree  /reset  /load <file>  |  ? <path>  inspect(<path>))")

    while True:
        try:
            line = input("sanjo> ")
        except EOFError:
            print()
            break
        except KeyboardInterrupt:
            print()
            continue

        if not _process_line(repl, line, sys.stdout):
            break


# ---------------------------------------------------------------------------
# CLI entry point
# ---------------------------------------------------------------------------

app = typer.Typer(help="Parse sanjo configuration files and print their class tree.")


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s :: %(message)s",
    )


@app.command()
def cli(
    file: Path | None = typer.Argument(
        None, help="Sanjo file to parse. Without it the interactive shell starts."
    ),
    get: str | None = typer.Option(
        None, "--get", "-g", help="Dotted path to print instead of the whole tree."
    ),
    indentation: int = typer.Option(
        DEFAULT_INDENTATION_WIDTH, "--indentation", "-w", help="Spaces per indentation level."
    ),
    list_suffix: str = typer.Option(
        DEFAULT_LIST_SUFFIX, "--list-suffix", help="Key suffix that marks a list value."
    ),
    list_separator: str = typer.Option(
        DEFAULT_LIST_SEPARATOR, "--list-separator", help="Separator between list elements."
    ),
    log_level: str = typer.Option("WARNING", "--log-level", help="Logging level (DEBUG, INFO, ...)."),
) -> None:
    """Print the class tree of a sanjo file, or one value of it."""
    _configure_logging(log_level)

    try:
        config = FormatConfig.from_mapping(
            {
                INDENTATION_WIDTH_KEY: indentation,
                LIST_SUFFIX_KEY: list_suffix,
                LIST_SEPARATOR_KEY: list_separator,
            }
        )
    except ConfigurationError as exc:
        raise typer.BadParameter(str(exc)) from exc

    if file is None:
        main(SanjoRepl(config))
        return

    try:
        root = parse_file(file, config)
    except (SanjoError, OSError, UnicodeDecodeError) as exc:
        typer.secho(str(exc), fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1) from exc

    if get is None:
        typer.echo(_fmt_tree(root, config))
        return

    target = resolve(root, get)
    if target is None:
        typer.secho(f"Nothing found at '{get}'", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=2)
    typer.echo(_fmt_inspect(target))


if __name__ == "__main__":  # pragma: no cover
    app()

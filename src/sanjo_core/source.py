"""Line sources: where the parser pulls its raw lines from."""

from __future__ import annotations

from pathlib import Path
from typing import Protocol


class LineSource(Protocol):
    """Anything that can hand the parser an ordered list of lines.

    ``identifier`` names the input in error messages (a file path for files).
    """

    identifier: str

    def read_lines(self) -> list[str]:
        ...


class FileSource:
    """Lines of a text file. I/O errors propagate from ``read_lines()``."""

    def __init__(self, path: Path | str, encoding: str = "utf-8") -> None:
        self.path = Path(path)
        self.encoding = encoding
        self.identifier = str(self.path.absolute())

    def read_lines(self) -> list[str]:
        return self.path.read_text(encoding=self.encoding).splitlines()

    def __repr__(self) -> str:
        return f"FileSource({self.identifier!r})"


class TextSource:
    """Lines of an in-memory string."""

    def __init__(self, text: str, identifier: str = "<string>") -> None:
        self.text = text
        self.identifier = identifier

    def read_lines(self) -> list[str]:
        return self.text.splitlines()

    def __repr__(self) -> str:
        return f"TextSource({self.identifier!r})"

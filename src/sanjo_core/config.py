"""Format configuration and the fixed markers of the sanjo format."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from .errors import ConfigurationError


CLASS_PREFIX = ":"
KEY_PREFIX = "."
ASSIGNMENT_OPERATOR = "="

DEFAULT_INDENTATION_WIDTH = 4
DEFAULT_LIST_SUFFIX = "[]"
DEFAULT_LIST_SEPARATOR = ","

# Meta keys understood by FormatConfig.from_mapping
INDENTATION_WIDTH_KEY = "indentation"
LIST_SUFFIX_KEY = "list_suffix"
LIST_SEPARATOR_KEY = "list_separator"


@dataclass(frozen=True)
class FormatConfig:
    """Settings fixed for the lifetime of a single parse."""

    indentation_width: int = DEFAULT_INDENTATION_WIDTH
    list_suffix: str = DEFAULT_LIST_SUFFIX
    list_separator: str = DEFAULT_LIST_SEPARATOR

    def __post_init__(self) -> None:
        if (
            isinstance(self.indentation_width, bool)
            or not isinstance(self.indentation_width, int)
            or self.indentation_width <= 0
        ):
            raise ConfigurationError(
                f"indentation width must be a positive integer, got {self.indentation_width!r}"
            )
        if not self.list_suffix:
            raise ConfigurationError("list suffix must not be empty")
        if not self.list_separator:
            raise ConfigurationError("list separator must not be empty")

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, Any]) -> FormatConfig:
        """Build a config from meta keys; missing or ``None`` keys keep the defaults."""
        kwargs: dict[str, Any] = {}
        width = mapping.get(INDENTATION_WIDTH_KEY)
        if width is not None:
            try:
                kwargs["indentation_width"] = int(width)
            except (TypeError, ValueError) as exc:
                raise ConfigurationError(
                    f"indentation width must be a positive integer, got {width!r}"
                ) from exc
        suffix = mapping.get(LIST_SUFFIX_KEY)
        if suffix is not None:
            kwargs["list_suffix"] = str(suffix)
        separator = mapping.get(LIST_SEPARATOR_KEY)
        if separator is not None:
            kwargs["list_separator"] = str(separator)
        return cls(**kwargs)

"""Tests for the indentation-resolving parser."""

import logging

import pytest

from sanjo_core.config import FormatConfig
from sanjo_core.errors import IllegalIndentationError, MalformedLineError, ParseError
from sanjo_core.model import DEFAULT_CLASS_NAME, Value
from sanjo_core.parser import (
    Parser,
    create_value,
    parse,
    parse_file,
    parse_text,
    split_indentation,
)
from sanjo_core.source import TextSource


def lines(*rows: str) -> str:
    return "\n".join(rows)


# ---------------------------------------------------------------------------
# split_indentation / create_value
# ---------------------------------------------------------------------------

def test_split_indentation_spaces():
    assert split_indentation("    :A") == (4, ":A")

def test_split_indentation_none():
    assert split_indentation(".x=1") == (0, ".x=1")

def test_split_indentation_stops_at_tab():
    assert split_indentation("  \t:A") == (2, "\t:A")

def test_create_value_scalar():
    assert create_value(".name=Alice", FormatConfig()) == Value("name", "Alice")

def test_create_value_splits_on_first_operator():
    assert create_value(".expr=a=b", FormatConfig()) == Value("expr", "a=b")

def test_create_value_keeps_raw_text():
    assert create_value('.msg= "hi" ', FormatConfig()) == Value("msg", ' "hi" ')

def test_create_value_empty():
    assert create_value(".empty=", FormatConfig()) == Value("empty", "")

def test_create_value_list():
    assert create_value(".tags[]=a, b", FormatConfig()) == Value("tags", ("a", " b"))

def test_create_value_list_keeps_empty_elements():
    assert create_value(".tags[]=a,,b,", FormatConfig()) == Value("tags", ("a", "", "b", ""))

def test_create_value_custom_list_markers():
    cfg = FormatConfig(list_suffix="*", list_separator="|")
    assert create_value(".tags*=a|b", cfg) == Value("tags", ("a", "b"))
    # the default suffix means nothing under a custom config
    assert create_value(".tags[]=a|b", cfg) == Value("tags[]", "a|b")

def test_create_value_missing_operator():
    assert create_value(".broken", FormatConfig()) is None


# ---------------------------------------------------------------------------
# Tree construction
# ---------------------------------------------------------------------------

def test_empty_input():
    root = parse_text("")
    assert root.name == DEFAULT_CLASS_NAME
    assert root.children == []
    assert root.values == {}

def test_top_level_class_with_value():
    root = parse_text(lines(":Root", "    .name=Alice"))
    assert [c.name for c in root.children] == ["Root"]
    assert root.children[0].get("name") == Value("name", "Alice")

def test_nested_classes():
    root = parse_text(lines(":A", "    :B", "        .x=1"))
    b = root.child("A").child("B")
    assert b.get("x") == Value("x", "1")
    assert b.parent is root.child("A")
    assert b.level == 2

def test_siblings_share_parent():
    root = parse_text(lines(":A", "    :B", "    :C", "    :D"))
    a = root.child("A")
    assert [c.name for c in a.children] == ["B", "C", "D"]
    assert all(c.parent is a for c in a.children)

def test_top_level_siblings():
    root = parse_text(lines(":A", ":B"))
    assert [c.name for c in root.children] == ["A", "B"]
    assert all(c.parent is root for c in root.children)

def test_dedent_attaches_to_ancestor_not_previous_class():
    root = parse_text(lines(":A", "    :B", ":C"))
    assert [c.name for c in root.children] == ["A", "C"]
    assert root.child("A").child("C") is None
    assert root.child("A").child("B").children == []

def test_dedent_by_one_of_many_levels():
    root = parse_text(lines(
        ":A",
        "    :B",
        "        :C",
        "            .deep=1",
        "    :D",
        "        .x=2",
    ))
    a = root.child("A")
    assert [c.name for c in a.children] == ["B", "D"]
    assert a.child("D").get("x") == Value("x", "2")
    assert a.child("B").child("C").get("deep") == Value("deep", "1")

def test_value_after_nested_class_goes_to_enclosing_class():
    root = parse_text(lines(
        ":A",
        "    :B",
        "        .inner=1",
        "    .outer=2",
        ".top=3",
    ))
    assert root.child("A").get("outer") == Value("outer", "2")
    assert root.child("A").child("B").get("inner") == Value("inner", "1")
    assert root.get("top") == Value("top", "3")

def test_class_after_value_at_same_level_is_nested_sibling():
    root = parse_text(lines(":A", "    .x=1", "    :B", "        .y=2"))
    a = root.child("A")
    assert a.get("x") == Value("x", "1")
    assert a.child("B").get("y") == Value("y", "2")

def test_root_list_value():
    root = parse_text(".tags[]=a,b,c")
    assert root.get("tags") == Value("tags", ("a", "b", "c"))

def test_list_without_separator_is_single_element():
    root = parse_text(".tags[]=only")
    assert root.get("tags").data == ("only",)

def test_duplicate_key_last_write_wins():
    root = parse_text(lines(":A", "    .k=first", "    .k=second"))
    a = root.child("A")
    assert a.get("k") == Value("k", "second")
    assert len(a.values) == 1

def test_same_key_in_different_classes():
    root = parse_text(lines(":A", "    .k=1", ":B", "    .k=2"))
    assert root.child("A").get("k").data == "1"
    assert root.child("B").get("k").data == "2"

def test_class_name_is_raw_text_after_marker():
    root = parse_text(":My Class ")
    assert root.children[0].name == "My Class "

def test_comment_lines_are_ignored():
    with_comments = parse_text(lines(
        "# a comment",
        ":A",
        "",
        "      misaligned comment",
        "    .x=1",
        "\t.tabbed=ignored",
        "            deeply indented comment",
        "    :B",
    ))
    without = parse_text(lines(":A", "    .x=1", "    :B"))
    assert with_comments == without

def test_comment_does_not_advance_indentation_state():
    # the comment is indented deeper than the class, yet :B is still legal
    root = parse_text(lines(":A", "        # comment", "    :B"))
    assert root.child("A").child("B") is not None

def test_custom_indentation_width():
    cfg = FormatConfig(indentation_width=2)
    root = parse_text(lines(":A", "  :B", "    .x=1"), cfg)
    assert root.child("A").child("B").get("x") == Value("x", "1")

def test_custom_list_separator():
    cfg = FormatConfig(list_separator=";")
    root = parse_text(".hosts[]=a,b;c", cfg)
    assert root.get("hosts").data == ("a,b", "c")


# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------

def test_indentation_not_multiple_of_width():
    with pytest.raises(IllegalIndentationError) as exc_info:
        parse_text(lines(":A", "   .x=1"), identifier="conf.sanjo")
    err = exc_info.value
    assert err.line == 2
    assert err.source == "conf.sanjo"
    assert "multiple of 4" in err.reason

def test_misaligned_class_line():
    with pytest.raises(IllegalIndentationError) as exc_info:
        parse_text(lines(":A", "     :B"))
    assert exc_info.value.line == 2

def test_class_indented_too_deep():
    with pytest.raises(IllegalIndentationError) as exc_info:
        parse_text(lines(":A", "        :B"))
    assert exc_info.value.line == 2
    assert "class" in exc_info.value.reason

def test_first_class_indented():
    with pytest.raises(IllegalIndentationError) as exc_info:
        parse_text("    :A")
    assert exc_info.value.line == 1

def test_class_deeper_than_preceding_value():
    with pytest.raises(IllegalIndentationError):
        parse_text(lines(":A", "    .x=1", "        :B"))

def test_value_deeper_than_its_class():
    with pytest.raises(IllegalIndentationError) as exc_info:
        parse_text(lines(":A", "    :B", ":C", "        .y=2"))
    assert exc_info.value.line == 4

def test_value_indented_at_start():
    with pytest.raises(IllegalIndentationError):
        parse_text("    .x=1")

def test_line_numbers_count_comment_lines():
    with pytest.raises(IllegalIndentationError) as exc_info:
        parse_text(lines("comment", "", ":A", "  .x=1"))
    assert exc_info.value.line == 4

def test_malformed_value_line():
    with pytest.raises(MalformedLineError) as exc_info:
        parse_text(lines(":A", "    .no_operator"), identifier="conf.sanjo")
    assert exc_info.value.line == 2
    assert isinstance(exc_info.value, ParseError)

def test_error_message_names_source_and_line():
    with pytest.raises(ParseError) as exc_info:
        parse_text(" :A", identifier="/etc/app.sanjo")
    message = str(exc_info.value)
    assert "/etc/app.sanjo" in message
    assert "line 1" in message


# ---------------------------------------------------------------------------
# Parser lifecycle / entry points
# ---------------------------------------------------------------------------

def test_parser_reuse_starts_fresh():
    parser = Parser()
    first = parser.parse(TextSource(lines(":A", "    :B")))
    second = parser.parse(TextSource(":C"))
    assert [c.name for c in second.children] == ["C"]
    assert first is not second
    assert [c.name for c in first.children] == ["A"]

def test_parser_reuse_after_error():
    parser = Parser()
    with pytest.raises(IllegalIndentationError):
        parser.parse(TextSource(lines(":A", "        :B")))
    root = parser.parse(TextSource(":A"))
    assert [c.name for c in root.children] == ["A"]

def test_parse_uses_source_protocol():
    class ListSource:
        identifier = "list"

        def read_lines(self):
            return [":A", "    .x=1"]

    root = parse(ListSource())
    assert root.child("A").get("x").data == "1"

def test_parse_file(tmp_path):
    path = tmp_path / "app.sanjo"
    path.write_text(":A\n    .x=1\n", encoding="utf-8")
    root = parse_file(path)
    assert root.child("A").get("x").data == "1"

def test_parse_file_error_has_absolute_path(tmp_path):
    path = tmp_path / "bad.sanjo"
    path.write_text(":A\n  .x=1\n", encoding="utf-8")
    with pytest.raises(IllegalIndentationError) as exc_info:
        parse_file(path)
    assert exc_info.value.source == str(path.absolute())

def test_parse_file_missing(tmp_path):
    with pytest.raises(OSError):
        parse_file(tmp_path / "missing.sanjo")

def test_debug_logging(caplog):
    with caplog.at_level(logging.DEBUG, logger="sanjo_core.parser"):
        parse_text(lines(":A", "    .x=1"))
    messages = [r.getMessage() for r in caplog.records]
    assert any("class 'A'" in m for m in messages)
    assert any("1 classes, 1 values" in m for m in messages)

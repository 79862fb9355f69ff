"""Tests for the tagged stream serializer."""

import json

import pytest

from gitlogjson.exceptions import MalformedInputError
from gitlogjson.serializer import (
    TaggedStreamSerializer,
    count_top_level_objects,
    serialize_tagged_stream,
    split_lines,
    strip_trailing_comma,
    wrap_in_array,
)


EXPECTED_KEYS = {
    "commit",
    "abbreviated_commit",
    "tree",
    "abbreviated_tree",
    "parent",
    "abbreviated_parent",
    "refs",
    "encoding",
    "subject",
    "sanitized_subject_line",
    "body",
    "commit_notes",
    "author",
    "committer",
}


def test_split_lines_only_on_newline():
    """Test form feeds and vertical tabs do not split lines."""
    assert split_lines("a\fb\x0bc\nd\x1ce\n") == ["a\fb\x0bc", "d\x1ce"]


def test_split_lines_empty():
    """Test empty input yields no lines."""
    assert split_lines("") == []


def test_strip_trailing_comma():
    """Test the last separator is removed."""
    assert strip_trailing_comma('{\n"a": "1"\n},\n{\n"a": "2"\n},\n') == '{\n"a": "1"\n},\n{\n"a": "2"\n}'


def test_strip_trailing_comma_is_idempotent():
    """Test normalizing twice changes nothing."""
    once = strip_trailing_comma("{},\n{},\n")
    assert strip_trailing_comma(once) == once


def test_strip_trailing_comma_ignores_inner_commas():
    """Test commas that are not last are untouched."""
    text = '{"subject": "a, b"}'
    assert strip_trailing_comma(text) == text


def test_strip_trailing_comma_empty():
    """Test zero commits."""
    assert strip_trailing_comma("") == ""


def test_wrap_in_array_empty():
    """Test zero commits produce an empty array."""
    document = wrap_in_array("")
    assert document == "[\n]\n"
    assert json.loads(document) == []


def test_wrap_in_array():
    """Test objects are bracketed."""
    assert wrap_in_array("{}") == "[\n{}\n]\n"


def test_serialize_empty_input(tag):
    """Test empty stream yields []."""
    document = serialize_tagged_stream("", tag)
    assert json.loads(document) == []


def test_serialize_single_commit(tag, make_commit, render_log):
    """Test one commit produces a full object."""
    commit = make_commit(
        1,
        s='Fix "quoted" thing',
        b="Body line one\n\nBody line\ttwo with \\ backslash\n",
        N="Reviewed-by: someone\n",
        aN='Zoë "Z" Example',
        aE="zoe@example.com",
    )
    stream = render_log(tag, [commit])

    data = json.loads(serialize_tagged_stream(stream, tag))

    assert len(data) == 1
    entry = data[0]
    assert set(entry.keys()) == EXPECTED_KEYS
    assert entry["commit"] == commit["H"]
    assert entry["subject"] == 'Fix "quoted" thing'
    assert entry["body"] == "Body line one\n\nBody line\ttwo with \\ backslash\n"
    assert entry["commit_notes"] == "Reviewed-by: someone\n"
    assert entry["author"] == {
        "name": 'Zoë "Z" Example',
        "email": "zoe@example.com",
        "date": "Mon, 1 Jan 2024 10:00:00 +0000",
    }
    assert set(entry["committer"].keys()) == {"name", "email", "date"}


def test_serialize_empty_fields(tag, make_commit, render_log):
    """Test commits without body or notes."""
    stream = render_log(tag, [make_commit(1, b="", N="")])

    entry = json.loads(serialize_tagged_stream(stream, tag))[0]

    assert entry["body"] == ""
    assert entry["commit_notes"] == ""


@pytest.mark.parametrize("count", [1, 2, 5])
def test_serialize_many_commits(tag, make_commit, render_log, count):
    """Test N commits give N elements and no trailing comma."""
    stream = render_log(tag, [make_commit(i) for i in range(1, count + 1)])

    serializer = TaggedStreamSerializer(tag)
    document = serializer.serialize(stream)

    data = json.loads(document)
    assert len(data) == count
    assert [d["subject"] for d in data] == [f"Commit number {i}" for i in range(1, count + 1)]
    assert document.count("\n},\n") == count - 1
    assert ",\n]" not in document
    assert document.endswith("}\n]\n")
    assert serializer.commit_count == count


def test_serialize_control_characters(tag, make_commit, render_log):
    """Test control characters in free-form fields survive."""
    body = "escape \x1b[31m red \x1b[0m\x01\x7f form\ffeed\rreturn\n"
    stream = render_log(tag, [make_commit(1, b=body)])

    entry = json.loads(serialize_tagged_stream(stream, tag))[0]

    assert entry["body"] == body


def test_serialize_braces_in_messages(tag, make_commit, render_log):
    """Test braces and brackets in text do not confuse counting."""
    stream = render_log(
        tag,
        [make_commit(1, s="fix {json} parsing ]", b="}\n},\n[\n"), make_commit(2)],
    )

    serializer = TaggedStreamSerializer(tag)
    data = json.loads(serializer.serialize(stream))

    assert data[0]["body"] == "}\n},\n[\n"
    assert serializer.commit_count == 2


def test_serialize_accepts_string_tag(make_commit, render_log, tag):
    """Test the tag can be passed as plain text."""
    stream = render_log(tag, [make_commit(1)])
    assert len(json.loads(serialize_tagged_stream(stream, "@@T@@"))) == 1


def test_serialize_malformed_input(tag):
    """Test unmatched close tag fails without output."""
    with pytest.raises(MalformedInputError):
        serialize_tagged_stream('{\n"commit": "abc",\n@@T@@\n},\n', tag)


def test_serialize_truncated_stream(tag, make_commit, render_log):
    """Test a stream cut inside a field fails."""
    stream = render_log(tag, [make_commit(1, b="half of it\n")])
    truncated = stream[: stream.index("@@T@@ body") + len("@@T@@ body\nhalf")]

    with pytest.raises(MalformedInputError):
        serialize_tagged_stream(truncated, tag)


def test_count_top_level_objects():
    """Test object counting skips string contents."""
    document = '[\n{"subject": "a { b", "author": {"name": "x"}},\n{"x": "}\\""}\n]'
    assert count_top_level_objects(document) == 2
    assert count_top_level_objects("[\n]") == 0

"""Assemble the tagged git log stream into a JSON array."""

import logging
from typing import List, Union

from gitlogjson.models import TagToken
from gitlogjson.tagged_parser import TaggedBlockParser


logger = logging.getLogger("gitlogjson")


def split_lines(text: str) -> List[str]:
    """
    Split a stream into lines on LF only.

    str.splitlines() also breaks on form feeds, vertical tabs and other
    separators, which would tear apart commit text containing them.
    """
    if not text:
        return []
    lines = text.split("\n")
    if lines[-1] == "":
        lines.pop()
    return lines


def strip_trailing_comma(text: str) -> str:
    """
    Remove the separator left after the last commit object.

    Only a comma that is the last non-whitespace character is removed, so
    running this on already normalized text changes nothing.

    Args:
        text: Concatenated commit objects

    Returns:
        Text without the trailing comma
    """
    body = text.rstrip()
    if body.endswith(","):
        return body[:-1]
    return body


def wrap_in_array(body: str) -> str:
    """
    Wrap a comma-separated object sequence in array brackets.

    Args:
        body: Normalized commit objects, possibly empty

    Returns:
        JSON array text
    """
    if not body.strip():
        return "[\n]\n"
    return f"[\n{body}\n]\n"


def serialize_tagged_stream(text: str, tag: Union[TagToken, str]) -> str:
    """
    Convert a tagged git log stream into a JSON array document.

    Args:
        text: Output of the log template
        tag: Delimiter the template was rendered with

    Returns:
        JSON array text

    Raises:
        MalformedInputError: If the tagged blocks are unbalanced
    """
    return TaggedStreamSerializer(tag).serialize(text)


class TaggedStreamSerializer:
    """Run the parse, normalize and wrap stages over one stream."""

    def __init__(self, tag: Union[TagToken, str]):
        """
        Initialize serializer.

        Args:
            tag: Delimiter the template was rendered with
        """
        self.tag = tag if isinstance(tag, TagToken) else TagToken(tag)
        self.commit_count = 0

    def serialize(self, text: str) -> str:
        """
        Serialize a complete stream.

        Nothing is returned unless every stage succeeds.

        Args:
            text: Output of the log template

        Returns:
            JSON array text
        """
        parser = TaggedBlockParser(self.tag)
        objects = "\n".join(parser.transform(split_lines(text)))
        document = wrap_in_array(strip_trailing_comma(objects))

        self.commit_count = count_top_level_objects(document)
        logger.debug(
            f"Serialized {self.commit_count} commits",
            extra={"commit_count": self.commit_count},
        )
        return document


def count_top_level_objects(document: str) -> int:
    """
    Count the elements of a serialized commit array.

    Walks the text tracking string literals so braces inside commit
    messages are not counted.
    """
    count = 0
    depth = 0
    in_string = False
    escaped = False
    for char in document:
        if in_string:
            if escaped:
                escaped = False
            elif char == "\\":
                escaped = True
            elif char == '"':
                in_string = False
        elif char == '"':
            in_string = True
        elif char in "{[":
            if depth == 1 and char == "{":
                count += 1
            depth += 1
        elif char in "}]":
            depth -= 1
    return count

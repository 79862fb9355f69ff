"""Tagged-block parser for the intermediate git log stream."""

import logging
from typing import Iterable, Iterator, Optional

from gitlogjson.escaping import format_property
from gitlogjson.exceptions import MalformedInputError
from gitlogjson.models import ParserState, PendingField, TagToken


logger = logging.getLogger("gitlogjson")


class TaggedBlockParser:
    """
    Rewrite tag-delimited raw fields as escaped JSON properties.

    Lines outside a tagged block are already valid JSON fragments and pass
    through unchanged. A block looks like::

        <TAG> subject
        raw text, any number of lines
        <TAG>,

    and is emitted as a single ``"subject": "..."`` line. The trailing comma
    on the close line is carried over to the emitted property.

    Only one field may be open at a time.
    """

    def __init__(self, tag: TagToken):
        """
        Initialize parser.

        Args:
            tag: Delimiter used by the log template for this run
        """
        self.tag = tag
        self.state = ParserState.SCANNING
        self.pending: Optional[PendingField] = None
        self.line_number = 0
        self.fields_flushed = 0

    def _field_name(self, stripped: str) -> Optional[str]:
        """Return the field name if the line opens a tagged block."""
        parts = stripped.split(None, 1)
        if len(parts) == 2 and parts[0] == self.tag.value:
            return parts[1].strip()
        return None

    def _is_close(self, stripped: str) -> bool:
        return stripped == self.tag.value or stripped == self.tag.value + ","

    def feed(self, line: str) -> Optional[str]:
        """
        Consume one line of the tagged stream.

        Args:
            line: Input line without its line terminator

        Returns:
            The output line, or None while a field is being buffered

        Raises:
            MalformedInputError: On an unmatched close or a nested open tag
        """
        self.line_number += 1
        stripped = line.strip()
        is_close = self._is_close(stripped)
        field_name = None if is_close else self._field_name(stripped)

        if self.state == ParserState.SCANNING:
            if is_close:
                raise MalformedInputError(
                    "closing tag without an open field", self.line_number
                )
            if field_name is not None:
                indent = line[: len(line) - len(line.lstrip())]
                self.pending = PendingField(
                    name=field_name, indent=indent, opened_at=self.line_number
                )
                self.state = ParserState.BUFFERING_FIELD
                return None
            return line

        if field_name is not None:
            raise MalformedInputError(
                f"field '{field_name}' opened while '{self.pending.name}' "
                f"(line {self.pending.opened_at}) is still open",
                self.line_number,
            )
        if is_close:
            self.pending.has_more_properties = stripped.endswith(",")
            return self._flush()

        self.pending.lines.append(line)
        return None

    def _flush(self) -> str:
        pending = self.pending
        key = pending.name.rsplit(".", 1)[-1]
        output = format_property(
            key, pending.raw_text, pending.has_more_properties, pending.indent
        )
        self.pending = None
        self.state = ParserState.SCANNING
        self.fields_flushed += 1
        return output

    def finish(self) -> None:
        """
        Signal end of input.

        Raises:
            MalformedInputError: If a field is still open
        """
        if self.state == ParserState.BUFFERING_FIELD:
            raise MalformedInputError(
                f"input ended inside field '{self.pending.name}' "
                f"opened at line {self.pending.opened_at}",
                self.line_number,
            )
        logger.debug(f"Escaped {self.fields_flushed} tagged fields")

    def transform(self, lines: Iterable[str]) -> Iterator[str]:
        """
        Run the parser over a whole stream.

        Args:
            lines: Input lines without terminators

        Yields:
            Output lines, tagged blocks collapsed into single properties
        """
        for line in lines:
            output = self.feed(line)
            if output is not None:
                yield output
        self.finish()

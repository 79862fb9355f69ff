"""JSON string escaping for raw commit fields."""

from typing import Dict

# Control characters with a short JSON escape.
NAMED_ESCAPES: Dict[int, str] = {
    0x08: "\\b",
    0x09: "\\t",
    0x0A: "\\n",
    0x0C: "\\f",
    0x0D: "\\r",
}


def _build_escape_table() -> Dict[int, str]:
    """
    Build the translation table for str.translate.

    Covers every control code point (0x00-0x1F and 0x7F) plus the quote and
    backslash. Control characters without a named escape become \\u00xx.
    """
    table: Dict[int, str] = {}
    for code in list(range(0x20)) + [0x7F]:
        table[code] = NAMED_ESCAPES.get(code, f"\\u{code:04x}")
    table[ord('"')] = '\\"'
    table[ord("\\")] = "\\\\"
    return table


ESCAPE_TABLE: Dict[int, str] = _build_escape_table()


def escape_json_string(raw: str) -> str:
    """
    Escape raw text for use inside a JSON string literal.

    Args:
        raw: Unescaped field value, possibly spanning several lines

    Returns:
        Escaped text without surrounding quotes; always a single line
    """
    return raw.translate(ESCAPE_TABLE)


def format_property(name: str, raw: str, has_more: bool, indent: str = "") -> str:
    """
    Render one JSON object property from a raw value.

    Args:
        name: Property key
        raw: Unescaped value
        has_more: Whether another property follows (adds a trailing comma)
        indent: Leading whitespace for the emitted line

    Returns:
        The line `"name": "value"` with an optional trailing comma
    """
    line = f'{indent}"{escape_json_string(name)}": "{escape_json_string(raw)}"'
    return line + "," if has_more else line

"""Data models for gitlogjson."""

import secrets
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import List, Dict, Any, Optional


class ParserState(str, Enum):
    """States of the tagged-block parser."""

    SCANNING = "SCANNING"
    BUFFERING_FIELD = "BUFFERING_FIELD"


class FieldKind(str, Enum):
    """How a commit field reaches the serializer."""

    LITERAL = "LITERAL"  # pre-quoted by the log template
    TAGGED = "TAGGED"  # raw, needs escaping


@dataclass(frozen=True)
class CommitField:
    """One property of an exported commit object."""

    path: str  # e.g. "author.name"
    placeholder: str  # git pretty-format placeholder, e.g. "%aN"
    kind: FieldKind

    @property
    def key(self) -> str:
        """JSON key emitted for this field (last path segment)."""
        return self.path.rsplit(".", 1)[-1]

    @property
    def parent(self) -> Optional[str]:
        """Enclosing object name, or None for top-level fields."""
        if "." not in self.path:
            return None
        return self.path.rsplit(".", 1)[0]


# Fixed commit object shape, in emission order.
COMMIT_FIELDS: List[CommitField] = [
    CommitField("commit", "%H", FieldKind.LITERAL),
    CommitField("abbreviated_commit", "%h", FieldKind.LITERAL),
    CommitField("tree", "%T", FieldKind.LITERAL),
    CommitField("abbreviated_tree", "%t", FieldKind.LITERAL),
    CommitField("parent", "%P", FieldKind.LITERAL),
    CommitField("abbreviated_parent", "%p", FieldKind.LITERAL),
    CommitField("refs", "%D", FieldKind.LITERAL),
    CommitField("encoding", "%e", FieldKind.LITERAL),
    CommitField("subject", "%s", FieldKind.TAGGED),
    CommitField("sanitized_subject_line", "%f", FieldKind.LITERAL),
    CommitField("body", "%b", FieldKind.TAGGED),
    CommitField("commit_notes", "%N", FieldKind.TAGGED),
    CommitField("author.name", "%aN", FieldKind.TAGGED),
    CommitField("author.email", "%aE", FieldKind.TAGGED),
    CommitField("author.date", "%aD", FieldKind.LITERAL),
    CommitField("committer.name", "%cN", FieldKind.TAGGED),
    CommitField("committer.email", "%cE", FieldKind.TAGGED),
    CommitField("committer.date", "%cD", FieldKind.LITERAL),
]

TAGGED_FIELD_PATHS = [f.path for f in COMMIT_FIELDS if f.kind == FieldKind.TAGGED]


@dataclass(frozen=True)
class TagToken:
    """
    Delimiter marking raw fields in the tagged stream.

    A fresh token is generated for every run and passed explicitly to both
    the log template and the parser.
    """

    value: str

    PREFIX = "@@GITLOGJSON"

    def __post_init__(self):
        if not self.value or any(c.isspace() for c in self.value):
            raise ValueError("Tag token must be a non-empty string without whitespace")
        if "," in self.value or "%" in self.value:
            # git would expand % inside the --pretty template
            raise ValueError("Tag token must not contain ',' or '%'")

    @classmethod
    def generate(cls) -> "TagToken":
        """Create a random per-run token."""
        return cls(f"{cls.PREFIX}-{secrets.token_hex(8)}@@")

    def open_line(self, field_name: str) -> str:
        return f"{self.value} {field_name}"

    def close_line(self, has_more_properties: bool) -> str:
        return self.value + ("," if has_more_properties else "")

    def __str__(self) -> str:
        return self.value


@dataclass
class PendingField:
    """The single tagged field currently being buffered."""

    name: str
    indent: str = ""
    opened_at: int = 0  # 1-based line number of the open tag
    lines: List[str] = field(default_factory=list)
    has_more_properties: bool = False

    @property
    def raw_text(self) -> str:
        """Buffered content, lines joined with newlines."""
        return "\n".join(self.lines)


@dataclass
class ExportResult:
    """Outcome of one export run."""

    repo_name: str
    commit_count: int
    output_path: Optional[Path] = None
    branch: Optional[str] = None
    duration: Optional[float] = None
    exported_at: datetime = field(default_factory=datetime.now)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "repo_name": self.repo_name,
            "commit_count": self.commit_count,
            "output_path": str(self.output_path) if self.output_path else None,
            "branch": self.branch,
            "duration": self.duration,
            "exported_at": self.exported_at.isoformat(),
        }

"""JSON export writer for gitlogjson."""

import logging
from pathlib import Path

from gitlogjson.reporters.base import BaseReporter


logger = logging.getLogger("gitlogjson")


class JSONReporter(BaseReporter):
    """Write serialized commit arrays to disk."""

    def generate_report(self, document: str, filename: str = "git_log") -> Path:
        """
        Write a JSON commit array.

        The document is written as produced by the serializer; callers
        only get here once serialization has succeeded.

        Args:
            document: JSON array text
            filename: Output filename (without extension)

        Returns:
            Path to generated JSON file
        """
        output_path = self.output_dir / f"{filename}{self.get_extension()}"

        with open(output_path, "w", encoding="utf-8", newline="\n") as f:
            f.write(document)

        logger.info(f"Generated JSON report: {output_path}")
        return output_path

    def get_extension(self) -> str:
        """Get file extension."""
        return ".json"

"""Base reporter class for gitlogjson."""

import re
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional, Union


def default_report_name(repo_name: str, branch: Optional[str] = None) -> str:
    """
    Build the output filename (without extension) for an export.

    Args:
        repo_name: Repository directory name
        branch: Exported branch, if not the current HEAD

    Returns:
        Filename such as ``git_log_myrepo_feature-x``
    """
    parts = ["git_log", repo_name]
    if branch:
        parts.append(branch)
    name = "_".join(parts)
    return re.sub(r"[^\w.\-]+", "-", name)


class BaseReporter(ABC):
    """Base class for all reporters."""

    def __init__(self, output_dir: Union[str, Path]):
        """
        Initialize reporter.

        Args:
            output_dir: Directory to write reports to
        """
        self.output_dir = Path(output_dir)
        self.output_dir.mkdir(parents=True, exist_ok=True)

    @abstractmethod
    def generate_report(self, document: str, filename: str) -> Path:
        """
        Write a report.

        Args:
            document: Serialized report content
            filename: Output filename (without extension)

        Returns:
            Path to generated report file
        """
        pass

    @abstractmethod
    def get_extension(self) -> str:
        """
        Get file extension for this reporter.

        Returns:
            File extension (e.g., '.json')
        """
        pass

"""Git log runner producing the tagged commit stream."""

import logging
import shutil
import subprocess
from pathlib import Path
from typing import List, Tuple, Union

from gitlogjson.exceptions import UpstreamFailureError
from gitlogjson.models import COMMIT_FIELDS, CommitField, FieldKind, TagToken
from gitlogjson.utils.config import Config


logger = logging.getLogger("gitlogjson")

EMPTY_REPO_MARKERS = (
    "does not have any commits yet",
    "bad default revision 'HEAD'",
)


def _field_line(field: CommitField, tag: TagToken, indent: str, has_more: bool) -> str:
    if field.kind == FieldKind.LITERAL:
        line = f'{indent}"{field.key}": "{field.placeholder}"'
        return line + "," if has_more else line
    return (
        f"{indent}{tag.open_line(field.path)}%n"
        f"{field.placeholder}%n"
        f"{indent}{tag.close_line(has_more)}"
    )


def build_log_format(tag: TagToken) -> str:
    """
    Build the git pretty-format template for one commit.

    Scalar fields that git renders safely are quoted directly; free-form
    fields are wrapped in tag lines for the serializer to escape. Every
    object ends with a comma, removed from the last one after parsing.

    Args:
        tag: Delimiter for this run

    Returns:
        Value for ``--pretty``
    """
    # Group nested fields (author.*, committer.*) under their parent key.
    items: List[Tuple[str, Union[CommitField, List[CommitField]]]] = []
    for field in COMMIT_FIELDS:
        if field.parent is None:
            items.append((field.key, field))
        elif items and items[-1][0] == field.parent and isinstance(items[-1][1], list):
            items[-1][1].append(field)
        else:
            items.append((field.parent, [field]))

    lines = ["{"]
    for index, (name, item) in enumerate(items):
        has_more = index < len(items) - 1
        if isinstance(item, CommitField):
            lines.append(_field_line(item, tag, "  ", has_more))
            continue
        lines.append(f'  "{name}": {{')
        for sub_index, field in enumerate(item):
            lines.append(_field_line(field, tag, "    ", sub_index < len(item) - 1))
        lines.append("  }," if has_more else "  }")
    lines.append("},")

    return "tformat:" + "%n".join(lines)


def build_log_command(config: Config, tag: TagToken) -> List[str]:
    """
    Build the git log command line.

    Args:
        config: Export configuration
        tag: Delimiter for this run

    Returns:
        Argument list for subprocess
    """
    cmd = ["git", "-c", "log.showSignature=false", "log"]

    if config.use_mailmap:
        cmd.append("--use-mailmap")

    if config.merge_view == "exclude":
        cmd.append("--no-merges")
    elif config.merge_view == "only":
        cmd.append("--merges")

    if config.since:
        cmd.append(f"--since={config.since}")
    if config.until:
        cmd.append(f"--until={config.until}")
    if config.limit:
        cmd.extend(["-n", str(config.limit)])

    cmd.append("--encoding=UTF-8")
    cmd.append(f"--pretty={build_log_format(tag)}")

    if config.branch:
        cmd.append(config.branch)

    if config.pathspec:
        cmd.append("--")
        cmd.extend(config.pathspec)

    return cmd


def repository_name(repo_path: Union[str, Path]) -> str:
    """Directory name of the repository, used for report naming."""
    return Path(repo_path).resolve().name or "repository"


class CommitStreamExtractor:
    """Run git log with the tagged template."""

    def __init__(self, config: Config, check_install: bool = True):
        """
        Initialize extractor.

        Args:
            config: Export configuration
            check_install: Verify that git is on PATH
        """
        self.config = config
        if check_install:
            self._check_installation()

    def _check_installation(self) -> None:
        """
        Check if git is installed.

        Raises:
            UpstreamFailureError: If git is not found
        """
        if not shutil.which("git"):
            raise UpstreamFailureError("git executable not found on PATH")
        logger.debug("git CLI found")

    def extract(self, tag: TagToken) -> str:
        """
        Produce the tagged stream for the configured repository.

        Args:
            tag: Delimiter for this run

        Returns:
            Raw git log output; empty for a repository without commits

        Raises:
            UpstreamFailureError: If git fails or times out
        """
        cmd = build_log_command(self.config, tag)
        repo_path = Path(self.config.repo_path)

        if not repo_path.is_dir():
            raise UpstreamFailureError(f"Repository path not found: {repo_path}")

        logger.debug(f"Running git log in {repo_path}", extra={"repo_path": str(repo_path)})

        try:
            result = subprocess.run(
                cmd,
                cwd=str(repo_path),
                capture_output=True,
                text=True,
                encoding="utf-8",
                errors="replace",
                timeout=self.config.git_timeout,
            )
        except subprocess.TimeoutExpired:
            logger.error(f"git log timed out after {self.config.git_timeout} seconds")
            raise UpstreamFailureError(
                f"git log timed out after {self.config.git_timeout} seconds"
            )
        except OSError as e:
            raise UpstreamFailureError(f"Failed to run git: {e}")

        if result.returncode != 0:
            stderr = (result.stderr or "").strip()
            if any(marker in stderr for marker in EMPTY_REPO_MARKERS):
                logger.info(f"No commits found in {repo_path}")
                return ""
            logger.error(f"git log failed: {stderr}")
            raise UpstreamFailureError(
                f"git log failed: {stderr or 'exit code ' + str(result.returncode)}",
                returncode=result.returncode,
                stderr=stderr,
            )

        return result.stdout


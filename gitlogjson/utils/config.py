"""Configuration management for gitlogjson."""

import os
import json
import yaml
from pathlib import Path
from dataclasses import dataclass, field, asdict
from typing import List, Optional, Dict, Any


MERGE_VIEWS = ("include", "exclude", "only")

# Values accepted by the _GIT_MERGE_VIEW variable of the original shell tool.
_MERGE_VIEW_ALIASES = {
    "enable": "include",
    "exclusive": "only",
    "disable": "exclude",
}


def _env_int(name: str) -> Optional[int]:
    value = os.getenv(name)
    if not value:
        return None
    try:
        return int(value)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got '{value}'")


def _env_merge_view() -> str:
    value = (os.getenv("_GIT_MERGE_VIEW") or "include").strip().lower()
    return _MERGE_VIEW_ALIASES.get(value, value)


@dataclass
class Config:
    """Configuration for a git log JSON export."""

    repo_path: str = "."
    output_dir: str = "./reports"
    output_name: Optional[str] = None  # derived from repo and branch if unset
    branch: Optional[str] = field(default_factory=lambda: os.getenv("_GIT_BRANCH") or None)
    since: Optional[str] = field(default_factory=lambda: os.getenv("_GIT_SINCE") or None)
    until: Optional[str] = field(default_factory=lambda: os.getenv("_GIT_UNTIL") or None)
    limit: Optional[int] = field(default_factory=lambda: _env_int("_GIT_LIMIT"))
    pathspec: List[str] = field(
        default_factory=lambda: (os.getenv("_GIT_PATHSPEC") or "").split()
    )
    merge_view: str = field(default_factory=_env_merge_view)
    use_mailmap: bool = True
    git_timeout: int = 300  # 5 minutes
    verbose: bool = False
    json_logs: bool = False  # Use structured JSON logging

    def validate(self) -> None:
        """Validate configuration."""
        if self.merge_view not in MERGE_VIEWS:
            raise ValueError(
                f"Invalid merge view '{self.merge_view}'. "
                f"Use one of: {', '.join(MERGE_VIEWS)}"
            )
        for name in ("limit", "git_timeout"):
            value = getattr(self, name)
            if value is not None and (isinstance(value, bool) or not isinstance(value, int)):
                raise ValueError(f"{name} must be an integer, got {value!r}")
        if self.limit is not None and self.limit <= 0:
            raise ValueError(f"Commit limit must be positive, got {self.limit}")
        if self.git_timeout <= 0:
            raise ValueError(f"git timeout must be positive, got {self.git_timeout}")

    @classmethod
    def from_file(cls, config_path: str) -> "Config":
        """
        Load configuration from YAML or JSON file.

        Args:
            config_path: Path to configuration file (.yml, .yaml, or .json)

        Returns:
            Config instance loaded from file

        Raises:
            FileNotFoundError: If config file doesn't exist
            ValueError: If file format is unsupported or invalid
        """
        path = Path(config_path)

        if not path.exists():
            raise FileNotFoundError(f"Configuration file not found: {config_path}")

        ext = path.suffix.lower()

        try:
            with open(path, 'r', encoding='utf-8') as f:
                if ext in ('.yml', '.yaml'):
                    data = yaml.safe_load(f)
                elif ext == '.json':
                    data = json.load(f)
                else:
                    raise ValueError(
                        f"Unsupported config file format: {ext}. "
                        "Use .yml, .yaml, or .json"
                    )

            if not isinstance(data, dict):
                raise ValueError("Configuration file must contain a dictionary/object")

            return cls.from_dict(data)

        except yaml.YAMLError as e:
            raise ValueError(f"Invalid YAML in config file: {e}")
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid JSON in config file: {e}")

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Config":
        """
        Create configuration from dictionary.

        Unknown keys are ignored. A pathspec given as a string is split
        on whitespace.

        Args:
            data: Configuration dictionary

        Returns:
            Config instance
        """
        valid_keys = {f.name for f in cls.__dataclass_fields__.values()}
        filtered_data = {k: v for k, v in data.items() if k in valid_keys}
        if isinstance(filtered_data.get("pathspec"), str):
            filtered_data["pathspec"] = filtered_data["pathspec"].split()
        return cls(**filtered_data)

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert configuration to dictionary.

        Returns:
            Dictionary representation of config
        """
        return asdict(self)

    def to_file(self, config_path: str) -> None:
        """
        Save configuration to YAML or JSON file.

        Args:
            config_path: Path to save configuration file (.yml, .yaml, or .json)

        Raises:
            ValueError: If file format is unsupported
        """
        path = Path(config_path)
        ext = path.suffix.lower()

        if ext not in ('.yml', '.yaml', '.json'):
            raise ValueError(
                f"Unsupported config file format: {ext}. "
                "Use .yml, .yaml, or .json"
            )

        data = self.to_dict()

        try:
            with open(path, 'w', encoding='utf-8') as f:
                if ext == '.json':
                    json.dump(data, f, indent=2)
                else:
                    yaml.safe_dump(data, f, default_flow_style=False, sort_keys=False)
        except OSError as e:
            raise ValueError(f"Failed to write config file: {e}")

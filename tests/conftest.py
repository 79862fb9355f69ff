"""Shared fixtures for gitlogjson tests."""

import re

import pytest

from gitlogjson.extractor import build_log_format
from gitlogjson.models import TagToken


GIT_ENV_VARS = [
    "_GIT_SINCE",
    "_GIT_UNTIL",
    "_GIT_LIMIT",
    "_GIT_PATHSPEC",
    "_GIT_BRANCH",
    "_GIT_MERGE_VIEW",
]

_PLACEHOLDER = re.compile(r"%(n|aN|aE|aD|cN|cE|cD|H|h|T|t|P|p|D|e|s|f|b|N)")


@pytest.fixture(autouse=True)
def clean_git_env(monkeypatch):
    """Keep _GIT_* variables from the developer's shell out of Config."""
    for name in GIT_ENV_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def tag():
    """Fixed delimiter for deterministic streams."""
    return TagToken("@@T@@")


@pytest.fixture
def make_commit():
    """Build placeholder values for one commit, overriding any field."""

    def _make(index=1, **overrides):
        sha = f"{index:040x}"
        values = {
            "H": sha,
            "h": sha[:7],
            "T": f"{index + 1000:040x}",
            "t": f"{index + 1000:040x}"[:7],
            "P": "",
            "p": "",
            "D": "",
            "e": "",
            "s": f"Commit number {index}",
            "f": f"Commit-number-{index}",
            "b": "",
            "N": "",
            "aN": "Ada Lovelace",
            "aE": "ada@example.com",
            "aD": "Mon, 1 Jan 2024 10:00:00 +0000",
            "cN": "Ada Lovelace",
            "cE": "ada@example.com",
            "cD": "Mon, 1 Jan 2024 10:00:00 +0000",
        }
        values.update(overrides)
        return values

    return _make


@pytest.fixture
def render_log():
    """
    Render commits through the export template the way git log does.

    Each commit is a dict of placeholder values; tformat terminates every
    entry with a newline.
    """

    def _render(tag, commits):
        template = build_log_format(tag)[len("tformat:"):]
        out = []
        for values in commits:
            lookup = dict(values, n="\n")
            out.append(_PLACEHOLDER.sub(lambda m: lookup[m.group(1)], template) + "\n")
        return "".join(out)

    return _render

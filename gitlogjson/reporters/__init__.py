"""Report writers for gitlogjson."""

from gitlogjson.reporters.base import BaseReporter, default_report_name
from gitlogjson.reporters.json_reporter import JSONReporter

__all__ = [
    "BaseReporter",
    "JSONReporter",
    "default_report_name",
]

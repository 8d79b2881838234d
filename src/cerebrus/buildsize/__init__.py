"""Build size of ``empty.html``: measuring it and reporting the difference."""

from cerebrus.buildsize.compare import EVENT_TYPE, BuildSizes, compare_build_size, is_safe_git_ref
from cerebrus.buildsize.report import humanize, parse_size_inputs, render_size_report

__all__ = [
    "EVENT_TYPE",
    "BuildSizes",
    "compare_build_size",
    "humanize",
    "is_safe_git_ref",
    "parse_size_inputs",
    "render_size_report",
]

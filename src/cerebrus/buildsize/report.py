"""Build size comparison report for ``empty.html``."""

from __future__ import annotations

import math
import re

from cerebrus.exceptions import ConfigError

SIGNIFICANT_CHANGE_KB = 20

_UNSAFE_REF_CHARS = re.compile(r"[^\w./\-:]")


def humanize(size: int | float) -> str:
    """Bytes as kilobytes with one decimal, e.g. ``1.5 KB``."""
    return f"{size / 1024:.1f} KB"


def parse_size_inputs(
    pr_size: object,
    base_size: object,
    base_ref: str,
) -> tuple[int, int, str]:
    """Validate the raw sizes and base ref handed to the size comment step.

    Raises:
        ConfigError: a size is not a number, ``pr_size`` is negative,
            ``base_size`` is not positive, or the sanitized ref is empty.
    """
    pr = _as_number(pr_size)
    if pr is None or pr < 0:
        raise ConfigError(f"Invalid pr_size input: {pr_size}")
    base = _as_number(base_size)
    if base is None or base <= 0:
        raise ConfigError(f"Invalid base_size input: {base_size}")
    ref = _UNSAFE_REF_CHARS.sub("", base_ref or "")
    if not ref:
        raise ConfigError(f"Invalid base_ref input: {base_ref!r}")
    return int(pr), int(base), ref


def _as_number(raw: object) -> float | None:
    if raw is None or isinstance(raw, bool):
        return None
    try:
        value = float(raw)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return None
    if not math.isfinite(value):
        return None
    return value


def render_size_report(
    pr_size: int,
    base_size: int,
    base_ref: str,
    threshold_kb: int = SIGNIFICANT_CHANGE_KB,
) -> str:
    """Markdown table of both sizes, the signed difference and, past the
    threshold, a badge and a short verdict."""
    diff = pr_size - base_size
    sign = "+" if diff >= 0 else "-"
    if diff > 0:
        direction = "⬆️ Increase"
    elif diff < 0:
        direction = "⬇️ Decrease"
    else:
        direction = "➖ No change"

    badge = ""
    alert = ""
    threshold = threshold_kb * 1024
    if diff > threshold:
        badge = "![🔴 Significant Increase](https://img.shields.io/badge/Size-Increase-red)"
        alert = "⚠️ **Warning:** Size increased significantly."
    elif diff < -threshold:
        badge = "![🟢 Significant Decrease](https://img.shields.io/badge/Size-Decrease-brightgreen)"
        alert = "✅ **Great job!** Size decreased significantly."

    lines = [
        "### 📊 Build Size Comparison: `empty.html`",
        "",
        "| Branch | Size |",
        "|--------|------|",
        f"| Base ({base_ref}) | {humanize(base_size)} |",
        f"| PR    | {humanize(pr_size)} |",
        "",
        f"**Diff:** **{direction}: `{sign}{humanize(abs(diff))}`**",
    ]
    if badge:
        lines += ["", badge, "", alert]
    return "\n".join(lines)

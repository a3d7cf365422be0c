"""CLI: 搜索结果表格"""

from __future__ import annotations

from collections.abc import Sequence

from methaur.core.models import PackageInfo

MAINTAINER_WIDTH = 15
DESCRIPTION_WIDTH = 50


def _truncate(text: str, width: int) -> str:
    return text if len(text) <= width else text[:width]


def render_results(results: Sequence[PackageInfo]) -> str:
    """渲染搜索结果表格，序号从 1 开始"""
    header = (
        f"{'ID':>4}  {'Name':30s} {'Version':20s} {'Votes':>6}  "
        f"{'Maintainer':{MAINTAINER_WIDTH}s}  Description"
    )
    lines = [header, "-" * len(header)]
    for i, pkg in enumerate(results, start=1):
        lines.append(
            f"{i:>4}  {pkg.name:30s} {pkg.version:20s} {pkg.votes:>6}  "
            f"{_truncate(pkg.maintainer, MAINTAINER_WIDTH):{MAINTAINER_WIDTH}s}  "
            f"{_truncate(pkg.description, DESCRIPTION_WIDTH)}"
        )
    return "\n".join(lines)

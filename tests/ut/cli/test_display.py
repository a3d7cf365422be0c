"""搜索结果表格测试"""

from __future__ import annotations

from methaur.cli.display import render_results
from methaur.core.models import PackageInfo


def test_columns_and_truncation() -> None:
    text = render_results([
        PackageInfo(name="yay", version="12.4.2-1", votes=2400,
                    maintainer="a-very-long-maintainer-name", description="x" * 80),
        PackageInfo(name="glib2", version="2.82-1", source="core", maintainer="Arch Linux"),
    ])
    lines = text.splitlines()
    for col in ("ID", "Name", "Version", "Votes", "Maintainer", "Description"):
        assert col in lines[0]
    assert lines[2].lstrip().startswith("1  yay")
    assert "a-very-long-mai " in lines[2]
    assert "a-very-long-main" not in lines[2]
    assert lines[2].endswith("x" * 50)
    assert lines[3].lstrip().startswith("2  glib2")


def test_empty() -> None:
    assert len(render_results([]).splitlines()) == 2

"""构建依赖台账测试"""

from __future__ import annotations

from pathlib import Path

import pytest

from methaur.core.exceptions import LedgerError
from methaur.core.ledger import BuildDepsLedger, find_stale_ledgers
from methaur.core.models import RunContext
from methaur.utils import yaml_io
from methaur.utils.yaml_io import load_yaml


class TestBuildDepsLedger:
    def test_no_file_until_append(self, tmp_path: Path) -> None:
        ctx = RunContext(scratch_dir=tmp_path, session_id="s1")
        ledger = BuildDepsLedger.for_context(ctx)
        assert ledger.entries == []
        assert not ctx.ledger_path.exists()

    def test_round_trip_in_order(self, tmp_path: Path) -> None:
        ctx = RunContext(scratch_dir=tmp_path, session_id="s1")
        ledger = BuildDepsLedger.for_context(ctx)
        for name in ("cmake", "ninja", "cmake"):
            ledger.append(name)
        assert BuildDepsLedger(ctx.ledger_path).read() == ["cmake", "ninja", "cmake"]
        data = load_yaml(ctx.ledger_path)
        assert data["session"] == "s1"

    def test_for_context_resumes(self, tmp_path: Path) -> None:
        ctx = RunContext(scratch_dir=tmp_path, session_id="s1")
        BuildDepsLedger.for_context(ctx).append("a")
        again = BuildDepsLedger.for_context(ctx)
        again.append("b")
        assert again.read() == ["a", "b"]

    def test_delete(self, tmp_path: Path) -> None:
        ctx = RunContext(scratch_dir=tmp_path, session_id="s1")
        ledger = BuildDepsLedger.for_context(ctx)
        ledger.append("a")
        ledger.delete()
        assert not ctx.ledger_path.exists()
        assert ledger.entries == []
        ledger.delete()

    @pytest.mark.parametrize("content", [
        "packages: cmake\n",
        "packages: {cmake: 1}\n",
        "packages: [[cmake]]\n",
    ])
    def test_packages_must_be_name_list(self, tmp_path: Path, content: str) -> None:
        path = tmp_path / "build-deps.s1.yml"
        path.write_text(content, encoding="utf-8")
        with pytest.raises(LedgerError, match="内容损坏"):
            BuildDepsLedger(path).read()

    def test_malformed_yaml(self, tmp_path: Path) -> None:
        path = tmp_path / "build-deps.s1.yml"
        path.write_text("packages: [unclosed\n", encoding="utf-8")
        with pytest.raises(LedgerError, match="无法读取"):
            BuildDepsLedger(path).read()

    def test_oversized(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr(yaml_io, "MAX_YAML_SIZE", 8)
        ctx = RunContext(scratch_dir=tmp_path, session_id="s1")
        ctx.ledger_path.write_text("packages: [cmake, ninja]\n", encoding="utf-8")
        with pytest.raises(LedgerError):
            BuildDepsLedger.for_context(ctx)


class TestStaleLedgers:
    def test_other_sessions_only(self, tmp_path: Path) -> None:
        (tmp_path / "build-deps.old1.yml").write_text("packages: [a]\n", encoding="utf-8")
        (tmp_path / "build-deps.cur.yml").write_text("packages: [b]\n", encoding="utf-8")
        (tmp_path / "foo").mkdir()
        assert find_stale_ledgers(tmp_path, "cur") == [tmp_path / "build-deps.old1.yml"]

    def test_missing_scratch(self, tmp_path: Path) -> None:
        assert find_stale_ledgers(tmp_path / "absent", "cur") == []

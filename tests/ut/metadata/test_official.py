"""pacman -Ss 输出解析测试"""

from __future__ import annotations

from methaur.metadata.official import OFFICIAL_MAINTAINER, OfficialRepoSearch, parse_search_output
from methaur.pacman import PacmanManager
from methaur.utils.shell import CommandResult

SS_OUTPUT = """\
extra/firefox 131.0-1 [installed]
    Fast, Private & Safe Web Browser
extra/firefox-developer-edition 132.0b5-1
    Developer Edition of the popular Firefox web browser
core/glib2 2.82.1-1 (gnome)
    Low level core library
"""


def test_parse_entries() -> None:
    pkgs = parse_search_output(SS_OUTPUT)
    assert [p.name for p in pkgs] == ["firefox", "firefox-developer-edition", "glib2"]
    assert pkgs[0].source == "extra"
    assert pkgs[0].version == "131.0-1"
    assert pkgs[0].description == "Fast, Private & Safe Web Browser"
    assert pkgs[2].source == "core"
    assert all(p.maintainer == OFFICIAL_MAINTAINER and not p.is_aur for p in pkgs)


def test_parse_skips_noise() -> None:
    text = "warning: database out of date\n\ncore/bash 5.2-1\n"
    pkgs = parse_search_output(text)
    assert [p.name for p in pkgs] == ["bash"]
    assert pkgs[0].description == ""


def test_search_nonzero_is_empty(fake_executor) -> None:
    fake_executor.on("pacman", "-Ss", result=CommandResult(returncode=1))
    assert OfficialRepoSearch(PacmanManager(fake_executor)).search("nothing") == []


def test_search_oserror_is_empty() -> None:
    class Broken:
        def execute(self, cmd, **kw):
            raise OSError("exec format error")

    assert OfficialRepoSearch(PacmanManager(Broken())).search("x") == []


def test_search_ok(fake_executor) -> None:
    fake_executor.on("pacman", "-Ss", result=CommandResult(returncode=0, stdout=SS_OUTPUT))
    res = OfficialRepoSearch(PacmanManager(fake_executor)).search("firefox")
    assert len(res) == 3
    assert fake_executor.kwargs[0]["capture"] is True

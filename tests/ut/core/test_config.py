"""Config 加载测试"""

from __future__ import annotations

import pytest

import methaur.core.config as cfgmod
from methaur.core.config import Config, get_config, init_config
from methaur.core.exceptions import ConfigError


@pytest.fixture(autouse=True)
def _reset_global(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setattr(cfgmod, "_current", None)
    monkeypatch.delenv("METHAUR_CONFIG", raising=False)


class TestConfig:
    def test_defaults(self) -> None:
        c = Config()
        assert c.scratch_dir == "/tmp/methaur"
        assert c.aur_rpc_url.endswith("?v=5")
        assert c.max_dependencies == 100
        assert "fakeroot" in c.essential_tools
        assert c.package_suffixes[0] == ".pkg.tar.zst"

    def test_missing_file_gives_defaults(self, tmp_path) -> None:
        assert Config.from_file(str(tmp_path / "none.yml")) == Config()

    def test_load_with_unknown_keys(self, tmp_path) -> None:
        p = tmp_path / "c.yml"
        p.write_text("scratch_dir: /var/tmp/m\nmax_results: 10\ncolor: always\n", encoding="utf-8")
        c = Config.from_file(str(p))
        assert c.scratch_dir == "/var/tmp/m"
        assert c.max_results == 10
        assert c.extra == {"color": "always"}

    @pytest.mark.parametrize("body", [
        "max_results: 0\n",
        "scratch_dir: ''\n",
        "package_suffixes: []\n",
    ])
    def test_invalid_values(self, tmp_path, body: str) -> None:
        p = tmp_path / "c.yml"
        p.write_text(body, encoding="utf-8")
        with pytest.raises(ConfigError):
            Config.from_file(str(p))

    def test_bad_yaml(self, tmp_path) -> None:
        p = tmp_path / "c.yml"
        p.write_text("a: [x\n", encoding="utf-8")
        with pytest.raises(ConfigError, match="格式错误"):
            Config.from_file(str(p))


class TestGlobalConfig:
    def test_get_config_default(self) -> None:
        assert get_config() is get_config()

    def test_init_from_env(self, tmp_path, monkeypatch) -> None:
        p = tmp_path / "c.yml"
        p.write_text("elevation_cmd: doas\n", encoding="utf-8")
        monkeypatch.setenv("METHAUR_CONFIG", str(p))
        cfg = init_config()
        assert cfg.elevation_cmd == "doas"
        assert get_config() is cfg

    def test_argument_beats_env(self, tmp_path, monkeypatch) -> None:
        env_p = tmp_path / "env.yml"
        env_p.write_text("pacman_cmd: from-env\n", encoding="utf-8")
        arg_p = tmp_path / "arg.yml"
        arg_p.write_text("pacman_cmd: from-arg\n", encoding="utf-8")
        monkeypatch.setenv("METHAUR_CONFIG", str(env_p))
        assert init_config(str(arg_p)).pacman_cmd == "from-arg"

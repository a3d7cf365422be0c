"""ServiceContainer 单元测试"""

from __future__ import annotations

from pathlib import Path

from methaur.core.config import Config
from methaur.core.decisions import AutoDecisions
from methaur.services.container import ServiceContainer


def _container(tmp_path: Path, fake_executor) -> ServiceContainer:
    return ServiceContainer(
        config=Config(scratch_dir=str(tmp_path), pacman_cmd="mypacman", max_results=7),
        executor=fake_executor,
    )


class TestServiceContainer:
    def test_lazy_loading(self, tmp_path, fake_executor) -> None:
        c = _container(tmp_path, fake_executor)
        assert len(c._instances) == 0
        _ = c.oracle
        assert set(c._instances) == {"pacman", "oracle"}

    def test_shared_instances(self, tmp_path, fake_executor) -> None:
        c = _container(tmp_path, fake_executor)
        assert c.pacman is c.pacman
        assert c.oracle.pacman is c.pacman
        assert c.environment.pacman is c.pacman

    def test_config_flows_into_components(self, tmp_path, fake_executor) -> None:
        c = _container(tmp_path, fake_executor)
        assert c.pacman.pacman_cmd == "mypacman"
        assert c.pacman.executor is fake_executor
        assert c.metadata.max_results == 7
        assert c.snapshots.user_agent.startswith("methaur/")

    def test_installer_recurses_into_orchestrator(self, tmp_path, fake_executor) -> None:
        c = _container(tmp_path, fake_executor)
        assert c.installer.builder is c.orchestrator
        assert c.orchestrator.c is c

    def test_default_decisions(self, tmp_path, fake_executor) -> None:
        assert isinstance(_container(tmp_path, fake_executor).decisions, AutoDecisions)

    def test_sync_service(self, tmp_path, fake_executor) -> None:
        c = _container(tmp_path, fake_executor)
        assert c.sync is c.sync
        assert c.sync.c is c

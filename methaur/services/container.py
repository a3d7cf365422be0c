"""服务容器: 统一依赖注入，消除组件之间的裸构造

所有组件通过容器获取，同一容器内的实例共享状态。
构建编排器与依赖安装器互相引用（递归构建），由容器负责接线。

依赖关系图（→ 表示依赖）:
  oracle       → pacman
  metadata     → pacman（官方搜索）
  environment  → pacman, oracle
  installer    → pacman, oracle, orchestrator
  orchestrator → 容器内全部构建组件
  sync         → 容器

用法:
    container = ServiceContainer(config=cfg, decisions=ClickDecisions())
    report = container.orchestrator.build("foo-git", BuildOptions(), ctx)
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from methaur.build.environment import EnvironmentPreparer
    from methaur.build.installer import DependencyInstaller
    from methaur.build.makepkg import MakepkgBuilder
    from methaur.build.orchestrator import BuildOrchestrator
    from methaur.build.recipe import RecipeDependencyExtractor
    from methaur.build.snapshot import SnapshotFetcher
    from methaur.core.config import Config
    from methaur.core.decisions import DecisionProvider
    from methaur.metadata import MetadataFetcher
    from methaur.pacman import InstalledStateOracle, PacmanManager
    from methaur.services.sync_service import SyncService
    from methaur.utils.shell import CommandExecutor

logger = logging.getLogger(__name__)


class ServiceContainer:
    """懒加载服务容器"""

    def __init__(
        self,
        config: Config | None = None,
        decisions: DecisionProvider | None = None,
        executor: CommandExecutor | None = None,
    ) -> None:
        self._instances: dict[str, object] = {}
        if config is None:
            from methaur.core.config import get_config
            config = get_config()
        if decisions is None:
            from methaur.core.decisions import AutoDecisions
            decisions = AutoDecisions()
        if executor is None:
            from methaur.utils.shell import get_executor
            executor = get_executor()
        self._config = config
        self._decisions = decisions
        self._executor = executor

    @property
    def config(self) -> Config:
        return self._config

    @property
    def decisions(self) -> DecisionProvider:
        return self._decisions

    @property
    def executor(self) -> CommandExecutor:
        return self._executor

    # ---- 包管理器 ----

    @property
    def pacman(self) -> PacmanManager:
        if "pacman" not in self._instances:
            from methaur.pacman import PacmanManager
            self._instances["pacman"] = PacmanManager(
                executor=self._executor,
                pacman_cmd=self._config.pacman_cmd,
                elevation_cmd=self._config.elevation_cmd,
            )
        return self._instances["pacman"]  # type: ignore[return-value]

    @property
    def oracle(self) -> InstalledStateOracle:
        if "oracle" not in self._instances:
            from methaur.pacman import InstalledStateOracle
            self._instances["oracle"] = InstalledStateOracle(self.pacman)
        return self._instances["oracle"]  # type: ignore[return-value]

    # ---- 元数据 ----

    @property
    def metadata(self) -> MetadataFetcher:
        if "metadata" not in self._instances:
            from methaur.metadata import AurClient, MetadataFetcher, OfficialRepoSearch
            self._instances["metadata"] = MetadataFetcher(
                official=OfficialRepoSearch(self.pacman),
                aur=AurClient(self._config.aur_rpc_url, timeout=self._config.http_timeout),
                max_results=self._config.max_results,
            )
        return self._instances["metadata"]  # type: ignore[return-value]

    # ---- 构建组件 ----

    @property
    def snapshots(self) -> SnapshotFetcher:
        if "snapshots" not in self._instances:
            from methaur.build.snapshot import SnapshotFetcher
            from methaur.metadata.aur import USER_AGENT
            self._instances["snapshots"] = SnapshotFetcher(
                self._config.aur_snapshot_url,
                user_agent=USER_AGENT,
                timeout=self._config.http_timeout,
            )
        return self._instances["snapshots"]  # type: ignore[return-value]

    @property
    def extractor(self) -> RecipeDependencyExtractor:
        if "extractor" not in self._instances:
            from methaur.build.recipe import RecipeDependencyExtractor
            self._instances["extractor"] = RecipeDependencyExtractor(
                self._executor,
                max_dependencies=self._config.max_dependencies,
                timeout=self._config.recipe_eval_timeout,
            )
        return self._instances["extractor"]  # type: ignore[return-value]

    @property
    def builder(self) -> MakepkgBuilder:
        if "builder" not in self._instances:
            from methaur.build.makepkg import MakepkgBuilder
            self._instances["builder"] = MakepkgBuilder(
                self._executor,
                makepkg_cmd=self._config.makepkg_cmd,
                autoreconf_cmd=self._config.autoreconf_cmd,
                package_suffixes=self._config.package_suffixes,
            )
        return self._instances["builder"]  # type: ignore[return-value]

    @property
    def environment(self) -> EnvironmentPreparer:
        if "environment" not in self._instances:
            from methaur.build.environment import EnvironmentPreparer
            self._instances["environment"] = EnvironmentPreparer(
                self.pacman, self.oracle,
                base_group=self._config.base_group,
                essential_tools=self._config.essential_tools,
            )
        return self._instances["environment"]  # type: ignore[return-value]

    @property
    def installer(self) -> DependencyInstaller:
        if "installer" not in self._instances:
            from methaur.build.installer import DependencyInstaller
            self._instances["installer"] = DependencyInstaller(
                self.pacman, self.oracle, builder=self.orchestrator,
            )
        return self._instances["installer"]  # type: ignore[return-value]

    @property
    def orchestrator(self) -> BuildOrchestrator:
        if "orchestrator" not in self._instances:
            from methaur.build.orchestrator import BuildOrchestrator
            self._instances["orchestrator"] = BuildOrchestrator(self)
        return self._instances["orchestrator"]  # type: ignore[return-value]

    # ---- 服务层 ----

    @property
    def sync(self) -> SyncService:
        if "sync" not in self._instances:
            from methaur.services.sync_service import SyncService
            self._instances["sync"] = SyncService(self)
        return self._instances["sync"]  # type: ignore[return-value]

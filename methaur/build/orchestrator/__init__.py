"""构建编排器模块

- models.py: 构建报告
- steps.py: 10 个步骤实现
- orchestrator.py: 状态机协调器
"""

from methaur.build.orchestrator.models import BuildReport
from methaur.build.orchestrator.orchestrator import BuildOrchestrator
from methaur.build.orchestrator.steps import BuildSteps

__all__ = ["BuildReport", "BuildOrchestrator", "BuildSteps"]

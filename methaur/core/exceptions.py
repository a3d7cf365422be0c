"""统一异常体系

所有业务异常继承 MethaurError。内部步骤只负责抛出，
由 CLI 顶层统一输出诊断信息（包名 + 阶段 + 原因）并决定退出码。
"""

from __future__ import annotations


class MethaurError(Exception):
    """基础异常

    package / stage 由编排器在异常穿过对应步骤时补全，
    用于输出 "哪个包在哪个阶段失败" 的诊断。
    """

    code: str = "UNKNOWN"

    def __init__(self, message: str, *, package: str = "", stage: str = "") -> None:
        super().__init__(message)
        self.package = package
        self.stage = stage

    def describe(self) -> str:
        where = " @ ".join(p for p in (self.package, self.stage) if p)
        prefix = f"{where}: " if where else ""
        return f"[{self.code}] {prefix}{self}"


class ConfigError(MethaurError):
    """配置文件缺失或内容无效"""

    code = "CONFIG_ERROR"


class ValidationError(MethaurError):
    """输入数据校验失败（非法参数、非法 URL 等）"""

    code = "VALIDATION_ERROR"

    def __init__(self, message: str, details: list[str] | None = None) -> None:
        super().__init__(message)
        self.details = details or []


class ExecutionError(MethaurError):
    """外部命令执行失败"""

    code = "EXECUTION_ERROR"


class PrivilegeError(MethaurError):
    """缺少提权手段（未找到 sudo 等），在执行特权操作之前检测"""

    code = "PRIVILEGE_ERROR"


class RecipeError(MethaurError):
    """构建脚本缺失、解压目录缺失或脚本求值失败"""

    code = "RECIPE_ERROR"


class FetchError(MethaurError):
    """源码快照下载或解压失败"""

    code = "FETCH_ERROR"


class DependencyError(MethaurError):
    """依赖安装失败（fail-fast，整轮中止）"""

    code = "DEPENDENCY_ERROR"


class CyclicDependencyError(DependencyError):
    """依赖解析过程中重入了正在解析的包"""

    code = "CYCLIC_DEPENDENCY"

    def __init__(self, name: str, chain: list[str]) -> None:
        path = " -> ".join([*chain, name])
        super().__init__(f"检测到循环依赖: {path}", package=name)
        self.chain = [*chain, name]


class BuildError(MethaurError):
    """构建在重试阶梯全部失败后仍未成功"""

    code = "BUILD_ERROR"


class InstallError(MethaurError):
    """安装产物或官方仓库包失败"""

    code = "INSTALL_ERROR"


class RollbackError(MethaurError):
    """构建依赖回滚（卸载）失败"""

    code = "ROLLBACK_ERROR"


class LedgerError(MethaurError):
    """构建依赖台账无法读取或内容损坏"""

    code = "LEDGER_ERROR"

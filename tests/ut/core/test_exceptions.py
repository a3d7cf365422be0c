"""异常体系测试"""

from __future__ import annotations

import pytest

from methaur.core.exceptions import (
    BuildError,
    ConfigError,
    CyclicDependencyError,
    DependencyError,
    ExecutionError,
    FetchError,
    InstallError,
    LedgerError,
    MethaurError,
    PrivilegeError,
    RecipeError,
    RollbackError,
    ValidationError,
)


@pytest.mark.parametrize("cls", [
    ConfigError, ExecutionError, PrivilegeError, RecipeError,
    FetchError, DependencyError, BuildError, InstallError, RollbackError, LedgerError,
])
def test_hierarchy(cls) -> None:
    e = cls("x")
    assert isinstance(e, MethaurError)
    assert e.code != MethaurError.code


def test_describe_with_location() -> None:
    e = BuildError("ladder exhausted", package="foo-git", stage="build")
    assert e.describe() == "[BUILD_ERROR] foo-git @ build: ladder exhausted"


def test_describe_without_location() -> None:
    assert ConfigError("bad").describe() == "[CONFIG_ERROR] bad"


def test_validation_details() -> None:
    e = ValidationError("invalid", details=["a", "b"])
    assert e.details == ["a", "b"]
    assert ValidationError("x").details == []


def test_cycle_message() -> None:
    e = CyclicDependencyError("a", ["a", "b"])
    assert isinstance(e, DependencyError)
    assert str(e) == "检测到循环依赖: a -> b -> a"
    assert e.chain == ["a", "b", "a"]
    assert e.package == "a"

"""索引生命周期管理异常定义模块."""

from __future__ import annotations

from typing import TYPE_CHECKING

from ..exceptions import IndexflowError

if TYPE_CHECKING:
    from .models import RecreateResult


class LifecycleConfigError(IndexflowError):
    """生命周期配置异常.

    配置对象构建时校验失败抛出，例如正则表达式无法编译、版本后缀格式错误。
    """

    pass


class IndexLifecycleError(IndexflowError):
    """索引生命周期操作异常.

    所有集群操作失败（存在性检查、映射读取、创建、删除、获取设置/别名、
    reindex、别名切换）以及索引名称解析失败都统一使用该异常。

    Attributes:
        name: 受影响的别名或索引名称
        message: 可读的失败原因
    """

    def __init__(self, name: str, message: str):
        self.name = name
        self.message = message
        super().__init__(f"[{name}] {message}")


class RecreateError(IndexLifecycleError):
    """索引重建（升级）异常.

    携带部分完成的重建结果，调用方可据此区分已升级与未升级的语言环境变体。

    Attributes:
        result: 重建结果，包含每个 lineage 的状态
    """

    def __init__(self, name: str, message: str, result: RecreateResult):
        super().__init__(name, message)
        self.result = result

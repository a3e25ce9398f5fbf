"""索引生命周期管理数据模型定义模块."""

import re
from dataclasses import dataclass, field, replace
from enum import Enum

from ..typing import LocaleMappingDict, SettingsDict
from .exceptions import LifecycleConfigError
from .resources import MappingResource

# 默认索引版本后缀
DEFAULT_INDEX_NAME_SUFFIX = "_v1"

# 版本号分隔标记
VERSION_TOKEN = "_v"

# 未匹配任何语言环境时使用的分析器
STANDARD_ANALYZER = "standard"

# 默认分析器的设置键
DEFAULT_ANALYZER_KEY = "analysis.analyzer.default.type"

# 默认 authoring 别名匹配模式
DEFAULT_AUTHORING_NAME_PATTERN = r".*-authoring"

_SUFFIX_PATTERN = re.compile(r"^_v[1-9][0-9]*$")


class MappingType(Enum):
    """映射模板类型枚举.

    Attributes:
        AUTHORING: 编辑环境索引使用的映射
        PREVIEW: 预览环境索引使用的映射
    """

    AUTHORING = "authoring"
    PREVIEW = "preview"


@dataclass
class LifecycleConfig:
    """索引生命周期配置.

    进程生命周期内保持不变，所有正则表达式在构建时编译，格式错误直接抛出异常。

    Attributes:
        authoring_mapping: authoring 索引的映射模板
        preview_mapping: preview 索引的映射模板
        authoring_name_pattern: 判断别名是否为 authoring 的正则（完整匹配）
        locale_mapping: 语言环境正则到分析器的有序映射，第一个匹配的生效
        default_settings: 创建索引时使用的默认设置
        index_name_suffix: 新建索引的版本后缀，默认 "_v1"

    Raises:
        LifecycleConfigError: 正则无法编译或版本后缀格式错误时抛出

    Examples:
        >>> config = LifecycleConfig(
        ...     authoring_mapping=FileMappingResource("authoring-mapping.json"),
        ...     preview_mapping=FileMappingResource("preview-mapping.json"),
        ...     locale_mapping={"en.*": "english", "es.*": "spanish"},
        ...     default_settings={"index.mapping.total_fields.limit": "3000"},
        ... )
    """

    authoring_mapping: MappingResource
    preview_mapping: MappingResource
    authoring_name_pattern: str = DEFAULT_AUTHORING_NAME_PATTERN
    locale_mapping: LocaleMappingDict = field(default_factory=dict)
    default_settings: SettingsDict = field(default_factory=dict)
    index_name_suffix: str = DEFAULT_INDEX_NAME_SUFFIX
    authoring_regex: re.Pattern = field(init=False, repr=False)
    locale_patterns: list[tuple[re.Pattern, str]] = field(init=False, repr=False)

    def __post_init__(self) -> None:
        """编译正则并校验版本后缀."""
        self.authoring_regex = _compile(
            self.authoring_name_pattern, "authoring_name_pattern"
        )
        self.locale_patterns = [
            (_compile(pattern, "locale_mapping"), analyzer)
            for pattern, analyzer in self.locale_mapping.items()
        ]
        if not _SUFFIX_PATTERN.match(self.index_name_suffix):
            raise LifecycleConfigError(
                f"index_name_suffix 必须形如 '_v1'，当前值: '{self.index_name_suffix}'"
            )


def _compile(pattern: str, option: str) -> re.Pattern:
    try:
        return re.compile(pattern)
    except re.error as e:
        raise LifecycleConfigError(
            f"{option} 中的正则 '{pattern}' 无效: {str(e)}"
        ) from e


@dataclass(frozen=True)
class IndexName:
    """物理索引名称.

    格式为 ``{alias}[-{locale}]_v{version}``，一旦创建不可变。

    Attributes:
        alias: 逻辑别名（不含语言环境）
        version: 版本号，正整数
        locale: 索引名称中的语言环境标记，如 "en_us"
    """

    alias: str
    version: int
    locale: str | None = None

    @property
    def qualified_alias(self) -> str:
        """带语言环境的别名."""
        if self.locale:
            return f"{self.alias}-{self.locale}"
        return self.alias

    @property
    def suffix(self) -> str:
        """版本后缀，如 "_v2"."""
        return f"{VERSION_TOKEN}{self.version}"

    def next_version(self) -> "IndexName":
        """返回同一 lineage 的下一个版本."""
        return replace(self, version=self.version + 1)

    def __str__(self) -> str:
        return f"{self.qualified_alias}{self.suffix}"


class LineageStatus(Enum):
    """单个 lineage 的重建状态."""

    SUCCEEDED = "succeeded"
    FAILED = "failed"
    SKIPPED = "skipped"


class RecreateStep(Enum):
    """重建协议的步骤，按执行顺序排列."""

    PARSE = "parse"
    SETTINGS = "settings"
    CREATE = "create"
    REINDEX = "reindex"
    SWAP = "swap"
    DELETE = "delete"


class UpgradeOutcome(Enum):
    """别名整体的升级结果.

    Attributes:
        UPGRADED: 全部 lineage 升级成功
        PARTIAL: 部分 lineage 升级成功
        NOT_UPGRADED: 没有任何 lineage 升级成功
        EMPTY: 别名下没有任何已绑定的索引
    """

    UPGRADED = "upgraded"
    PARTIAL = "partial"
    NOT_UPGRADED = "not_upgraded"
    EMPTY = "empty"


@dataclass
class LineageResult:
    """单个 lineage 的重建结果.

    Attributes:
        index_name: 重建前绑定的物理索引名称
        alias: 切换的别名（带语言环境）
        locale: 语言环境标记
        status: 重建状态
        step: 最后执行（或失败）的步骤
        new_index_name: 新版本索引名称
        docs_count: reindex 复制的文档数
        error: 失败原因
    """

    index_name: str
    alias: str | None = None
    locale: str | None = None
    status: LineageStatus = LineageStatus.SKIPPED
    step: RecreateStep | None = None
    new_index_name: str | None = None
    docs_count: int = 0
    error: str | None = None

    @property
    def alias_swapped(self) -> bool:
        """别名是否已经指向新版本.

        删除旧版本失败时别名已经完成切换，此时旧索引需要人工清理。
        """
        if self.status == LineageStatus.SUCCEEDED:
            return True
        return self.status == LineageStatus.FAILED and self.step == RecreateStep.DELETE


@dataclass
class RecreateResult:
    """别名重建结果.

    Attributes:
        alias: 被重建的别名
        lineages: 每个 lineage 的结果，按处理顺序排列
    """

    alias: str
    lineages: list[LineageResult] = field(default_factory=list)

    @property
    def succeeded(self) -> list[LineageResult]:
        return [r for r in self.lineages if r.status == LineageStatus.SUCCEEDED]

    @property
    def failed(self) -> list[LineageResult]:
        return [r for r in self.lineages if r.status == LineageStatus.FAILED]

    @property
    def skipped(self) -> list[LineageResult]:
        return [r for r in self.lineages if r.status == LineageStatus.SKIPPED]

    @property
    def outcome(self) -> UpgradeOutcome:
        """汇总升级结果."""
        if not self.lineages:
            return UpgradeOutcome.EMPTY
        succeeded = len(self.succeeded)
        if succeeded == len(self.lineages):
            return UpgradeOutcome.UPGRADED
        if succeeded == 0:
            return UpgradeOutcome.NOT_UPGRADED
        return UpgradeOutcome.PARTIAL

    def is_success(self) -> bool:
        """判断是否全部成功（没有 lineage 时也视为成功）."""
        return not self.failed and not self.skipped

    def get_error_summary(self) -> str:
        """获取错误摘要."""
        if not self.failed:
            return "No errors"
        summary = f"Total failed lineages: {len(self.failed)}\n"
        for i, result in enumerate(self.failed, 1):
            step = result.step.value if result.step else "unknown"
            summary += f"{i}. [{step}] Index: {result.index_name}, Reason: {result.error}\n"
        if self.skipped:
            skipped = ", ".join(r.index_name for r in self.skipped)
            summary += f"Skipped: {skipped}\n"
        return summary

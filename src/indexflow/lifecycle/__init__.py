"""索引生命周期管理模块.

通过稳定的逻辑别名管理物理索引版本，包括：
- 别名与版本命名、语言环境分区
- 映射模板与分析器选择、设置继承
- 零停机重建（创建新版本 -> reindex -> 原子切换别名 -> 删除旧版本）
- 集群就绪等待

示例用法:
    >>> from indexflow.lifecycle import (
    ...     FileMappingResource,
    ...     IndexLifecycleManager,
    ...     LifecycleConfig,
    ... )
    >>> config = LifecycleConfig(
    ...     authoring_mapping=FileMappingResource("authoring-mapping.json"),
    ...     preview_mapping=FileMappingResource("preview-mapping.json"),
    ...     locale_mapping={"en.*": "english"},
    ... )
    >>> manager = IndexLifecycleManager(es_client, config)
    >>> manager.create_index("site", locale="en_US")
    >>> result = manager.recreate_index("site")
"""

from .exceptions import IndexLifecycleError, LifecycleConfigError, RecreateError
from .models import (
    DEFAULT_ANALYZER_KEY,
    DEFAULT_INDEX_NAME_SUFFIX,
    STANDARD_ANALYZER,
    IndexName,
    LifecycleConfig,
    LineageResult,
    LineageStatus,
    MappingType,
    RecreateResult,
    RecreateStep,
    UpgradeOutcome,
)
from .naming import NamingResolver, locale_tag, normalize_locale, parse_index_name
from .probe import ClusterProbe
from .resources import BytesMappingResource, FileMappingResource, MappingResource
from .selector import SettingsSelector, select_mapping_type
from .tool import IndexLifecycleManager

__all__ = [
    # 核心类
    "IndexLifecycleManager",
    "NamingResolver",
    "SettingsSelector",
    "ClusterProbe",
    # 配置与数据模型
    "LifecycleConfig",
    "IndexName",
    "MappingType",
    "LineageResult",
    "LineageStatus",
    "RecreateResult",
    "RecreateStep",
    "UpgradeOutcome",
    # 映射模板资源
    "MappingResource",
    "FileMappingResource",
    "BytesMappingResource",
    # 工具函数
    "normalize_locale",
    "locale_tag",
    "parse_index_name",
    "select_mapping_type",
    # 常量
    "DEFAULT_ANALYZER_KEY",
    "DEFAULT_INDEX_NAME_SUFFIX",
    "STANDARD_ANALYZER",
    # 异常类
    "IndexLifecycleError",
    "LifecycleConfigError",
    "RecreateError",
]

"""indexflow - Elasticsearch 索引生命周期管理工具包.

通过稳定的逻辑别名管理物理索引，使客户端无需引用具体索引即可完成升级与重新映射。

主要功能:
    - IndexLifecycleManager: 创建、零停机重建与删除别名下的索引
    - ClientFactory: 创建并托管 Elasticsearch 客户端

使用示例:
    from indexflow import ClusterConfig, IndexLifecycleManager, LifecycleConfig

    with IndexLifecycleManager.from_cluster(
        ClusterConfig(hosts=["http://localhost:9200"]), config
    ) as manager:
        manager.wait_until_ready()
        manager.create_index("site", locale="en_US")
"""

__version__ = "0.1.0"

# 导出客户端工厂
from indexflow.connection import (
    ClientFactory,
    ClientFactoryError,
    ClusterConfig,
    ConnectionConfig,
    ConnectionConfigError,
)

# 导出异常
from indexflow.exceptions import IndexflowError

# 导出生命周期管理
from indexflow.lifecycle import (
    BytesMappingResource,
    FileMappingResource,
    IndexLifecycleError,
    IndexLifecycleManager,
    IndexName,
    LifecycleConfig,
    LifecycleConfigError,
    MappingResource,
    RecreateError,
    RecreateResult,
    UpgradeOutcome,
)

__all__ = [
    # 版本
    "__version__",
    # 生命周期管理
    "IndexLifecycleManager",
    "LifecycleConfig",
    "IndexName",
    "RecreateResult",
    "UpgradeOutcome",
    # 映射模板资源
    "MappingResource",
    "FileMappingResource",
    "BytesMappingResource",
    # 客户端工厂
    "ClientFactory",
    "ClusterConfig",
    "ConnectionConfig",
    # 异常
    "IndexflowError",
    "IndexLifecycleError",
    "LifecycleConfigError",
    "RecreateError",
    "ClientFactoryError",
    "ConnectionConfigError",
]

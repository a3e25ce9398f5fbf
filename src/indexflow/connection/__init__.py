"""客户端工厂模块 - 创建并托管索引生命周期管理器使用的 Elasticsearch 客户端.

主要组件:
    - ClientFactory: 客户端工厂，负责惰性创建、缓存与关闭客户端
    - ClusterConfig: 集群连接与认证配置
    - ConnectionConfig: 重试与超时配置

使用示例:
    from indexflow.connection import ClientFactory, ClusterConfig

    with ClientFactory(ClusterConfig(hosts=["http://localhost:9200"])) as factory:
        client = factory.get_client()
"""

from .exceptions import ClientFactoryError, ConnectionConfigError
from .models import ClusterConfig, ConnectionConfig
from .tool import ClientFactory

__all__ = [
    # 工厂
    "ClientFactory",
    # 模型
    "ClusterConfig",
    "ConnectionConfig",
    # 异常
    "ClientFactoryError",
    "ConnectionConfigError",
]

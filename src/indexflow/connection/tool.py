"""客户端工厂工具模块.

提供 ClientFactory 类，按集群配置创建 Elasticsearch 客户端，
并负责客户端的缓存与关闭。

使用示例:
    from indexflow.connection import ClientFactory, ClusterConfig

    with ClientFactory(ClusterConfig(hosts=["http://localhost:9200"])) as factory:
        client = factory.get_client()
"""

from __future__ import annotations

import logging

from elasticsearch import Elasticsearch

from .models import ClusterConfig, ConnectionConfig

logger = logging.getLogger(__name__)


class ClientFactory:
    """Elasticsearch 客户端工厂.

    惰性创建客户端并缓存，close() 后再次调用 get_client() 会创建新的客户端。

    Attributes:
        _cluster: 集群配置
        _connection_config: 连接配置
        _client: 已缓存的客户端
    """

    def __init__(
        self,
        cluster: ClusterConfig,
        connection_config: ConnectionConfig | None = None,
    ) -> None:
        self._cluster = cluster
        self._connection_config = connection_config or ConnectionConfig()
        self._client: Elasticsearch | None = None

    def _create_client(self) -> Elasticsearch:
        """根据集群配置与连接配置创建客户端实例.

        Returns:
            Elasticsearch 客户端实例
        """
        cluster = self._cluster
        kwargs: dict = {
            "hosts": cluster.hosts,
            "max_retries": self._connection_config.max_retries,
            "retry_on_timeout": self._connection_config.retry_on_timeout,
            "request_timeout": self._connection_config.request_timeout,
            "http_compress": self._connection_config.http_compress,
            "verify_certs": cluster.verify_certs,
        }

        if cluster.username and cluster.password:
            kwargs["basic_auth"] = (cluster.username, cluster.password)
        if cluster.api_key:
            kwargs["api_key"] = cluster.api_key
        if cluster.bearer_token:
            kwargs["bearer_auth"] = cluster.bearer_token
        if cluster.ca_certs:
            kwargs["ca_certs"] = cluster.ca_certs

        logger.debug(f"创建客户端: hosts={cluster.hosts}")
        return Elasticsearch(**kwargs)

    def get_client(self) -> Elasticsearch:
        """获取客户端，首次调用时创建.

        Returns:
            Elasticsearch 客户端实例
        """
        if self._client is None:
            self._client = self._create_client()
        return self._client

    def close(self) -> None:
        """关闭已创建的客户端并清空缓存."""
        if self._client is None:
            return
        try:
            self._client.close()
        except Exception as e:
            logger.warning(f"关闭客户端失败: {str(e)}")
        self._client = None

    def __enter__(self) -> ClientFactory:
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        """上下文管理器退出，自动关闭客户端."""
        self.close()

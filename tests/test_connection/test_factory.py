"""ClientFactory 单元测试.

覆盖客户端创建（认证方式、SSL、连接参数）与生命周期管理（缓存、close、上下文管理器）。
"""

from unittest.mock import MagicMock, patch

import pytest

from indexflow.connection.models import ClusterConfig, ConnectionConfig
from indexflow.connection.tool import ClientFactory


@pytest.fixture
def cluster() -> ClusterConfig:
    """创建集群配置."""
    return ClusterConfig(hosts=["http://search:9200"])


ES_PATCH_PATH = "indexflow.connection.tool.Elasticsearch"


class TestClientCreation:
    """客户端创建测试."""

    @patch(ES_PATCH_PATH)
    def test_get_client_passes_connection_config(self, mock_es, cluster) -> None:
        """测试连接配置传递给客户端."""
        factory = ClientFactory(
            cluster, ConnectionConfig(max_retries=5, request_timeout=120)
        )
        factory.get_client()

        call_kwargs = mock_es.call_args[1]
        assert call_kwargs["hosts"] == ["http://search:9200"]
        assert call_kwargs["max_retries"] == 5
        assert call_kwargs["request_timeout"] == 120
        assert call_kwargs["retry_on_timeout"] is True
        assert call_kwargs["http_compress"] is True

    @patch(ES_PATCH_PATH)
    def test_get_client_is_cached(self, mock_es, cluster) -> None:
        """测试客户端只创建一次."""
        factory = ClientFactory(cluster)
        assert factory.get_client() is factory.get_client()
        mock_es.assert_called_once()

    @patch(ES_PATCH_PATH)
    def test_basic_auth(self, mock_es) -> None:
        """测试 Basic Auth 认证."""
        cluster = ClusterConfig(
            hosts=["http://localhost:9200"], username="elastic", password="secret"
        )
        ClientFactory(cluster).get_client()
        assert mock_es.call_args[1]["basic_auth"] == ("elastic", "secret")

    @patch(ES_PATCH_PATH)
    def test_api_key_and_bearer(self, mock_es) -> None:
        """测试 API Key 与 Bearer Token 认证."""
        cluster = ClusterConfig(
            hosts=["http://localhost:9200"], api_key="key", bearer_token="token"
        )
        ClientFactory(cluster).get_client()
        call_kwargs = mock_es.call_args[1]
        assert call_kwargs["api_key"] == "key"
        assert call_kwargs["bearer_auth"] == "token"

    @patch(ES_PATCH_PATH)
    def test_no_auth(self, mock_es, cluster) -> None:
        """测试无认证的客户端."""
        ClientFactory(cluster).get_client()
        call_kwargs = mock_es.call_args[1]
        assert "basic_auth" not in call_kwargs
        assert "api_key" not in call_kwargs
        assert "bearer_auth" not in call_kwargs
        assert "ca_certs" not in call_kwargs

    @patch(ES_PATCH_PATH)
    def test_ssl_config(self, mock_es) -> None:
        """测试 SSL 配置传递."""
        cluster = ClusterConfig(
            hosts=["https://localhost:9200"],
            ca_certs="/path/to/ca.crt",
            verify_certs=False,
        )
        ClientFactory(cluster).get_client()
        call_kwargs = mock_es.call_args[1]
        assert call_kwargs["ca_certs"] == "/path/to/ca.crt"
        assert call_kwargs["verify_certs"] is False


class TestLifecycle:
    """生命周期管理测试."""

    @patch(ES_PATCH_PATH)
    def test_close_closes_client(self, mock_es, cluster) -> None:
        """测试 close 关闭客户端."""
        mock_client = MagicMock()
        mock_es.return_value = mock_client
        factory = ClientFactory(cluster)
        factory.get_client()

        factory.close()

        mock_client.close.assert_called_once()

    @patch(ES_PATCH_PATH)
    def test_close_without_client(self, mock_es, cluster) -> None:
        """测试未创建客户端时 close 不做任何事."""
        ClientFactory(cluster).close()
        mock_es.assert_not_called()

    @patch(ES_PATCH_PATH)
    def test_close_ignores_errors(self, mock_es, cluster) -> None:
        """测试关闭异常被记录而不抛出."""
        mock_es.return_value.close.side_effect = RuntimeError("boom")
        factory = ClientFactory(cluster)
        factory.get_client()

        factory.close()

        assert factory._client is None

    @patch(ES_PATCH_PATH)
    def test_get_client_after_close_recreates(self, mock_es, cluster) -> None:
        """测试 close 后重新创建客户端."""
        mock_es.side_effect = [MagicMock(), MagicMock()]
        factory = ClientFactory(cluster)
        first = factory.get_client()
        factory.close()
        second = factory.get_client()

        assert first is not second
        assert mock_es.call_count == 2

    @patch(ES_PATCH_PATH)
    def test_context_manager_closes_client(self, mock_es, cluster) -> None:
        """测试上下文管理器退出时关闭客户端."""
        mock_client = MagicMock()
        mock_es.return_value = mock_client

        with ClientFactory(cluster) as factory:
            assert isinstance(factory, ClientFactory)
            factory.get_client()

        mock_client.close.assert_called_once()

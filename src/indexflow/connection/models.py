"""客户端工厂数据模型定义模块."""

from dataclasses import dataclass, field

from .exceptions import ConnectionConfigError


@dataclass
class ClusterConfig:
    """集群配置模型.

    描述生命周期管理器要连接的单个集群，包括地址与认证方式。

    Attributes:
        hosts: 节点地址列表（必需，不可为空）
        username: Basic Auth 用户名
        password: Basic Auth 密码
        api_key: API Key 认证（字符串或 (id, key) 元组）
        bearer_token: Bearer Token 认证
        ca_certs: CA 证书文件路径
        verify_certs: 是否验证 SSL 证书，默认 True

    Raises:
        ConnectionConfigError: hosts 为空或仅提供了用户名/密码之一时抛出

    Examples:
        >>> config = ClusterConfig(
        ...     hosts=["https://search.internal:9200"],
        ...     username="elastic",
        ...     password="changeme",
        ... )
    """

    hosts: list[str] = field(default_factory=list)
    username: str | None = None
    password: str | None = None
    api_key: str | tuple[str, str] | None = None
    bearer_token: str | None = None
    ca_certs: str | None = None
    verify_certs: bool = True

    def __post_init__(self) -> None:
        """校验集群配置参数合法性."""
        if not self.hosts:
            raise ConnectionConfigError("hosts 不能为空，请提供至少一个节点地址")
        if bool(self.username) != bool(self.password):
            raise ConnectionConfigError("username 与 password 必须同时提供")


@dataclass
class ConnectionConfig:
    """连接配置模型.

    传输层的重试与超时参数，生命周期管理器本身不做额外重试。

    Attributes:
        max_retries: 传输层最大重试次数，默认 3
        retry_on_timeout: 超时是否重试，默认 True
        request_timeout: 单个请求超时时间（秒），默认 30，必须 >= 0。
            reindex 在大索引上耗时较长，必要时调大该值
        http_compress: 是否启用 HTTP 压缩，默认 True
    """

    max_retries: int = 3
    retry_on_timeout: bool = True
    request_timeout: int = 30
    http_compress: bool = True

    def __post_init__(self) -> None:
        """校验连接配置参数合法性."""
        if self.max_retries < 0:
            raise ConnectionConfigError(
                f"max_retries 必须 >= 0，当前值: {self.max_retries}"
            )
        if self.request_timeout < 0:
            raise ConnectionConfigError(
                f"request_timeout 必须 >= 0，当前值: {self.request_timeout}"
            )

"""集群探测模块：存在性检查与就绪等待."""

import logging
import threading
import time

from elasticsearch import Elasticsearch

from .exceptions import IndexLifecycleError

logger = logging.getLogger(__name__)

# 就绪等待的默认重试间隔（秒）
DEFAULT_READY_INTERVAL = 5.0


class ClusterProbe:
    """集群探测器.

    Args:
        es_client: Elasticsearch 客户端实例
    """

    def __init__(self, es_client: Elasticsearch):
        self.es_client = es_client

    def exists(self, name: str) -> bool:
        """检查别名或索引是否存在.

        Args:
            name: 别名或具体索引名称，由调用方决定传入哪一种

        Returns:
            是否存在

        Raises:
            IndexLifecycleError: 无法访问集群时抛出，不会当作“不存在”处理
        """
        logger.debug(f"检查索引 '{name}' 是否存在")
        try:
            return bool(self.es_client.indices.exists(index=name))
        except Exception as e:
            raise IndexLifecycleError(name, f"检查索引 '{name}' 失败: {str(e)}") from e

    def ping(self) -> bool:
        """探测集群是否可达，异常视为不可达."""
        try:
            return bool(self.es_client.ping())
        except Exception as e:
            logger.debug(f"探测集群失败: {str(e)}")
            return False

    def wait_until_ready(
        self,
        interval: float = DEFAULT_READY_INTERVAL,
        timeout: float | None = None,
        cancel_event: threading.Event | None = None,
    ) -> bool:
        """阻塞等待集群就绪.

        循环 ping 集群，失败时记录日志并在 interval 秒后重试。默认不设上限，
        可通过 timeout 限定总等待时间，或通过 cancel_event 从其他线程取消。

        Args:
            interval: 重试间隔（秒），默认 5 秒
            timeout: 最长等待时间（秒），None 表示无限等待
            cancel_event: 取消信号，被 set 后尽快返回

        Returns:
            集群就绪返回 True；超时或被取消返回 False

        Example:
            >>> stop = threading.Event()
            >>> probe.wait_until_ready(timeout=60, cancel_event=stop)
        """
        logger.info("等待集群就绪")
        event = cancel_event or threading.Event()
        deadline = None if timeout is None else time.monotonic() + timeout

        while not event.is_set():
            if self.ping():
                logger.info("集群已就绪")
                return True

            wait = interval
            if deadline is not None:
                remaining = deadline - time.monotonic()
                if remaining <= 0:
                    logger.warning(f"等待集群就绪超时（{timeout} 秒）")
                    return False
                wait = min(interval, remaining)

            logger.info(f"集群尚未就绪，{wait:g} 秒后重试")
            event.wait(wait)

        logger.info("等待集群就绪已取消")
        return False

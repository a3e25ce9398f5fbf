"""索引生命周期管理器核心工具类.

通过稳定的逻辑别名管理物理索引，支持零停机重建::

    创建 N+1（不绑定别名） -> reindex N 到 N+1 -> 原子切换别名 -> 删除 N

注意：管理器内部不加锁，同一别名上的 recreate_index 与 delete_indexes
不能并发执行，需要由调用方串行化。
"""

from __future__ import annotations

import logging
import threading
from typing import Any

from elasticsearch import Elasticsearch
from elasticsearch.exceptions import NotFoundError

from ..connection import ClientFactory, ClusterConfig, ConnectionConfig
from ..typing import SettingsDict
from .exceptions import IndexLifecycleError, RecreateError
from .models import (
    IndexName,
    LifecycleConfig,
    LineageResult,
    LineageStatus,
    RecreateResult,
    RecreateStep,
)
from .naming import NamingResolver, parse_index_name, validate_name
from .probe import DEFAULT_READY_INTERVAL, ClusterProbe
from .selector import SettingsSelector

logger = logging.getLogger(__name__)


class IndexLifecycleManager:
    """索引生命周期管理器.

    提供以下功能：
    - 按别名（及语言环境）创建索引，幂等
    - 零停机重建别名下的所有索引
    - 删除别名下的所有索引
    - 等待集群就绪

    管理器持有客户端，close() 或退出上下文时关闭。

    Args:
        es_client: Elasticsearch 客户端实例
        config: 生命周期配置

    Examples:
        >>> with IndexLifecycleManager(es_client, config) as manager:
        ...     manager.wait_until_ready()
        ...     manager.create_index("site", locale="en_US")
        ...     result = manager.recreate_index("site")
    """

    def __init__(self, es_client: Elasticsearch, config: LifecycleConfig):
        if es_client is None:
            raise ValueError("es_client 不能为 None")
        self.es_client = es_client
        self.config = config
        self.naming = NamingResolver(config)
        self.selector = SettingsSelector(es_client, config)
        self.probe = ClusterProbe(es_client)
        self._factory: ClientFactory | None = None
        logger.info("初始化索引生命周期管理器")

    @classmethod
    def from_cluster(
        cls,
        cluster: ClusterConfig,
        config: LifecycleConfig,
        connection_config: ConnectionConfig | None = None,
    ) -> IndexLifecycleManager:
        """根据集群配置创建管理器，客户端随管理器一起关闭."""
        factory = ClientFactory(cluster, connection_config)
        manager = cls(factory.get_client(), config)
        manager._factory = factory
        return manager

    # ============================================================
    # 创建
    # ============================================================

    def create_index(self, alias: str, locale: str | None = None) -> str | None:
        """创建索引并绑定别名.

        别名已存在时直接返回，不会调和已有索引的设置或映射。

        Args:
            alias: 逻辑别名
            locale: 语言环境（可选），如 "en_US"

        Returns:
            新建的物理索引名称；别名已存在时返回 None

        Raises:
            IndexLifecycleError: 存在性检查、映射读取或创建失败时抛出
            ValueError: 别名或语言环境不合法（语言环境须包含国家部分）时抛出

        Example:
            >>> manager.create_index("site", locale="es_MX")
            'site-es_mx_v1'
        """
        return self._do_create_index(
            alias,
            locale=locale,
            suffix=self.config.index_name_suffix,
            settings=self.config.default_settings,
            bind_alias=True,
        )

    def _do_create_index(
        self,
        alias: str,
        locale: str | None,
        suffix: str,
        settings: SettingsDict,
        bind_alias: bool,
    ) -> str | None:
        qualified_alias = self.naming.qualify_alias(alias, locale)
        analyzer = self.naming.resolve_analyzer(locale)
        index_name = qualified_alias + suffix

        if self.probe.exists(qualified_alias if bind_alias else index_name):
            logger.debug(f"'{qualified_alias}' 已存在，跳过创建")
            return None

        mapping = self.selector.select_mapping(alias)
        logger.info(f"创建索引 '{index_name}'（映射: {mapping.name}，分析器: {analyzer}）")
        mappings = mapping.read_mapping()

        kwargs: dict[str, Any] = {
            "index": index_name,
            "settings": self.selector.build_settings(settings, analyzer),
            "mappings": mappings,
        }
        if bind_alias:
            logger.info(f"创建别名 '{qualified_alias}'")
            kwargs["aliases"] = {qualified_alias: {}}

        try:
            self.es_client.indices.create(**kwargs)
        except Exception as e:
            raise IndexLifecycleError(
                qualified_alias, f"创建索引 '{index_name}' 失败: {str(e)}"
            ) from e
        return index_name

    # ============================================================
    # 删除
    # ============================================================

    def delete_indexes(self, alias: str) -> list[str]:
        """删除别名匹配 ``{alias}*`` 的所有索引.

        所有索引在同一个请求中删除，不可恢复。

        Returns:
            被删除的索引名称列表，没有匹配时为空列表

        Raises:
            IndexLifecycleError: 获取别名或删除失败时抛出
            ValueError: 别名不合法时抛出
        """
        validate_name(alias)
        indices = sorted(self._get_aliased_indices(alias))
        if not indices:
            logger.info(f"别名 '{alias}' 下没有需要删除的索引")
            return []

        logger.info(f"删除索引 {indices}")
        try:
            self.es_client.indices.delete(index=",".join(indices))
        except Exception as e:
            raise IndexLifecycleError(alias, f"删除索引失败: {str(e)}") from e
        return indices

    # ============================================================
    # 重建
    # ============================================================

    def get_lineages(self, alias: str) -> list[IndexName]:
        """列出别名下当前绑定的所有 lineage.

        Raises:
            IndexLifecycleError: 获取别名失败或索引名称无法解析时抛出
        """
        return [
            parse_index_name(index_name)
            for index_name in sorted(self._get_bound_indices(alias))
        ]

    def recreate_index(
        self,
        alias: str,
        stop_on_error: bool = True,
        raise_on_error: bool = True,
    ) -> RecreateResult:
        """零停机重建别名下的所有索引.

        对每个语言环境变体依次执行：解析版本 -> 继承设置 -> 创建 N+1（不绑定）
        -> reindex -> 原子切换别名 -> 删除 N。已完成的 lineage 不会回滚。

        Args:
            alias: 逻辑别名
            stop_on_error: 某个 lineage 失败后是否跳过剩余 lineage，默认 True
            raise_on_error: 存在失败时是否抛出 RecreateError，默认 True

        Returns:
            重建结果，包含每个 lineage 的状态

        Raises:
            RecreateError: raise_on_error 为 True 且存在失败的 lineage 时抛出，
                异常的 result 属性携带部分结果
            IndexLifecycleError: 无法列出别名下的索引时抛出

        Example:
            >>> result = manager.recreate_index("site", raise_on_error=False)
            >>> if result.outcome is UpgradeOutcome.PARTIAL:
            ...     print(result.get_error_summary())
        """
        validate_name(alias)
        logger.info(f"重建别名 '{alias}' 的索引")
        bound = self._get_bound_indices(alias)
        result = RecreateResult(alias=alias)
        first_error: Exception | None = None

        for index_name in sorted(bound):
            lineage = LineageResult(index_name=index_name)
            result.lineages.append(lineage)

            if first_error is not None and stop_on_error:
                logger.warning(f"跳过索引 '{index_name}' 的重建")
                continue

            logger.info(f"找到别名 '{alias}' 的索引 '{index_name}'")
            try:
                self._recreate_lineage(alias, index_name, bound[index_name], lineage)
            except Exception as e:
                lineage.status = LineageStatus.FAILED
                lineage.error = str(e)
                logger.warning(
                    f"重建索引 '{index_name}' 在 {lineage.step.value} 步骤失败: {str(e)}"
                )
                if first_error is None:
                    first_error = e
            else:
                lineage.status = LineageStatus.SUCCEEDED

        logger.info(f"别名 '{alias}' 重建结束: {result.outcome.value}")
        if raise_on_error and first_error is not None:
            raise RecreateError(
                alias, f"升级别名 '{alias}' 的索引失败: {str(first_error)}", result
            ) from first_error
        return result

    def _recreate_lineage(
        self,
        alias: str,
        index_name: str,
        aliases: set[str],
        lineage: LineageResult,
    ) -> None:
        """执行单个 lineage 的重建协议，进度记录在 lineage 中."""
        lineage.step = RecreateStep.PARSE
        current = parse_index_name(index_name)
        lineage.locale = current.locale
        if current.locale:
            logger.info(f"索引 '{index_name}' 的语言环境为 {current.locale}")

        qualified_alias = self.naming.qualify_alias(alias, current.locale)
        if qualified_alias not in aliases:
            raise IndexLifecycleError(
                index_name, f"索引未绑定到别名 '{qualified_alias}'"
            )
        lineage.alias = qualified_alias

        new_version = current.next_version()
        new_index_name = self.naming.index_name(
            alias, current.locale, new_version.suffix
        )
        lineage.new_index_name = new_index_name
        logger.debug(f"索引 '{index_name}' 的新版本为 {new_version.suffix}")

        lineage.step = RecreateStep.SETTINGS
        settings = self.selector.merge_settings(index_name)

        lineage.step = RecreateStep.CREATE
        created = self._do_create_index(
            alias,
            locale=current.locale,
            suffix=new_version.suffix,
            settings=settings,
            bind_alias=False,
        )
        if created is None:
            raise IndexLifecycleError(new_index_name, "新版本索引已存在")

        lineage.step = RecreateStep.REINDEX
        lineage.docs_count = self._do_reindex(index_name, new_index_name)

        lineage.step = RecreateStep.SWAP
        self._do_swap(qualified_alias, index_name, new_index_name)

        lineage.step = RecreateStep.DELETE
        self._do_delete_index(index_name)

    def _do_reindex(self, source_index: str, dest_index: str) -> int:
        """把源索引的全部文档复制到目标索引，完成后刷新.

        Returns:
            复制的文档总数
        """
        logger.info(f"reindex 全部内容: '{source_index}' -> '{dest_index}'")
        try:
            response = self.es_client.reindex(
                source={"index": source_index},
                dest={"index": dest_index},
                refresh=True,
                wait_for_completion=True,
            )
        except Exception as e:
            raise IndexLifecycleError(
                dest_index, f"reindex '{source_index}' 失败: {str(e)}"
            ) from e

        failures = response.get("failures") or []
        if failures:
            raise IndexLifecycleError(
                dest_index, f"reindex '{source_index}' 有 {len(failures)} 个文档失败"
            )
        total = response.get("total", 0)
        logger.info(f"成功复制 {total} 个文档到 '{dest_index}'")
        return total

    def _do_swap(self, alias: str, existing_index: str, new_index: str) -> None:
        """在同一个请求中把别名从旧索引移到新索引."""
        logger.info(f"切换别名 '{alias}': '{existing_index}' -> '{new_index}'")
        try:
            self.es_client.indices.update_aliases(
                actions=[
                    {"add": {"index": new_index, "alias": alias}},
                    {"remove": {"index": existing_index, "alias": alias}},
                ]
            )
        except Exception as e:
            raise IndexLifecycleError(alias, f"切换别名失败: {str(e)}") from e

    def _do_delete_index(self, index_name: str) -> None:
        logger.info(f"删除索引 '{index_name}'")
        try:
            self.es_client.indices.delete(index=index_name)
        except Exception as e:
            raise IndexLifecycleError(
                index_name, f"删除索引 '{index_name}' 失败: {str(e)}"
            ) from e

    def _get_aliased_indices(self, alias: str) -> dict[str, set[str]]:
        """返回别名匹配 ``{alias}*`` 的索引及其别名."""
        try:
            response = self.es_client.indices.get_alias(name=f"{alias}*")
        except NotFoundError:
            return {}
        except Exception as e:
            raise IndexLifecycleError(alias, f"获取别名失败: {str(e)}") from e

        return {
            index_name: set(data.get("aliases", {}))
            for index_name, data in response.items()
        }

    def _get_bound_indices(self, alias: str) -> dict[str, set[str]]:
        """返回绑定到 ``alias`` 或 ``alias-*`` 的索引，排除仅前缀相同的其他别名."""
        bound = {}
        for index_name, aliases in self._get_aliased_indices(alias).items():
            owned = {a for a in aliases if a == alias or a.startswith(f"{alias}-")}
            if owned:
                bound[index_name] = owned
            else:
                logger.debug(f"索引 '{index_name}' 不属于别名 '{alias}'，跳过")
        return bound

    # ============================================================
    # 集群就绪与生命周期
    # ============================================================

    def exists(self, name: str) -> bool:
        """检查别名或索引是否存在."""
        return self.probe.exists(name)

    def wait_until_ready(
        self,
        interval: float = DEFAULT_READY_INTERVAL,
        timeout: float | None = None,
        cancel_event: threading.Event | None = None,
    ) -> bool:
        """阻塞等待集群就绪，参见 ClusterProbe.wait_until_ready."""
        return self.probe.wait_until_ready(
            interval=interval, timeout=timeout, cancel_event=cancel_event
        )

    def close(self) -> None:
        """关闭持有的客户端."""
        if self._factory is not None:
            self._factory.close()
            return
        try:
            self.es_client.close()
        except Exception as e:
            logger.warning(f"关闭客户端失败: {str(e)}")

    def __enter__(self) -> IndexLifecycleManager:
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

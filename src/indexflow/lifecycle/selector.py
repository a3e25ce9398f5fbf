"""映射模板与索引设置选择模块."""

import logging

from elasticsearch import Elasticsearch

from ..typing import SettingsDict
from .exceptions import IndexLifecycleError
from .models import DEFAULT_ANALYZER_KEY, LifecycleConfig, MappingType
from .resources import MappingResource

logger = logging.getLogger(__name__)


def select_mapping_type(alias: str, config: LifecycleConfig) -> MappingType:
    """根据别名判断映射类型.

    别名完整匹配 authoring_name_pattern 时为 AUTHORING，否则为 PREVIEW。

    Examples:
        >>> select_mapping_type("site-authoring", config)
        <MappingType.AUTHORING: 'authoring'>
    """
    if config.authoring_regex.fullmatch(alias):
        return MappingType.AUTHORING
    return MappingType.PREVIEW


class SettingsSelector:
    """映射模板与索引设置选择器.

    Args:
        es_client: Elasticsearch 客户端实例，用于读取已有索引的设置
        config: 生命周期配置
    """

    def __init__(self, es_client: Elasticsearch, config: LifecycleConfig):
        self.es_client = es_client
        self.config = config

    def select_mapping(self, alias: str) -> MappingResource:
        """返回别名对应的映射模板资源."""
        mapping_type = select_mapping_type(alias, self.config)
        if mapping_type is MappingType.AUTHORING:
            return self.config.authoring_mapping
        return self.config.preview_mapping

    @staticmethod
    def build_settings(settings: SettingsDict, analyzer: str) -> SettingsDict:
        """复制设置并写入默认分析器，不修改传入的字典."""
        result = dict(settings)
        result[DEFAULT_ANALYZER_KEY] = analyzer
        return result

    def merge_settings(
        self,
        index_name: str,
        defaults: SettingsDict | None = None,
    ) -> SettingsDict:
        """合并默认设置与已有索引上的设置.

        对 defaults 中的每个键读取索引上的当前值，非空的已有值覆盖默认值，
        使新版本索引继承运维调整过的设置（如分片数）。

        Args:
            index_name: 已有物理索引名称
            defaults: 默认设置，默认使用配置中的 default_settings

        Returns:
            合并后的新设置字典

        Raises:
            IndexLifecycleError: 读取索引设置失败时抛出

        Example:
            >>> # 索引上 index.number_of_shards=3
            >>> selector.merge_settings(
            ...     "blog_v1", {"index.number_of_shards": "1", "index.codec": "default"}
            ... )
            {'index.number_of_shards': '3', 'index.codec': 'default'}
        """
        if defaults is None:
            defaults = self.config.default_settings

        try:
            response = self.es_client.indices.get_settings(
                index=index_name, flat_settings=True
            )
        except Exception as e:
            raise IndexLifecycleError(
                index_name, f"获取索引 '{index_name}' 设置失败: {str(e)}"
            ) from e

        observed = response.get(index_name, {}).get("settings", {})
        settings = dict(defaults)
        for key in defaults:
            value = observed.get(key)
            if value in (None, "") and not key.startswith("index."):
                value = observed.get(f"index.{key}")
            if value not in (None, ""):
                logger.debug(f"沿用索引 '{index_name}' 的已有设置 {key}={value}")
                settings[key] = str(value)
        return settings

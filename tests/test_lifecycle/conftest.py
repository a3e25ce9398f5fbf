"""索引生命周期测试的公共 fixtures."""

import fnmatch
from typing import Any
from unittest.mock import MagicMock

import pytest

from indexflow.lifecycle.models import LifecycleConfig
from indexflow.lifecycle.resources import BytesMappingResource

AUTHORING_MAPPING = {
    "properties": {
        "title": {"type": "text"},
        "lastEditedBy": {"type": "keyword"},
    }
}

PREVIEW_MAPPING = {"properties": {"title": {"type": "text"}}}


@pytest.fixture
def config() -> LifecycleConfig:
    """创建生命周期配置."""
    return LifecycleConfig(
        authoring_mapping=BytesMappingResource.from_dict(
            "authoring-mapping.json", AUTHORING_MAPPING
        ),
        preview_mapping=BytesMappingResource.from_dict(
            "preview-mapping.json", PREVIEW_MAPPING
        ),
        locale_mapping={"en.*": "english", "es.*": "spanish", "es_MX": "mexican"},
        default_settings={
            "index.number_of_shards": "1",
            "index.mapping.total_fields.limit": "3000",
        },
    )


@pytest.fixture
def es_client() -> MagicMock:
    """创建模拟的 Elasticsearch 客户端."""
    client = MagicMock()
    client.indices = MagicMock()
    client.indices.exists.return_value = False
    client.indices.create.return_value = {"acknowledged": True}
    return client


class FakeIndices:
    """内存中的 indices API，记录每次请求后的别名绑定快照."""

    def __init__(self, cluster: "FakeCluster"):
        self.cluster = cluster

    def exists(self, index: str) -> bool:
        return index in self.cluster.indexes or any(
            index in data["aliases"] for data in self.cluster.indexes.values()
        )

    def create(
        self,
        index: str,
        settings: dict[str, str],
        mappings: dict[str, Any],
        aliases: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        self.cluster.check("create", index)
        if index in self.cluster.indexes:
            raise RuntimeError(f"resource_already_exists_exception: {index}")
        self.cluster.indexes[index] = {
            "settings": dict(settings),
            "mappings": mappings,
            "aliases": set(aliases or {}),
            "docs": {},
        }
        self.cluster.snapshot()
        return {"acknowledged": True, "index": index}

    def get_alias(self, name: str) -> dict[str, Any]:
        response = {}
        for index, data in self.cluster.indexes.items():
            matched = {a: {} for a in data["aliases"] if fnmatch.fnmatch(a, name)}
            if matched:
                response[index] = {"aliases": matched}
        return response

    def get_settings(self, index: str, flat_settings: bool) -> dict[str, Any]:
        self.cluster.check("get_settings", index)
        return {index: {"settings": dict(self.cluster.indexes[index]["settings"])}}

    def update_aliases(self, actions: list[dict[str, Any]]) -> dict[str, Any]:
        self.cluster.check("update_aliases", actions[0]["add"]["index"])
        for action in actions:
            for op, target in action.items():
                if target["index"] not in self.cluster.indexes:
                    raise KeyError(target["index"])
                aliases = self.cluster.indexes[target["index"]]["aliases"]
                if op == "remove" and target["alias"] not in aliases:
                    raise KeyError(target["alias"])
        for action in actions:
            for op, target in action.items():
                aliases = self.cluster.indexes[target["index"]]["aliases"]
                if op == "add":
                    aliases.add(target["alias"])
                else:
                    aliases.discard(target["alias"])
        self.cluster.snapshot()
        return {"acknowledged": True}

    def delete(self, index: str) -> dict[str, Any]:
        names = index.split(",")
        for name in names:
            self.cluster.check("delete", name)
            if name not in self.cluster.indexes:
                raise KeyError(name)
        for name in names:
            del self.cluster.indexes[name]
        self.cluster.snapshot()
        return {"acknowledged": True}


class FakeCluster:
    """内存中的集群，支持生命周期管理器用到的全部 API.

    Attributes:
        indexes: 索引名称到 {settings, mappings, aliases, docs} 的映射
        history: 每次修改后的别名绑定快照 {别名: 索引集合}
        failures: 操作名称到需要失败的索引名称集合
    """

    def __init__(self):
        self.indexes: dict[str, dict[str, Any]] = {}
        self.history: list[dict[str, set[str]]] = []
        self.failures: dict[str, set[str]] = {}
        self.indices = FakeIndices(self)

    def check(self, operation: str, index: str) -> None:
        if index in self.failures.get(operation, set()):
            raise RuntimeError(f"{operation} failed for {index}")

    def bindings(self) -> dict[str, set[str]]:
        result: dict[str, set[str]] = {}
        for index, data in self.indexes.items():
            for alias in data["aliases"]:
                result.setdefault(alias, set()).add(index)
        return result

    def snapshot(self) -> None:
        self.history.append(self.bindings())

    def add_index(
        self,
        name: str,
        alias: str,
        docs: dict[str, dict[str, Any]] | None = None,
        settings: dict[str, str] | None = None,
    ) -> None:
        self.indexes[name] = {
            "settings": dict(settings or {}),
            "mappings": {},
            "aliases": {alias},
            "docs": dict(docs or {}),
        }

    def reindex(
        self,
        source: dict[str, str],
        dest: dict[str, str],
        refresh: bool,
        wait_for_completion: bool,
    ) -> dict[str, Any]:
        self.check("reindex", dest["index"])
        docs = self.indexes[source["index"]]["docs"]
        self.indexes[dest["index"]]["docs"].update(docs)
        return {"total": len(docs), "created": len(docs), "failures": []}

    def ping(self) -> bool:
        return True

    def close(self) -> None:
        pass


@pytest.fixture
def fake_cluster() -> FakeCluster:
    """创建内存集群."""
    return FakeCluster()

"""映射模板资源模块.

映射模板以字节流的形式提供，读取与 JSON 解析失败统一转换为 IndexLifecycleError。
"""

import json
from abc import ABC, abstractmethod
from io import BytesIO
from pathlib import Path
from typing import BinaryIO

from ..typing import MappingDict
from .exceptions import IndexLifecycleError


class MappingResource(ABC):
    """映射模板资源抽象基类.

    Attributes:
        name: 资源名称，用于日志与异常信息
    """

    name: str

    @abstractmethod
    def open(self) -> BinaryIO:
        """打开资源并返回字节流."""

    def read_mapping(self) -> MappingDict:
        """读取并解析映射模板.

        Returns:
            映射字典

        Raises:
            IndexLifecycleError: 资源无法读取或内容不是 JSON 对象时抛出
        """
        try:
            with self.open() as stream:
                mapping = json.load(stream)
        except Exception as e:
            raise IndexLifecycleError(
                self.name, f"读取映射模板失败: {str(e)}"
            ) from e

        if not isinstance(mapping, dict):
            raise IndexLifecycleError(self.name, "映射模板必须是 JSON 对象")
        return mapping

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.name!r})"


class FileMappingResource(MappingResource):
    """基于文件的映射模板资源.

    Examples:
        >>> resource = FileMappingResource("config/authoring-mapping.json")
    """

    def __init__(self, path: str | Path):
        self.path = Path(path)
        self.name = str(self.path)

    def open(self) -> BinaryIO:
        return self.path.open("rb")


class BytesMappingResource(MappingResource):
    """基于内存字节的映射模板资源."""

    def __init__(self, name: str, data: bytes | str):
        self.name = name
        self.data = data.encode("utf-8") if isinstance(data, str) else data

    @classmethod
    def from_dict(cls, name: str, mapping: MappingDict) -> "BytesMappingResource":
        """由映射字典构建资源."""
        return cls(name, json.dumps(mapping))

    def open(self) -> BinaryIO:
        return BytesIO(self.data)

"""indexflow 类型定义模块."""

from typing import Any

# 索引设置字典类型（扁平键，如 "index.number_of_shards"）
SettingsDict = dict[str, str]

# 语言环境映射字典类型
# 格式: {语言环境正则: 分析器名称}，按插入顺序匹配
LocaleMappingDict = dict[str, str]

# 索引映射字典类型
MappingDict = dict[str, Any]

"""索引命名解析模块.

由逻辑别名推导带语言环境的别名、默认分析器与物理索引名称，纯函数，不访问集群。

命名格式::

    {alias}[-{locale}]_v{N}

示例:
    >>> parse_index_name("blog-en_us_v2")
    IndexName(alias='blog', version=2, locale='en_us')
"""

import re

from .exceptions import IndexLifecycleError
from .models import (
    STANDARD_ANALYZER,
    VERSION_TOKEN,
    IndexName,
    LifecycleConfig,
)

# 语言[_国家][_变体]，分隔符接受 "_" 与 "-"
_LOCALE_PATTERN = re.compile(
    r"^([A-Za-z]{2,8})(?:[_-]([A-Za-z]{2}|[0-9]{3}))?(?:[_-]([A-Za-z0-9]{1,8}))?$"
)

# 索引名称中的语言环境必须包含国家部分，如 "en_us"
_NAME_LOCALE_PATTERN = re.compile(
    r"^[A-Za-z]{2,3}_(?:[A-Za-z]{2}|[0-9]{3})(?:_[A-Za-z0-9]{1,8})?$"
)

_VERSION_PATTERN = re.compile(r"^[1-9][0-9]*$")

_INVALID_NAME_CHARS = {
    ",", "#", "/", "\\", "*", "?", '"', "<", ">", "|", " ", "\t", "\n", "\r", ":",
}


def validate_name(name: str) -> None:
    """校验别名或索引名称是否符合集群命名规范.

    Raises:
        ValueError: 名称为空、超长、非小写、以非法字符开头或包含非法字符时抛出
    """
    if not name or not isinstance(name, str):
        raise ValueError("名称不能为空")
    if len(name.encode("utf-8")) > 255:
        raise ValueError(f"名称 '{name}' 超过 255 字节")
    if name.startswith(("-", "_", "+")) or name in (".", ".."):
        raise ValueError(f"名称 '{name}' 不能以 '-'、'_' 或 '+' 开头")
    if name != name.lower():
        raise ValueError(f"名称 '{name}' 必须为小写")
    if any(char in _INVALID_NAME_CHARS for char in name):
        raise ValueError(f"名称 '{name}' 包含非法字符")


def normalize_locale(locale: str) -> str:
    """将语言环境规范化为 ``language_COUNTRY`` 形式.

    Args:
        locale: 语言环境，如 "en_US"、"en-us"、"es"

    Returns:
        规范化后的语言环境，如 "en_US"

    Raises:
        ValueError: 语言环境格式无效时抛出

    Examples:
        >>> normalize_locale("es-mx")
        'es_MX'
    """
    match = _LOCALE_PATTERN.match(locale.strip()) if locale else None
    if match is None:
        raise ValueError(f"语言环境 '{locale}' 格式无效")

    language, country, variant = match.groups()
    parts = [language.lower(), country.upper() if country else ""]
    if variant:
        parts.append(variant)
    return "_".join(parts).rstrip("_")


def locale_tag(locale: str) -> str:
    """返回用于索引与别名名称的语言环境标记（小写）.

    标记必须能被 parse_index_name 重新识别，因此要求包含国家部分。

    Raises:
        ValueError: 语言环境格式无效或缺少国家部分（如 "fr"）时抛出
    """
    tag = normalize_locale(locale).lower()
    if not _NAME_LOCALE_PATTERN.match(tag):
        raise ValueError(
            f"语言环境 '{locale}' 必须包含国家部分（如 'fr_FR'）才能用于索引名称"
        )
    return tag


def _find_locale(index_name: str) -> str | None:
    """提取索引名称中最后一个 "-" 与最后一个 "_" 之间的语言环境标记.

    只有包含 "_" 且符合 language_country 形式的片段才视为语言环境。
    """
    _, dash, tail = index_name.rpartition("-")
    if not dash:
        return None
    head, underscore, _ = tail.rpartition("_")
    segment = head if underscore else tail
    if not _NAME_LOCALE_PATTERN.match(segment):
        return None
    return segment


def parse_index_name(index_name: str) -> IndexName:
    """解析物理索引名称.

    Args:
        index_name: 物理索引名称，如 "blog-en_us_v2"

    Returns:
        解析得到的 IndexName，``str(result) == index_name``

    Raises:
        IndexLifecycleError: 名称中版本标记缺失、重复或版本号不是正整数时抛出
    """
    locale = _find_locale(index_name)
    remainder = index_name
    if locale:
        # 去掉语言环境片段，"vi_vn" 这类标记本身包含 "_v"
        head, _, tail = index_name.rpartition("-")
        remainder = head + tail[len(locale):]

    tokens = remainder.split(VERSION_TOKEN)
    if len(tokens) != 2:
        raise IndexLifecycleError(index_name, "无法找到索引的当前版本")

    alias, version = tokens
    if not alias or not _VERSION_PATTERN.match(version):
        raise IndexLifecycleError(index_name, f"索引版本号 '{version}' 无效")

    return IndexName(alias=alias, version=int(version), locale=locale)


class NamingResolver:
    """索引命名解析器.

    Args:
        config: 生命周期配置，提供语言环境分析器表与版本后缀
    """

    def __init__(self, config: LifecycleConfig):
        self.config = config

    def qualify_alias(self, alias: str, locale: str | None = None) -> str:
        """返回带语言环境的别名，如 ``blog-en_us``.

        Raises:
            ValueError: 别名不合法，或语言环境不合法、缺少国家部分时抛出
        """
        validate_name(alias)
        if not locale:
            return alias
        return f"{alias}-{locale_tag(locale)}"

    def resolve_analyzer(self, locale: str | None = None) -> str:
        """按语言环境选择默认分析器.

        顺序扫描语言环境表，第一个完整匹配的正则生效；
        未提供语言环境或没有匹配时返回 standard 分析器。

        Examples:
            >>> resolver.resolve_analyzer("es_MX")  # {"es.*": "spanish"}
            'spanish'
        """
        if not locale:
            return STANDARD_ANALYZER
        value = normalize_locale(locale)
        for pattern, analyzer in self.config.locale_patterns:
            if pattern.fullmatch(value):
                return analyzer
        return STANDARD_ANALYZER

    def index_name(
        self,
        alias: str,
        locale: str | None = None,
        suffix: str | None = None,
    ) -> str:
        """返回物理索引名称，默认使用配置的版本后缀."""
        return self.qualify_alias(alias, locale) + (
            suffix or self.config.index_name_suffix
        )

"""indexflow 异常定义模块."""


class IndexflowError(Exception):
    """indexflow 基础异常类."""

    pass

"""
异常定义
只有配置错误会中断整个流程，其余异常都在流程内部降级处理
"""


class WorklogError(Exception):
    """Base exception for worklog pipeline errors."""

    pass


class ConfigurationError(WorklogError, ValueError):
    """Raised when the pipeline configuration is invalid (fail fast)."""

    pass


class OracleResponseError(WorklogError, ValueError):
    """Raised when a narrative oracle response cannot be turned into a partition."""

    pass


class PostsFileError(WorklogError):
    """Raised when a posts file cannot be read as JSON of the expected shape."""

    pass

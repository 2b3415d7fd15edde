"""项目内使用的自定义异常定义。"""


class WatermarkToolError(Exception):
    """基础异常类型。"""


class InvalidConfigurationError(WatermarkToolError):
    """配置不合法时抛出。"""


class NoEligibleFilesError(WatermarkToolError):
    """选择中没有任何支持的文件时抛出，批处理不会启动。"""


class ArchiveWriteError(WatermarkToolError):
    """打包压缩文件失败。"""

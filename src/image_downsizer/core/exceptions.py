"""项目内使用的自定义异常定义。"""

from __future__ import annotations

from typing import Optional


class ImageDownsizerError(Exception):
    """基础异常类型。"""


class SourceNotFoundError(ImageDownsizerError):
    """批处理源目录不存在。"""


class OutputDirectoryError(ImageDownsizerError):
    """输出目录无法创建。"""


class UploadRejected(ImageDownsizerError):
    """上传内容不合法（对应 4xx）。"""

    def __init__(self, message: str, mime: Optional[str] = None) -> None:
        super().__init__(message)
        self.mime = mime


class UploadFailed(ImageDownsizerError):
    """上传图片在处理阶段失败（对应 5xx）。"""

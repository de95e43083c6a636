"""核心数据模型定义。"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Generic, Optional, TypeVar

from PIL import Image

T = TypeVar("T")


class MimeType(Enum):
    """支持的三种图片类型，扩展名与透明通道能力随成员一起定义。"""

    JPEG = ("image/jpeg", ".jpg", "JPEG", False)
    PNG = ("image/png", ".png", "PNG", True)
    WEBP = ("image/webp", ".webp", "WEBP", True)

    def __init__(self, mime: str, extension: str, pil_format: str, alpha_capable: bool) -> None:
        self.mime = mime
        self.extension = extension
        self.pil_format = pil_format
        self.alpha_capable = alpha_capable

    @classmethod
    def from_mime(cls, mime: Optional[str]) -> Optional["MimeType"]:
        for member in cls:
            if member.mime == mime:
                return member
        return None


class ErrorKind(str, Enum):
    """流水线阶段失败的类别。"""

    DECODE = "decode"
    RESAMPLE = "resample"
    ENCODE = "encode"
    CODEC_UNAVAILABLE = "codec-unavailable"
    DIRECTORY = "directory"
    WRITE = "write"


@dataclass(slots=True)
class StageError:
    """单个阶段的失败描述。"""

    kind: ErrorKind
    detail: str

    def __str__(self) -> str:
        return self.detail


@dataclass(slots=True)
class StageResult(Generic[T]):
    """阶段返回值：成功时携带 value，失败时携带 error。"""

    value: Optional[T] = None
    error: Optional[StageError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, value: T) -> "StageResult[T]":
        return cls(value=value)

    @classmethod
    def failure(cls, kind: ErrorKind, detail: str) -> "StageResult[T]":
        return cls(error=StageError(kind=kind, detail=detail))


@dataclass(slots=True)
class ImageAsset:
    """解码后的内存位图，由单次流水线调用独占。"""

    payload: Image.Image
    alpha_capable: bool

    @property
    def width(self) -> int:
        return self.payload.width

    @property
    def height(self) -> int:
        return self.payload.height

    def close(self) -> None:
        self.payload.close()

    def __enter__(self) -> "ImageAsset":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


@dataclass(slots=True, frozen=True)
class ResizePlan:
    """源尺寸到目标尺寸的缩放方案。"""

    source_width: int
    source_height: int
    target_width: int
    target_height: int
    scale_factor: float

    @property
    def needs_resample(self) -> bool:
        return self.scale_factor < 1.0

    @property
    def target_size(self) -> tuple[int, int]:
        return self.target_width, self.target_height


@dataclass(slots=True)
class EncodedImage:
    """流水线的最终产出：编码后的字节。"""

    data: bytes
    mime: MimeType
    plan: ResizePlan


@dataclass(slots=True)
class SourceImage:
    """扫描阶段得到的源图片信息。"""

    source_path: Path
    root: Path
    relative_path: Path
    mime: MimeType


@dataclass(slots=True)
class BatchReport:
    """批处理汇总结果，遍历结束后只读。"""

    total: int = 0
    resized: int = 0
    skipped: int = 0
    errors: list[str] = field(default_factory=list)

    def record_error(self, message: str) -> None:
        """记录单项失败，该项计入 skipped。"""

        self.errors.append(message)
        self.skipped += 1

    def to_payload(self) -> dict:
        """转换为批处理接口的 JSON 响应体。"""

        return {
            "success": True,
            "total": self.total,
            "resized": self.resized,
            "skipped": self.skipped,
            "errors": list(self.errors),
        }

"""基于内容的图片类型识别。"""

from __future__ import annotations

import io
import logging
from pathlib import Path
from typing import Optional

from PIL import Image, UnidentifiedImageError

from image_downsizer.core.models import MimeType

LOGGER = logging.getLogger(__name__)

UNKNOWN_MIME = "application/octet-stream"

# Pillow 对部分 JPEG/PNG 变体给出更细的 MIME，统一归并到基础类型。
_MIME_ALIASES = {
    "image/mpo": "image/jpeg",
    "image/apng": "image/png",
}


def sniff_mime(data: bytes) -> str:
    """根据字节内容判断 MIME 类型，无法识别时返回 application/octet-stream。"""

    try:
        with Image.open(io.BytesIO(data)) as img:
            mime = img.get_format_mimetype() or Image.MIME.get(img.format or "")
    except Image.DecompressionBombError as exc:
        # 头部声明的尺寸超限：按签名归类，由解码阶段报告失败。
        LOGGER.debug("图像尺寸超出限制: %s", exc)
        return _signature_mime(data) or UNKNOWN_MIME
    except (UnidentifiedImageError, OSError, ValueError) as exc:
        LOGGER.debug("无法识别图像内容: %s", exc)
        mime = None

    if mime:
        return _MIME_ALIASES.get(mime, mime)
    # 当前 Pillow 不支持 WEBP 时仍按签名识别，缺失的编解码能力在后续阶段报告。
    if _has_webp_signature(data):
        return MimeType.WEBP.mime
    return UNKNOWN_MIME


def classify(data: bytes) -> Optional[MimeType]:
    """返回受支持的 MimeType，其余类型一律返回 None。"""

    return MimeType.from_mime(sniff_mime(data))


def classify_path(path: Path) -> Optional[MimeType]:
    try:
        data = path.read_bytes()
    except OSError as exc:
        LOGGER.debug("无法读取文件 %s: %s", path, exc)
        return None
    return classify(data)


def _signature_mime(data: bytes) -> Optional[str]:
    if data.startswith(b"\x89PNG\r\n\x1a\n"):
        return MimeType.PNG.mime
    if data.startswith(b"\xff\xd8\xff"):
        return MimeType.JPEG.mime
    if _has_webp_signature(data):
        return MimeType.WEBP.mime
    return None


def _has_webp_signature(data: bytes) -> bool:
    return len(data) >= 12 and data[:4] == b"RIFF" and data[8:12] == b"WEBP"

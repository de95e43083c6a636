"""单图上传流程：识别类型、确定文件名、缩放并写入输出目录。"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from image_downsizer.core.config import ServiceConfig
from image_downsizer.core.exceptions import UploadFailed, UploadRejected
from image_downsizer.core.models import ErrorKind, MimeType, ResizePlan
from image_downsizer.core.output_manager import OutputManager, write_image_file
from image_downsizer.processing.classifier import sniff_mime
from image_downsizer.processing.codecs import codec_for
from image_downsizer.processing.worker import resize_image

LOGGER = logging.getLogger(__name__)

_FAILURE_MESSAGES = {
    ErrorKind.DECODE: "Failed to read image",
    ErrorKind.RESAMPLE: "Failed to resize image",
    ErrorKind.ENCODE: "Failed to save resized image",
}


@dataclass(slots=True)
class UploadResult:
    """单图处理结果。"""

    url: str
    path: Path
    plan: ResizePlan


def process_upload(data: bytes, requested_name: str, overwrite: bool, config: ServiceConfig) -> UploadResult:
    """处理一次上传。

    内容不合法时抛出 UploadRejected（不会写入任何文件）；环境或处理阶段失败时
    抛出 UploadFailed 或 OutputDirectoryError。
    """

    if not data:
        raise UploadRejected("Invalid upload")

    sniffed = sniff_mime(data)
    mime = MimeType.from_mime(sniffed)
    if mime is None:
        LOGGER.info("拒绝不支持的类型：%s", sniffed)
        raise UploadRejected("Unsupported image type", mime=sniffed)

    codec = codec_for(mime)
    if not codec.available():
        raise UploadFailed(f"{mime.pil_format} not supported by the image library on this server")

    output_manager = OutputManager(config.output_dir)
    output_manager.ensure_root()
    destination = output_manager.prepare_upload_destination(requested_name, mime, overwrite)

    result = resize_image(data, mime)
    if not result.ok:
        LOGGER.warning("上传图片处理失败：%s", result.error)
        raise UploadFailed(_FAILURE_MESSAGES.get(result.error.kind, result.error.detail))

    written = write_image_file(result.value.data, destination)
    if not written.ok:
        raise UploadFailed("Failed to save resized image")

    LOGGER.info("已写入 %s", destination)
    return UploadResult(url=config.url_for(destination.name), path=destination, plan=result.value.plan)

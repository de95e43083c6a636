"""单张图片的处理单元：解码、规划、画布、重采样、编码与写入。"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Tuple

from image_downsizer.core.config import MAX_SIZE
from image_downsizer.core.models import EncodedImage, ErrorKind, MimeType, StageResult
from image_downsizer.core.output_manager import write_image_file
from image_downsizer.processing.canvas import build_canvas
from image_downsizer.processing.codecs import codec_for
from image_downsizer.processing.geometry import plan_resize
from image_downsizer.processing.resampler import resample

LOGGER = logging.getLogger(__name__)


@dataclass(slots=True)
class ProcessingTask:
    """描述单个图片处理任务。"""

    source_path: Path
    dest_path: Path
    mime: MimeType


def resize_image(data: bytes, mime: MimeType, max_size: Tuple[int, int] = MAX_SIZE) -> StageResult[EncodedImage]:
    """对内存中的图片执行完整的缩放流水线。

    源图与画布在任何退出路径上都会被释放。
    """

    codec = codec_for(mime)
    decoded = codec.decode(data)
    if not decoded.ok:
        return StageResult(error=decoded.error)

    source = decoded.value
    try:
        plan = plan_resize(source.width, source.height, *max_size)
        with build_canvas(plan.target_width, plan.target_height, codec.alpha_capable) as canvas:
            resampled = resample(source, canvas, plan)
            if not resampled.ok:
                return StageResult(error=resampled.error)

            encoded = codec.encode(canvas)
            if not encoded.ok:
                return StageResult(error=encoded.error)
    finally:
        source.close()

    LOGGER.debug(
        "缩放完成 %dx%d -> %dx%d",
        plan.source_width,
        plan.source_height,
        plan.target_width,
        plan.target_height,
    )
    return StageResult.success(EncodedImage(data=encoded.value, mime=mime, plan=plan))


def run_task(task: ProcessingTask) -> StageResult[Path]:
    """读取源文件、缩放并写入目标路径。"""

    try:
        data = task.source_path.read_bytes()
    except OSError as exc:
        return StageResult.failure(ErrorKind.DECODE, f"cannot read file: {exc}")

    result = resize_image(data, task.mime)
    if not result.ok:
        return StageResult(error=result.error)

    return write_image_file(result.value.data, task.dest_path)

"""将源图像素投射到目标画布。"""

from __future__ import annotations

import logging

from PIL import Image

from image_downsizer.core.models import ErrorKind, ImageAsset, ResizePlan, StageResult

LOGGER = logging.getLogger(__name__)


def resample(source: ImageAsset, destination: ImageAsset, plan: ResizePlan) -> StageResult[ImageAsset]:
    """无需缩小时直接逐像素拷贝，否则使用面积平均插值缩小到整个画布。

    源图与画布均由调用方负责释放。
    """

    target_size = (destination.width, destination.height)
    if target_size[0] < 1 or target_size[1] < 1:
        return StageResult.failure(ErrorKind.RESAMPLE, f"invalid target size {target_size[0]}x{target_size[1]}")

    source_image = source.payload
    converted = None
    if source_image.mode != destination.payload.mode:
        converted = source_image = source_image.convert(destination.payload.mode)

    try:
        if not plan.needs_resample:
            # 不做 alpha 混合，源像素（含透明度）原样覆盖画布。
            destination.payload.paste(source_image, (0, 0))
        else:
            with source_image.resize(target_size, Image.Resampling.BOX) as resized:
                destination.payload.paste(resized, (0, 0))
    except (OSError, ValueError) as exc:
        LOGGER.debug("重采样失败: %s", exc)
        return StageResult.failure(ErrorKind.RESAMPLE, f"resample failed: {exc}")
    finally:
        if converted is not None:
            converted.close()

    return StageResult.success(destination)

"""等比缩放尺寸计算。"""

from __future__ import annotations

import math

from image_downsizer.core.models import ResizePlan


def plan_resize(source_width: int, source_height: int, max_width: int, max_height: int) -> ResizePlan:
    """计算适配边界框的目标尺寸，只缩小不放大。

    宽高小于 1 时按 1 处理，避免除零。
    """

    src_w = max(1, source_width)
    src_h = max(1, source_height)

    scale = min(max_width / src_w, max_height / src_h, 1.0)
    if scale >= 1.0:
        return ResizePlan(src_w, src_h, src_w, src_h, 1.0)

    return ResizePlan(
        source_width=src_w,
        source_height=src_h,
        target_width=int(math.floor(src_w * scale)),
        target_height=int(math.floor(src_h * scale)),
        scale_factor=scale,
    )

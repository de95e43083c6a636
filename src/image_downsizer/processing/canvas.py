"""目标画布分配。"""

from __future__ import annotations

from PIL import Image

from image_downsizer.core.models import ImageAsset

TRANSPARENT = (0, 0, 0, 0)
OPAQUE_BLACK = (0, 0, 0)


def build_canvas(width: int, height: int, alpha_capable: bool) -> ImageAsset:
    """创建目标画布；支持透明通道的格式预先填充全透明色。"""

    if alpha_capable:
        payload = Image.new("RGBA", (width, height), TRANSPARENT)
    else:
        payload = Image.new("RGB", (width, height), OPAQUE_BLACK)
    return ImageAsset(payload=payload, alpha_capable=alpha_capable)

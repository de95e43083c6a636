"""各图片格式的解码与编码实现。"""

from __future__ import annotations

import io
import logging
from typing import Any, ClassVar, Dict

from PIL import Image, ImageOps, UnidentifiedImageError, features

from image_downsizer.core.config import JPEG_QUALITY, PNG_COMPRESS_LEVEL, WEBP_QUALITY
from image_downsizer.core.models import ErrorKind, ImageAsset, MimeType, StageResult

LOGGER = logging.getLogger(__name__)


class Codec:
    """单一格式的编解码能力，流水线只依赖该接口。"""

    mime: ClassVar[MimeType]

    @property
    def alpha_capable(self) -> bool:
        return self.mime.alpha_capable

    @property
    def pixel_mode(self) -> str:
        return "RGBA" if self.alpha_capable else "RGB"

    def available(self) -> bool:
        return True

    def save_params(self) -> Dict[str, Any]:
        return {}

    def decode(self, data: bytes) -> StageResult[ImageAsset]:
        """解码字节并执行 EXIF 旋转与像素模式归一化。

        返回的 ImageAsset 由调用者负责关闭。
        """

        if not self.available():
            return self._unavailable()

        try:
            with Image.open(io.BytesIO(data), formats=[self.mime.pil_format]) as img:
                img.load()
                oriented = ImageOps.exif_transpose(img)
                if oriented.mode == self.pixel_mode:
                    payload = oriented
                else:
                    payload = oriented.convert(self.pixel_mode)
                    oriented.close()
        except (UnidentifiedImageError, Image.DecompressionBombError, OSError, ValueError) as exc:
            LOGGER.debug("无法解码 %s 图像: %s", self.mime.pil_format, exc)
            return StageResult.failure(ErrorKind.DECODE, f"cannot decode image: {exc}")

        return StageResult.success(ImageAsset(payload=payload, alpha_capable=self.alpha_capable))

    def encode(self, asset: ImageAsset) -> StageResult[bytes]:
        """按固定参数编码为字节，不修改输入。"""

        if not self.available():
            return self._unavailable()

        image = asset.payload
        converted = None
        if image.mode != self.pixel_mode:
            converted = image = image.convert(self.pixel_mode)

        buffer = io.BytesIO()
        try:
            image.save(buffer, format=self.mime.pil_format, **self.save_params())
        except (OSError, ValueError, KeyError) as exc:
            LOGGER.debug("编码 %s 失败: %s", self.mime.pil_format, exc)
            return StageResult.failure(ErrorKind.ENCODE, f"encode failed: {exc}")
        finally:
            if converted is not None:
                converted.close()

        return StageResult.success(buffer.getvalue())

    def _unavailable(self) -> StageResult:
        return StageResult.failure(
            ErrorKind.CODEC_UNAVAILABLE,
            f"{self.mime.pil_format} not supported by the image library on this server",
        )


class JpegCodec(Codec):
    mime = MimeType.JPEG

    def save_params(self) -> Dict[str, Any]:
        return {"quality": JPEG_QUALITY}


class PngCodec(Codec):
    mime = MimeType.PNG

    def save_params(self) -> Dict[str, Any]:
        return {"compress_level": PNG_COMPRESS_LEVEL}


class WebpCodec(Codec):
    mime = MimeType.WEBP

    def available(self) -> bool:
        return bool(features.check("webp"))

    def save_params(self) -> Dict[str, Any]:
        return {"quality": WEBP_QUALITY}


_CODECS: Dict[MimeType, Codec] = {
    MimeType.JPEG: JpegCodec(),
    MimeType.PNG: PngCodec(),
    MimeType.WEBP: WebpCodec(),
}


def codec_for(mime: MimeType) -> Codec:
    return _CODECS[mime]

"""输出目录、目标文件名与写入处理模块。"""

from __future__ import annotations

import logging
from pathlib import Path

from image_downsizer.core.exceptions import OutputDirectoryError
from image_downsizer.core.models import ErrorKind, MimeType, SourceImage, StageResult
from image_downsizer.core.naming import batch_stem, resolve_destination_name

LOGGER = logging.getLogger(__name__)


class OutputManager:
    """负责输出目录创建、目标路径决策与覆盖处理。"""

    def __init__(self, output_dir: Path) -> None:
        self.output_dir = output_dir

    def ensure_root(self) -> Path:
        """确保输出根目录存在，无法创建时抛出 OutputDirectoryError。"""

        try:
            self.output_dir.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise OutputDirectoryError(f"Failed to create {self.output_dir.name} directory") from exc
        return self.output_dir

    def batch_destination(self, source: SourceImage) -> Path:
        """批处理模式：镜像相对目录，文件名为源文件主干加检测到的扩展名。"""

        relative_dir = source.relative_path.parent
        name = batch_stem(source.relative_path.name) + source.mime.extension
        return self.output_dir / relative_dir / name

    def prepare_directory(self, directory: Path) -> StageResult[Path]:
        try:
            directory.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            LOGGER.warning("无法创建目录 %s: %s", directory, exc)
            return StageResult.failure(ErrorKind.DIRECTORY, f"Cannot create directory: {directory}")
        return StageResult.success(directory)

    def prepare_upload_destination(self, raw_name: str, mime: MimeType, overwrite: bool) -> Path:
        """单图模式：解析最终文件名；覆盖模式下先删除已存在的同名文件。"""

        final_name = resolve_destination_name(
            raw_name,
            mime.extension,
            overwrite,
            lambda candidate: (self.output_dir / candidate).exists(),
        )
        destination = self.output_dir / final_name

        if overwrite and destination.exists():
            try:
                destination.unlink()
            except OSError as exc:
                LOGGER.warning("删除旧文件失败 %s: %s", destination, exc)
            else:
                LOGGER.info("覆盖已存在文件：%s", destination.name)
        return destination


def write_image_file(data: bytes, destination: Path) -> StageResult[Path]:
    """将编码后的字节写入磁盘。"""

    try:
        destination.write_bytes(data)
    except OSError as exc:
        LOGGER.warning("写入文件失败 %s: %s", destination, exc)
        return StageResult.failure(ErrorKind.WRITE, f"cannot write file: {destination.name}")
    return StageResult.success(destination)

"""文件扫描与类型识别逻辑。"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterator

from image_downsizer.core.models import SourceImage
from image_downsizer.processing.classifier import classify_path

LOGGER = logging.getLogger(__name__)


def iter_files(path: Path) -> Iterator[Path]:
    """按前序遍历目录：先产出当前条目，遇到子目录立即深入，不做排序。

    不跟随指向目录的符号链接。
    """

    for entry in path.iterdir():
        if entry.is_dir() and not entry.is_symlink():
            yield from iter_files(entry)
        elif entry.is_file():
            yield entry


def iter_source_images(root: Path) -> Iterator[SourceImage]:
    """遍历源目录，仅产出内容识别为受支持类型的图片。"""

    resolved_root = root.resolve()
    for candidate in iter_files(resolved_root):
        mime = classify_path(candidate)
        if mime is None:
            LOGGER.debug("忽略非图片文件：%s", candidate)
            continue

        yield SourceImage(
            source_path=candidate,
            root=resolved_root,
            relative_path=candidate.relative_to(resolved_root),
            mime=mime,
        )

"""批处理流水线：扫描源目录、逐张缩放并镜像输出目录结构。"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable, Optional

from image_downsizer.core.exceptions import SourceNotFoundError
from image_downsizer.core.models import BatchReport, ErrorKind, StageError
from image_downsizer.core.output_manager import OutputManager
from image_downsizer.core.progress import ProgressUpdate
from image_downsizer.core.scanner import iter_source_images
from image_downsizer.processing.worker import ProcessingTask, run_task

LOGGER = logging.getLogger(__name__)


ProgressCallback = Optional[Callable[[ProgressUpdate], None]]

_READ_ERRORS = {ErrorKind.DECODE, ErrorKind.CODEC_UNAVAILABLE}


def process_batch(
    source_root: Path,
    output_root: Path,
    progress_callback: ProgressCallback = None,
) -> BatchReport:
    """批量处理入口。

    单个文件失败只记录错误并计入 skipped，不会中断遍历。源目录不存在时抛出
    SourceNotFoundError，输出根目录无法创建时抛出 OutputDirectoryError。
    """

    if not source_root.is_dir():
        raise SourceNotFoundError(f"Source folder {source_root.name}/ not found")

    output_manager = OutputManager(output_root)
    output_manager.ensure_root()

    LOGGER.info("开始扫描输入路径：%s", source_root)
    sources = list(iter_source_images(source_root))
    report = BatchReport()
    written: set[Path] = set()
    total = len(sources)
    LOGGER.info("发现 %d 个候选图片文件", total)

    if total == 0:
        _emit_progress(progress_callback, completed=0, total=0, message="没有需要处理的图片")
        return report

    for completed, source in enumerate(sources, start=1):
        report.total += 1
        relative = source.relative_path.as_posix()
        destination = output_manager.batch_destination(source)
        if destination in written:
            # 同一目录下不同源文件映射到同一输出名（如 a.jpg 与 a.jpeg），不覆盖先写入的结果。
            report.record_error(f"Duplicate destination: {relative} -> {destination.name}")
            _emit_progress(progress_callback, completed, total, f"跳过 {relative}")
            continue

        prepared = output_manager.prepare_directory(destination.parent)
        if not prepared.ok:
            report.record_error(str(prepared.error))
            _emit_progress(progress_callback, completed, total, f"跳过 {relative}")
            continue

        outcome = run_task(ProcessingTask(source_path=source.source_path, dest_path=destination, mime=source.mime))
        if outcome.ok:
            report.resized += 1
            written.add(destination)
            _emit_progress(progress_callback, completed, total, f"完成 {relative}")
        else:
            message = _describe_failure(relative, outcome.error)
            LOGGER.warning("处理失败：%s", message)
            report.record_error(message)
            _emit_progress(progress_callback, completed, total, f"失败 {relative}")

    LOGGER.info("批处理完成：成功 %d 张，跳过 %d 张", report.resized, report.skipped)
    return report


def _describe_failure(relative: str, error: StageError) -> str:
    if error.kind in _READ_ERRORS:
        return f"Failed to read: {relative} - {error.detail}"
    if error.kind is ErrorKind.RESAMPLE:
        return f"Failed to resize: {relative}"
    return f"Failed to save: {relative} - {error.detail}"


def _emit_progress(
    callback: ProgressCallback,
    completed: int,
    total: int,
    message: Optional[str] = None,
) -> None:
    if not callback:
        return
    callback(ProgressUpdate(total=total, completed=completed, message=message))

"""命令行入口。"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

import typer
from rich.progress import (
    BarColumn,
    Progress,
    SpinnerColumn,
    TextColumn,
    TimeElapsedColumn,
    TimeRemainingColumn,
)

from image_downsizer.core.config import ServiceConfig
from image_downsizer.core.exceptions import ImageDownsizerError, UploadRejected
from image_downsizer.core.progress import ProgressUpdate
from image_downsizer.processing.pipeline import process_batch
from image_downsizer.processing.upload import process_upload
from image_downsizer.utils.logging import setup_logging

app = typer.Typer(help="图片等比缩小工具：单图上传与目录批处理。")


def _build_progress_callback(progress: Progress):
    task_id: Optional[int] = None

    def callback(update: ProgressUpdate) -> None:
        nonlocal task_id
        if update.total == 0:
            return
        if task_id is None:
            task_id = progress.add_task("缩放图片", total=update.total)
        progress.update(task_id, completed=update.completed)
        if update.message:
            progress.log(update.message)

    return callback


@app.command("batch")
def batch_cli(
    source: Path = typer.Argument(..., help="源图片目录，递归扫描"),
    output: Path = typer.Argument(..., help="输出目录，保持源目录结构"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="输出调试日志"),
) -> None:
    """批量缩放目录中的所有图片。"""

    setup_logging(logging.DEBUG if verbose else logging.INFO)

    progress = Progress(
        SpinnerColumn(),
        TextColumn("[bold blue]{task.description}"),
        BarColumn(),
        TimeElapsedColumn(),
        TimeRemainingColumn(),
    )

    try:
        with progress:
            report = process_batch(
                source.expanduser().resolve(),
                output.expanduser().resolve(),
                progress_callback=_build_progress_callback(progress),
            )
    except ImageDownsizerError as exc:
        typer.echo(f"错误：{exc}", err=True)
        raise typer.Exit(code=1) from exc

    typer.echo(f"处理完成：共 {report.total} 张，缩放 {report.resized} 张，跳过 {report.skipped} 张。")
    for message in report.errors:
        typer.echo(f"  - {message}", err=True)


@app.command("upload")
def upload_cli(
    image: Path = typer.Argument(..., exists=True, dir_okay=False, help="待处理的图片文件"),
    output: Path = typer.Option(..., "--output", "-o", help="输出目录"),
    name: Optional[str] = typer.Option(None, "--name", help="期望的文件名，默认使用原文件名"),
    overwrite: bool = typer.Option(False, "--overwrite", help="同名文件存在时直接覆盖"),
) -> None:
    """按单图上传规则处理一张图片。"""

    setup_logging()

    output_dir = output.expanduser().resolve()
    config = ServiceConfig(root=output_dir.parent, output_dirname=output_dir.name)

    try:
        result = process_upload(image.read_bytes(), name if name is not None else image.name, overwrite, config)
    except UploadRejected as exc:
        detail = f" ({exc.mime})" if exc.mime else ""
        typer.echo(f"错误：{exc}{detail}", err=True)
        raise typer.Exit(code=2) from exc
    except ImageDownsizerError as exc:
        typer.echo(f"错误：{exc}", err=True)
        raise typer.Exit(code=1) from exc

    typer.echo(str(result.path))


@app.command("serve")
def serve_cli(
    root: Optional[Path] = typer.Option(None, "--root", help="服务根目录，包含 Image/ 与 subImage/"),
    host: str = typer.Option("127.0.0.1", "--host"),
    port: int = typer.Option(5000, "--port"),
) -> None:
    """启动 HTTP 服务。"""

    from image_downsizer.web.app import create_app

    setup_logging()
    config = ServiceConfig(root=root.expanduser().resolve()) if root else ServiceConfig.from_env()
    create_app(config).run(host=host, port=port)


if __name__ == "__main__":
    app()

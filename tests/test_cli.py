"""命令行入口测试。"""

from __future__ import annotations

from pathlib import Path

from PIL import Image
from typer.testing import CliRunner

from image_downsizer.cli.main import app

runner = CliRunner()


def test_batch_command(tmp_path: Path) -> None:
    source = tmp_path / "input"
    output = tmp_path / "output"
    (source / "sub").mkdir(parents=True)
    Image.new("RGB", (2000, 1000), "blue").save(source / "sub" / "wide.jpg")
    (source / "notes.txt").write_text("hello")

    result = runner.invoke(app, ["batch", str(source), str(output)])

    assert result.exit_code == 0, result.output
    assert "缩放 1 张" in result.output
    with Image.open(output / "sub" / "wide.jpg") as img:
        assert img.size == (1600, 800)


def test_batch_command_missing_source(tmp_path: Path) -> None:
    result = runner.invoke(app, ["batch", str(tmp_path / "missing"), str(tmp_path / "out")])

    assert result.exit_code == 1


def test_upload_command(tmp_path: Path) -> None:
    image = tmp_path / "Holiday Pic.png"
    Image.new("RGBA", (50, 50), (0, 0, 0, 0)).save(image)
    output = tmp_path / "resized"

    result = runner.invoke(app, ["upload", str(image), "--output", str(output)])

    assert result.exit_code == 0, result.output
    assert (output / "Holiday_Pic.png").exists()


def test_upload_command_rejects_unsupported(tmp_path: Path) -> None:
    image = tmp_path / "anim.gif"
    Image.new("RGB", (10, 10), "red").save(image)

    result = runner.invoke(app, ["upload", str(image), "--output", str(tmp_path / "resized")])

    assert result.exit_code == 2
    assert not (tmp_path / "resized").exists()

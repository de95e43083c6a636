"""服务配置与固定的处理参数。"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Tuple

# 边界框与编码参数为固定常量，不随请求变化。
MAX_SIZE: Tuple[int, int] = (1600, 1600)
JPEG_QUALITY = 82
PNG_COMPRESS_LEVEL = 6
WEBP_QUALITY = 82

ROOT_ENV_VAR = "IMAGE_DOWNSIZER_ROOT"


@dataclass(slots=True)
class ServiceConfig:
    """单图上传与批处理共用的目录配置。"""

    root: Path
    source_dirname: str = "Image"
    output_dirname: str = "subImage"

    @property
    def source_dir(self) -> Path:
        return self.root / self.source_dirname

    @property
    def output_dir(self) -> Path:
        return self.root / self.output_dirname

    def url_for(self, name: str) -> str:
        """返回输出文件相对服务根目录的访问路径。"""

        return f"{self.output_dirname}/{name}"

    @classmethod
    def from_env(cls) -> "ServiceConfig":
        root = os.environ.get(ROOT_ENV_VAR) or os.getcwd()
        return cls(root=Path(root).expanduser().resolve())

"""输出文件名的清洗与冲突处理。"""

from __future__ import annotations

import re
import secrets
from datetime import datetime
from typing import Callable, Optional

DEFAULT_STEM = "image"
MAX_STEM_LENGTH = 40

_FORBIDDEN_CHARS_RE = re.compile(r'[\\/:*?"<>|]')
_WHITESPACE_RE = re.compile(r"\s+")
_DOTS_RE = re.compile(r"\.+")
_INVALID_STEM_CHARS_RE = re.compile(r"[^A-Za-z0-9_\-]")


def sanitize_stem(raw_name: str) -> str:
    """将用户提供的名称清洗为安全的文件名主干（不含扩展名）。"""

    name = _FORBIDDEN_CHARS_RE.sub("", raw_name or "")
    name = _WHITESPACE_RE.sub("_", name)
    name = _DOTS_RE.sub(".", name)

    # 忽略用户自带的扩展名
    stem, dot, _ = name.rpartition(".")
    if not dot:
        stem = name

    stem = _INVALID_STEM_CHARS_RE.sub("", stem) or DEFAULT_STEM
    return stem[:MAX_STEM_LENGTH]


def batch_stem(filename: str) -> str:
    """批处理模式保留源文件主干，只去掉路径不安全的字符。"""

    stem, dot, _ = filename.rpartition(".")
    if not dot:
        stem = filename
    return _FORBIDDEN_CHARS_RE.sub("", stem).strip() or DEFAULT_STEM


def resolve_destination_name(
    raw_name: str,
    extension: str,
    overwrite: bool,
    exists: Callable[[str], bool],
    *,
    now: Optional[datetime] = None,
    token: Optional[str] = None,
) -> str:
    """根据覆盖标志与目标是否已存在，确定最终输出文件名。

    ``exists`` 接收候选文件名并返回该文件是否已存在。覆盖模式下直接复用
    原始名称，旧文件由调用方删除；非覆盖模式下发生冲突时追加
    ``_<时间戳>_<随机十六进制>`` 后缀。
    """

    stem = sanitize_stem(raw_name)
    final_name = f"{stem}{extension}"
    if overwrite or not exists(final_name):
        return final_name

    timestamp = (now or datetime.now()).strftime("%Y%m%d_%H%M%S")
    suffix = token or secrets.token_hex(3)
    return f"{stem}_{timestamp}_{suffix}{extension}"

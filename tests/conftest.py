"""测试共用的构造数据。"""

from __future__ import annotations

import struct
import zlib

import pytest


def _png_chunk(kind: bytes, payload: bytes) -> bytes:
    crc = zlib.crc32(kind + payload) & 0xFFFFFFFF
    return struct.pack(">I", len(payload)) + kind + payload + struct.pack(">I", crc)


@pytest.fixture()
def oversized_png() -> bytes:
    """头部声明 20000x20000 的 PNG，超出 Pillow 的像素上限。"""

    header = struct.pack(">IIBBBBB", 20000, 20000, 8, 2, 0, 0, 0)
    return b"\x89PNG\r\n\x1a\n" + _png_chunk(b"IHDR", header) + _png_chunk(b"IEND", b"")

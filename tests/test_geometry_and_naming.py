"""尺寸规划与文件名清洗测试。"""

from __future__ import annotations

import math
import re
from datetime import datetime

import pytest

from image_downsizer.core.naming import resolve_destination_name, sanitize_stem
from image_downsizer.processing.geometry import plan_resize


@pytest.mark.parametrize(
    "size",
    [(1, 1), (800, 600), (1600, 1600), (1601, 1600), (4000, 3000), (3000, 4000), (12345, 67), (7, 9999)],
)
def test_plan_never_upscales_and_floors_targets(size: tuple[int, int]) -> None:
    src_w, src_h = size
    plan = plan_resize(src_w, src_h, 1600, 1600)

    assert plan.scale_factor <= 1.0
    assert plan.target_width == math.floor(src_w * plan.scale_factor)
    assert plan.target_height == math.floor(src_h * plan.scale_factor)
    assert plan.target_width <= 1600
    assert plan.target_height <= 1600


def test_plan_within_bounds_is_identity() -> None:
    plan = plan_resize(1200, 900, 1600, 1600)

    assert plan.scale_factor == 1.0
    assert plan.target_size == (1200, 900)
    assert not plan.needs_resample


def test_plan_uses_tighter_dimension() -> None:
    plan = plan_resize(4000, 2000, 1600, 1600)

    assert plan.scale_factor == pytest.approx(0.4)
    assert plan.target_size == (1600, 800)
    assert plan.needs_resample


def test_plan_clamps_degenerate_sizes() -> None:
    plan = plan_resize(0, -5, 1600, 1600)

    assert plan.source_width == 1
    assert plan.source_height == 1
    assert plan.target_size == (1, 1)


def test_plan_can_produce_zero_area_target() -> None:
    plan = plan_resize(10000, 1, 1600, 1600)

    assert plan.target_width == 1600
    assert plan.target_height == 0


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("My Photo!!.jpg", "My_Photo"),
        ("holiday", "holiday"),
        ("archive.tar.gz", "archivetar"),
        ("a  b\tc.png", "a_b_c"),
        ("many...dots..png", "manydots"),
        ('in:va*l?id"<na>me|.webp', "invalidname"),
        ("résumé final.v2.png", "rsum_finalv2"),
        ("../../etc/passwd", "image"),
        ("", "image"),
        ("!!!.png", "image"),
    ],
)
def test_sanitize_stem(raw: str, expected: str) -> None:
    assert sanitize_stem(raw) == expected


def test_sanitize_stem_truncates_to_forty_characters() -> None:
    stem = sanitize_stem("x" * 60 + ".png")

    assert stem == "x" * 40


def test_resolve_without_collision_keeps_plain_name() -> None:
    name = resolve_destination_name("photo.png", ".jpg", False, lambda _: False)

    assert name == "photo.jpg"


def test_resolve_collision_appends_timestamp_and_token() -> None:
    name = resolve_destination_name(
        "photo",
        ".jpg",
        False,
        lambda candidate: candidate == "photo.jpg",
        now=datetime(2026, 10, 19, 8, 30, 5),
        token="a1b2c3",
    )

    assert name == "photo_20261019_083005_a1b2c3.jpg"


def test_resolve_collision_generates_random_hex_suffix() -> None:
    name = resolve_destination_name("photo", ".png", False, lambda _: True)

    assert name != "photo.png"
    assert re.fullmatch(r"photo_\d{8}_\d{6}_[0-9a-f]{6}\.png", name)


def test_resolve_overwrite_reuses_name() -> None:
    name = resolve_destination_name("photo", ".webp", True, lambda _: True)

    assert name == "photo.webp"

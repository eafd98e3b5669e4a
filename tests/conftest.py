"""Shared test fixtures."""

from __future__ import annotations

import numpy as np
import pytest

from percepta.engine.context import RasterImage

WHITE = (255, 255, 255)
BLACK = (0, 0, 0)
RED = (220, 30, 30)
BLUE = (30, 60, 220)

# Uniform white 32×32: the canonical compact-mode scenario
WHITE_32_COMPACT_PAYLOAD = "FLQ000000W0%ANK6"


def solid(width: int, height: int, rgb: tuple[int, int, int] = WHITE) -> np.ndarray:
    arr = np.zeros((height, width, 4), dtype=np.uint8)
    arr[..., :3] = rgb
    arr[..., 3] = 255
    return arr


def with_square(
    arr: np.ndarray,
    x0: int,
    y0: int,
    size: int,
    rgb: tuple[int, int, int] = BLACK,
) -> np.ndarray:
    out = arr.copy()
    out[y0 : y0 + size, x0 : x0 + size, :3] = rgb
    return out


def with_disk(arr: np.ndarray, cx: float, cy: float, r: float, rgb: tuple[int, int, int] = BLACK) -> np.ndarray:
    out = arr.copy()
    yy, xx = np.mgrid[: arr.shape[0], : arr.shape[1]]
    out[(xx - cx) ** 2 + (yy - cy) ** 2 <= r * r, :3] = rgb
    return out


def raster(arr: np.ndarray) -> RasterImage:
    return RasterImage.from_array(arr)


@pytest.fixture
def white_image() -> RasterImage:
    return raster(solid(32, 32))


@pytest.fixture
def square_image() -> RasterImage:
    return raster(with_square(solid(64, 64), 20, 20, 24))


@pytest.fixture
def disk_image() -> RasterImage:
    return raster(with_disk(solid(64, 64), 32, 32, 18, RED))


@pytest.fixture
def busy_image() -> RasterImage:
    """Several shapes in different colors spread over the frame."""
    arr = solid(96, 96, (240, 235, 220))
    arr = with_square(arr, 8, 8, 20, BLUE)
    arr = with_square(arr, 60, 10, 26, BLACK)
    arr = with_disk(arr, 30, 68, 14, RED)
    arr = with_disk(arr, 72, 70, 10, (40, 160, 60))
    return raster(arr)

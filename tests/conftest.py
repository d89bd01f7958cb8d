from __future__ import annotations

import pytest

from ppm_filter.models.pixel_grid import PixelGrid
from ppm_filter.services.ppm_codec import PpmCodec
from ppm_filter.services.transform_service import TransformService


def make_ppm(width: int, height: int, data: bytes, max_color: int = 255, comment: bytes = b"") -> bytes:
    return b"P6\n" + comment + f"{width} {height}\n{max_color}\n".encode("ascii") + data


@pytest.fixture
def codec() -> PpmCodec:
    return PpmCodec()


@pytest.fixture
def transforms() -> TransformService:
    return TransformService()


@pytest.fixture
def two_by_one() -> PixelGrid:
    return PixelGrid.from_pixels(2, 1, [(10, 20, 30), (40, 50, 60)])


@pytest.fixture
def three_by_two() -> PixelGrid:
    # 3 столбца, 2 строки, все каналы различны
    return PixelGrid.from_pixels(3, 2, [(i * 3, i * 3 + 1, i * 3 + 2) for i in range(6)])


@pytest.fixture
def sample_ppm() -> bytes:
    return make_ppm(3, 2, bytes(range(18)))

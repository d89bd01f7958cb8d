from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict

import numpy as np

from ppm_filter.models.errors import AllocationError, UnknownFilterError
from ppm_filter.models.pixel_grid import PixelGrid

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FilterSpec:
    name: str
    method: str
    description: str
    in_place: bool = True


# порядок совпадает с текстом справки
FILTERS: Dict[str, FilterSpec] = {
    spec.name: spec
    for spec in (
        FilterSpec("grayscale", "grayscale", "Convert image to grayscale"),
        FilterSpec("invert", "invert", "Invert image colors"),
        FilterSpec("flip-h", "flip_horizontal", "Flip image horizontally"),
        FilterSpec("flip-v", "flip_vertical", "Flip image vertically"),
        FilterSpec("rotate-90", "rotate_90_cw", "Rotate image 90 degrees clockwise", in_place=False),
        FilterSpec("rotate-90ccw", "rotate_90_ccw", "Rotate image 90 degrees counter-clockwise", in_place=False),
        FilterSpec("rotate-180", "rotate_180", "Rotate image 180 degrees"),
    )
}


class TransformService:
    def apply(self, name: str, grid: PixelGrid) -> PixelGrid:
        """
        Применяет фильтр по имени из `FILTERS`.
        Возвращает сетку, которую должен принять вызывающий: ту же самую
        для фильтров «на месте» и новую для поворотов на 90°.
        """
        try:
            spec = FILTERS[name]
        except KeyError:
            raise UnknownFilterError(name) from None
        result = getattr(self, spec.method)(grid)
        return grid if spec.in_place else result

    # ---------- Попиксельные фильтры ----------
    def grayscale(self, grid: PixelGrid) -> None:
        """
        Оттенки серого: r, g, b = (r + g + b) // 3 (целочисленное деление).
        """
        px = grid.pixels
        gray = px.sum(axis=2, dtype=np.uint16) // 3
        px[...] = gray.astype(np.uint8)[:, :, np.newaxis]

    def invert(self, grid: PixelGrid) -> None:
        """
        Негатив: c -> 255 - c, независимо от max_color (8-битные каналы).
        """
        if grid.max_color != 255:
            logger.warning("invert assumes 8-bit channels, max_color is %d", grid.max_color)
        np.subtract(np.uint8(255), grid.pixels, out=grid.pixels)

    # ---------- Отражения (на месте, размеры не меняются) ----------
    def flip_horizontal(self, grid: PixelGrid) -> None:
        """
        Зеркально по вертикальной оси: столбцы j и width-1-j меняются местами
        для j < width // 2, средний столбец при нечётной ширине не трогается.
        """
        px = grid.pixels
        half = grid.width // 2
        left = px[:, :half].copy()
        px[:, :half] = px[:, : grid.width - 1 - half : -1]
        px[:, grid.width - half :] = left[:, ::-1]

    def flip_vertical(self, grid: PixelGrid) -> None:
        """
        Зеркально по горизонтальной оси: строки i и height-1-i меняются местами.
        """
        px = grid.pixels
        half = grid.height // 2
        top = px[:half].copy()
        px[:half] = px[: grid.height - 1 - half : -1]
        px[grid.height - half :] = top[::-1]

    # ---------- Повороты ----------
    def rotate_90_cw(self, grid: PixelGrid) -> PixelGrid:
        """
        Поворот на 90° по часовой стрелке в новую сетку (width' = height, height' = width).
        Пиксель (i, j) исходной сетки попадает в (j, height - 1 - i).
        """
        # rot90 с k=-1: dst[j, H-1-i] = src[i, j]
        return self._rotated(grid, np.rot90(grid.pixels, k=-1))

    def rotate_90_ccw(self, grid: PixelGrid) -> PixelGrid:
        """
        Поворот на 90° против часовой стрелки в новую сетку.
        Пиксель (i, j) исходной сетки попадает в (width - 1 - j, i).
        """
        return self._rotated(grid, np.rot90(grid.pixels, k=1))

    def rotate_180(self, grid: PixelGrid) -> None:
        """
        Поворот на 180° на месте: отражение по горизонтали, затем по вертикали.
        """
        self.flip_horizontal(grid)
        self.flip_vertical(grid)

    # ---------- Вспомогательные функции ----------
    def _rotated(self, grid: PixelGrid, view: np.ndarray) -> PixelGrid:
        # исходная сетка не меняется: view только читается
        rotated = PixelGrid.allocate(grid.height, grid.width, grid.max_color)
        try:
            rotated.pixels[...] = view
        except MemoryError as exc:
            raise AllocationError("cannot copy rotated pixels") from exc
        return rotated

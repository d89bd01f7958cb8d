"""Модели данных для растрового изображения.

Принципы:
- SRP: только структура данных и доступ к пикселям, без фильтров и ввода-вывода.
- Пиксели хранятся в одном непрерывном буфере numpy (height, width, 3) uint8,
  пиксель (row, col) имеет плоский индекс `row * width + col`.
- Сетка владеет своим буфером единолично: внешние массивы копируются.
- Публичный API модели: `allocate`, `from_pixels`, `pixel_at`, `set_pixel`,
  `iter_pixels`, `copy`. Сервисы конвейера работают напрямую с `pixels`,
  попиксельный доступ через `Pixel` предназначен для вызывающего кода.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Iterator, Sequence, Tuple, Union

import numpy as np

from ppm_filter.models.errors import AllocationError, FormatError, FormatErrorReason

CHANNELS = 3


@dataclass(frozen=True)
class Pixel:
    """Неизменяемый RGB-пиксель, по 8 бит на канал."""
    r: int
    g: int
    b: int

    def as_tuple(self) -> Tuple[int, int, int]:
        return (self.r, self.g, self.b)


PixelLike = Union[Pixel, Sequence[int]]


@dataclass(eq=False)
class PixelGrid:
    """Изображение: размеры, max_color и буфер пикселей.

    Fields:
        width: Ширина, px (> 0).
        height: Высота, px (> 0).
        max_color: Поле заголовка PPM (обычно 255).
        pixels: Массив uint8 формы (height, width, 3), C-порядок.
    """
    width: int
    height: int
    max_color: int
    pixels: np.ndarray

    def __post_init__(self) -> None:
        if self.pixels.shape != (self.height, self.width, CHANNELS):
            raise ValueError(
                f"pixel buffer shape {self.pixels.shape} does not match "
                f"{self.width}x{self.height}"
            )
        # представления (view) чужих массивов копируются в собственный буфер
        if (
            self.pixels.dtype != np.uint8
            or not self.pixels.flags.c_contiguous
            or not self.pixels.flags.owndata
        ):
            self.pixels = np.array(self.pixels, dtype=np.uint8, order="C")

    # ---------- Конструкторы ----------
    @classmethod
    def allocate(cls, width: int, height: int, max_color: int = 255) -> "PixelGrid":
        """Выделяет сетку целиком за один шаг (заполнена нулями).

        Raises:
            FormatError: если ширина или высота не положительны.
            AllocationError: если память под буфер получить не удалось.
        """
        if width <= 0 or height <= 0:
            raise FormatError(
                FormatErrorReason.BAD_HEADER,
                f"non-positive dimensions {width}x{height}",
            )
        try:
            buffer = np.zeros((height, width, CHANNELS), dtype=np.uint8)
        except (MemoryError, ValueError) as exc:
            raise AllocationError(
                f"cannot allocate {width}x{height} pixel grid"
            ) from exc
        return cls(width=width, height=height, max_color=max_color, pixels=buffer)

    @classmethod
    def from_pixels(
        cls,
        width: int,
        height: int,
        pixels: Iterable[PixelLike],
        max_color: int = 255,
    ) -> "PixelGrid":
        """Собирает сетку из последовательности пикселей в построчном порядке."""
        values = [p.as_tuple() if isinstance(p, Pixel) else tuple(p) for p in pixels]
        if len(values) != width * height:
            raise ValueError(
                f"expected {width * height} pixels for {width}x{height}, got {len(values)}"
            )
        grid = cls.allocate(width, height, max_color)
        grid.pixels[...] = np.asarray(values, dtype=np.uint8).reshape(height, width, CHANNELS)
        return grid

    # ---------- Доступ к пикселям ----------
    @property
    def size(self) -> Tuple[int, int]:
        return self.width, self.height

    def pixel_at(self, row: int, col: int) -> Pixel:
        r, g, b = (int(v) for v in self.pixels[row, col])
        return Pixel(r, g, b)

    def set_pixel(self, row: int, col: int, pixel: PixelLike) -> None:
        value = pixel.as_tuple() if isinstance(pixel, Pixel) else tuple(pixel)
        self.pixels[row, col] = value

    def iter_pixels(self) -> Iterator[Pixel]:
        for r, g, b in self.pixels.reshape(-1, CHANNELS).tolist():
            yield Pixel(r, g, b)

    def to_bytes(self) -> bytes:
        return self.pixels.tobytes()

    def copy(self) -> "PixelGrid":
        return PixelGrid(
            width=self.width,
            height=self.height,
            max_color=self.max_color,
            pixels=self.pixels.copy(),
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PixelGrid):
            return NotImplemented
        return (
            self.size == other.size
            and self.max_color == other.max_color
            and np.array_equal(self.pixels, other.pixels)
        )

    def __repr__(self) -> str:
        return f"PixelGrid(width={self.width}, height={self.height}, max_color={self.max_color})"

"""Чтение и запись бинарного PPM (P6).

Формат заголовка: `P6`, пробельные символы и комментарии `#...\\n`,
затем `width height max_color` в десятичной записи и ровно один пробельный
байт, после которого идут сырые RGB-данные построчно.

Принципы:
- SRP: только кодек потока байт; пути и файлы открывает `ImageService`.
- Ошибки поднимаются как `FormatError` / `ImageIOError`, ничего не печатается.
"""
from __future__ import annotations

import io
import logging
from typing import BinaryIO, Optional

import numpy as np

from ppm_filter.models.errors import FormatError, FormatErrorReason, ImageIOError
from ppm_filter.models.pixel_grid import CHANNELS, PixelGrid

logger = logging.getLogger(__name__)

MAGIC = b"P6"
MAX_SUPPORTED_COLOR = 255
MAX_COLOR_LIMIT = 65535

_WHITESPACE = b" \t\n\v\f\r"
_DIGITS = b"0123456789"
# не более 10 цифр на поле заголовка
_MAX_FIELD_DIGITS = 10


class _HeaderReader:
    """Побайтовое чтение заголовка с возвратом одного байта (peek/unread)."""

    def __init__(self, stream: BinaryIO) -> None:
        self._stream = stream
        self._pushed: Optional[bytes] = None

    def read_byte(self) -> bytes:
        if self._pushed is not None:
            byte, self._pushed = self._pushed, None
            return byte
        return self._stream.read(1)

    def unread(self, byte: bytes) -> None:
        if self._pushed is not None:
            raise RuntimeError("only one byte can be pushed back")
        if byte:
            self._pushed = byte

    def skip_separators(self) -> None:
        """Пропускает пробелы и комментарии до начала следующего токена."""
        while True:
            byte = self.read_byte()
            if not byte:
                return
            if byte == b"#":
                self._skip_comment()
            elif byte not in _WHITESPACE:
                self.unread(byte)
                return

    def _skip_comment(self) -> None:
        # комментарий заканчивается переводом строки включительно
        while True:
            byte = self.read_byte()
            if not byte:
                raise FormatError(FormatErrorReason.BAD_HEADER, "end of file inside comment")
            if byte == b"\n":
                return

    def read_int(self, field: str) -> int:
        self.skip_separators()
        digits = bytearray()
        while True:
            byte = self.read_byte()
            if byte and byte in _DIGITS:
                digits += byte
                if len(digits) > _MAX_FIELD_DIGITS:
                    raise FormatError(FormatErrorReason.BAD_HEADER, f"{field} too large")
                continue
            self.unread(byte)
            break
        if not digits:
            raise FormatError(FormatErrorReason.BAD_HEADER, f"missing or malformed {field}")
        return int(digits)


class PpmCodec:
    def decode(self, stream: BinaryIO) -> PixelGrid:
        """Декодирует поток P6 в `PixelGrid`.

        Args:
            stream: Бинарный поток, открытый на чтение.

        Returns:
            Полностью заполненная сетка пикселей.

        Raises:
            FormatError: неверное магическое число, заголовок или обрезанные данные.
            AllocationError: если не удалось выделить буфер.
        """
        magic = stream.read(len(MAGIC))
        if magic != MAGIC:
            raise FormatError(FormatErrorReason.NOT_P6, f"magic number {magic!r}")

        reader = _HeaderReader(stream)
        first = reader.read_byte()
        if first not in _WHITESPACE and first != b"#":
            raise FormatError(FormatErrorReason.BAD_HEADER, "no separator after magic number")
        reader.unread(first)

        width = reader.read_int("width")
        height = reader.read_int("height")
        max_color = reader.read_int("max_color")
        self._check_header(width, height, max_color)

        # ровно один пробельный байт перед сырыми данными
        separator = reader.read_byte()
        if not separator:
            raise FormatError(FormatErrorReason.TRUNCATED_DATA, "no pixel data after header")
        if separator not in _WHITESPACE:
            raise FormatError(FormatErrorReason.BAD_HEADER, "no separator after max_color")
        logger.debug("P6 header: %dx%d, max_color=%d", width, height, max_color)

        grid = PixelGrid.allocate(width, height, max_color)
        expected = width * height * CHANNELS
        received = self._read_into(stream, grid.pixels.reshape(-1))
        if received < expected:
            raise FormatError(
                FormatErrorReason.TRUNCATED_DATA,
                f"expected {expected} bytes, got {received}",
            )
        if stream.read(1):
            logger.debug("ignoring trailing data after %d pixel bytes", expected)
        return grid

    def encode(self, grid: PixelGrid, sink: BinaryIO) -> None:
        """Записывает сетку в поток: заголовок без комментариев и сырые данные.

        Raises:
            FormatError: если сетку нельзя записать 8-битным P6.
            ImageIOError: если запись в поток не удалась.
        """
        if grid.max_color > MAX_SUPPORTED_COLOR:
            raise FormatError(
                FormatErrorReason.UNSUPPORTED_DEPTH,
                f"max_color {grid.max_color} needs two bytes per channel",
            )
        if grid.pixels.shape != (grid.height, grid.width, CHANNELS) or grid.pixels.dtype != np.uint8:
            raise FormatError(FormatErrorReason.BAD_HEADER, "pixel buffer does not match dimensions")

        header = f"P6\n{grid.width} {grid.height}\n{grid.max_color}\n".encode("ascii")
        try:
            sink.write(header)
            sink.write(grid.to_bytes())
            sink.flush()
        except OSError as exc:
            raise ImageIOError(getattr(sink, "name", None), "Cannot write image") from exc

    # ---------- Обёртки над bytes ----------
    def decode_bytes(self, data: bytes) -> PixelGrid:
        return self.decode(io.BytesIO(data))

    def encode_bytes(self, grid: PixelGrid) -> bytes:
        sink = io.BytesIO()
        self.encode(grid, sink)
        return sink.getvalue()

    # ---------- Вспомогательные функции ----------
    @staticmethod
    def _check_header(width: int, height: int, max_color: int) -> None:
        if width <= 0 or height <= 0:
            raise FormatError(FormatErrorReason.BAD_HEADER, f"non-positive dimensions {width}x{height}")
        if max_color <= 0 or max_color > MAX_COLOR_LIMIT:
            raise FormatError(FormatErrorReason.BAD_HEADER, f"max_color {max_color} out of range")
        if max_color > MAX_SUPPORTED_COLOR:
            raise FormatError(
                FormatErrorReason.UNSUPPORTED_DEPTH,
                f"max_color {max_color} needs two bytes per channel",
            )

    @staticmethod
    def _read_into(stream: BinaryIO, buffer: np.ndarray) -> int:
        """Читает в буфер до заполнения или конца потока; возвращает число байт."""
        view = memoryview(buffer).cast("B")
        total = 0
        while total < len(view):
            count = stream.readinto(view[total:])
            if not count:
                break
            total += count
        return total

"""Загрузка и сохранение PPM-изображений на диске.

Принципы:
- SRP: класс отвечает только за работу с путями и файлами, разбор формата делегирует `PpmCodec`.
- Файловые дескрипторы закрываются на всех путях, включая ошибки.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

from ppm_filter.models.errors import ImageIOError
from ppm_filter.models.pixel_grid import PixelGrid
from ppm_filter.services.ppm_codec import PpmCodec

logger = logging.getLogger(__name__)


@dataclass
class ImageService:
    codec: PpmCodec = field(default_factory=PpmCodec)

    def load_image(self, file_path: str | Path) -> PixelGrid:
        """Читает P6-файл с диска.

        Args:
            file_path: Путь до файла изображения.

        Returns:
            `PixelGrid` с размерами и max_color из заголовка.

        Raises:
            ImageIOError: если файл не существует, не является файлом или недоступен.
            FormatError: если содержимое не является корректным P6.
        """
        path = Path(file_path)
        if not path.is_file():
            raise ImageIOError(path, "Cannot open file")

        try:
            with path.open("rb") as stream:
                grid = self.codec.decode(stream)
        except OSError as exc:
            raise ImageIOError(path, "Cannot read file") from exc

        logger.debug("loaded %s (%dx%d)", path, grid.width, grid.height)
        return grid

    def save_image(self, grid: PixelGrid, file_path: str | Path) -> None:
        """Записывает сетку в P6-файл.

        При ошибке записи частично записанный файл удаляется.

        Raises:
            ImageIOError: если файл не удалось создать или записать.
        """
        path = Path(file_path)
        try:
            stream = path.open("wb")
        except OSError as exc:
            raise ImageIOError(path, "Cannot create file") from exc

        try:
            with stream:
                self.codec.encode(grid, stream)
        except (ImageIOError, OSError) as exc:
            # OSError сюда попадает, например, при сбросе буфера на закрытии
            self._discard(path)
            raise ImageIOError(path, "Cannot write file") from exc
        except Exception:
            self._discard(path)
            raise

        logger.debug("saved %s (%dx%d)", path, grid.width, grid.height)

    @staticmethod
    def _discard(path: Path) -> None:
        try:
            path.unlink()
        except OSError as exc:
            logger.warning("could not remove partial output %s: %s", path, exc)

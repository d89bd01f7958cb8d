"""Контроллер командной строки: разбор аргументов и оркестрация сервисов.

SOLID:
- SRP: класс связывает аргументы CLI с сервисами, сам пиксели не обрабатывает.
- Единственное место, где ошибки превращаются в сообщения и коды возврата.
"""
from __future__ import annotations

import logging
import sys
from dataclasses import dataclass, field
from typing import Sequence, TextIO

from ppm_filter.models.errors import ImageFilterError
from ppm_filter.services.image_service import ImageService
from ppm_filter.services.transform_service import FILTERS, TransformService

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FAILURE = 1


@dataclass
class CliController:
    """Запускает один цикл чтение → фильтр → запись.

    Ответственности:
    - Проверка количества аргументов и имени фильтра до обращения к диску.
    - Загрузка и сохранение через `ImageService`, фильтрация через `TransformService`.
    - Вывод справки, сообщений об ошибках и об успехе.
    """
    program: str = "ppm-filter"
    stdout: TextIO = field(default_factory=lambda: sys.stdout)
    stderr: TextIO = field(default_factory=lambda: sys.stderr)

    _image_service: ImageService = field(default_factory=ImageService)
    _transform_service: TransformService = field(default_factory=TransformService)

    def run(self, args: Sequence[str]) -> int:
        """Выполняет команду `<input> <output> <filter>` и возвращает код выхода."""
        if len(args) != 3:
            self.print_usage()
            return EXIT_FAILURE

        input_path, output_path, filter_name = args
        if filter_name not in FILTERS:
            self._error(f"Unknown filter '{filter_name}'")
            self.print_usage()
            return EXIT_FAILURE

        try:
            grid = self._image_service.load_image(input_path)
            grid = self._transform_service.apply(filter_name, grid)
            self._image_service.save_image(grid, output_path)
        except ImageFilterError as exc:
            logger.debug("%s failed", filter_name, exc_info=True)
            self._error(str(exc))
            return EXIT_FAILURE

        print(f"Successfully applied '{filter_name}' filter and saved to {output_path}", file=self.stdout)
        return EXIT_OK

    def print_usage(self) -> None:
        width = max(len(name) for name in FILTERS)
        lines = [f"Usage: {self.program} <input.ppm> <output.ppm> <filter>", "", "Filters:"]
        lines += [f"  {spec.name:<{width}} - {spec.description}" for spec in FILTERS.values()]
        lines += ["", f"Example: {self.program} input.ppm output.ppm grayscale"]
        print("\n".join(lines), file=self.stdout)

    # ---- Helpers ----
    def _error(self, message: str) -> None:
        print(f"Error: {message}", file=self.stderr)

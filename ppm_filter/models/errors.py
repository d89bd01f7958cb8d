"""Иерархия ошибок конвейера чтение → фильтр → запись.

Принципы:
- Низкоуровневые компоненты только поднимают исключения и ничего не печатают.
- Перевод ошибок в сообщения и коды возврата делает исключительно CLI-контроллер.
"""
from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import Optional


class FormatErrorReason(Enum):
    NOT_P6 = "not a P6 PPM file"
    BAD_HEADER = "invalid PPM header"
    TRUNCATED_DATA = "truncated pixel data"
    UNSUPPORTED_DEPTH = "unsupported color depth"


class ImageFilterError(Exception):
    """Базовое исключение пакета."""


class FormatError(ImageFilterError):
    """Некорректный поток PPM: магическое число, заголовок или данные.

    Args:
        reason: Категория ошибки (`FormatErrorReason`).
        detail: Уточнение для пользователя, необязательно.
    """

    def __init__(self, reason: FormatErrorReason, detail: Optional[str] = None) -> None:
        self.reason = reason
        self.detail = detail
        message = reason.value if not detail else f"{reason.value}: {detail}"
        super().__init__(message)


class ImageIOError(ImageFilterError):
    """Файл не удалось открыть, прочитать или записать."""

    def __init__(self, path: Optional[str | Path], message: str) -> None:
        self.path = Path(path) if path is not None else None
        super().__init__(f"{message}: {path}" if path is not None else message)


class AllocationError(ImageFilterError):
    """Не удалось выделить буфер пикселей."""


class UnknownFilterError(ImageFilterError, KeyError):
    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Unknown filter '{name}'")

    def __str__(self) -> str:
        # KeyError по умолчанию оборачивает сообщение в repr()
        return str(self.args[0])

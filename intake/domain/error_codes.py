from __future__ import annotations

from enum import Enum


class ErrorCode(str, Enum):
    """
    Назначение:
        Единая таксономия кодов ошибок чтения и проверки заголовка.
    """

    ROW_OUT_OF_RANGE = "ROW_OUT_OF_RANGE"
    MALFORMED_ROW = "MALFORMED_ROW"
    DECODE_ERROR = "DECODE_ERROR"
    SOURCE_ERROR = "SOURCE_ERROR"
    INVALID_HEADER = "INVALID_HEADER"
    UNKNOWN_VARIANT = "UNKNOWN_VARIANT"

from __future__ import annotations

import re
from typing import Any

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")


def is_empty(value: Any) -> bool:
    """
    Vacío "de formulario": None, False, 0, "", "0" y colecciones vacías.
    Los campos de layout llegan así desde el editor, nunca como ausentes.
    """
    if value is None or value is False:
        return True
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return value == 0
    if isinstance(value, str):
        return value == "" or value == "0"
    if isinstance(value, (list, tuple, dict, set)):
        return len(value) == 0
    return False


def to_int(value: Any, default: int = 0) -> int:
    """Entero desde int/float/str numérico ("12", " 7px" -> 7); cualquier otra cosa -> default."""
    if isinstance(value, bool):
        return default
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value)
    if isinstance(value, str):
        m = _LEADING_INT.match(value)
        return int(m.group(1)) if m else default
    return default


def is_numeric(value: Any) -> bool:
    if isinstance(value, bool):
        return False
    if isinstance(value, (int, float)):
        return True
    if isinstance(value, str):
        try:
            float(value.strip())
        except ValueError:
            return False
        return value.strip() != ""
    return False


def is_scalar(value: Any) -> bool:
    return isinstance(value, (str, int, float)) and not isinstance(value, bool)


def stripslashes(value: str) -> str:
    """Quita el escapado con backslash que dejan los formularios (\\" -> ")."""
    return re.sub(r"\\(.)", r"\1", value or "", flags=re.DOTALL)

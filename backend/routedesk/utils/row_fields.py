"""Field definitions + value coercion for imported spreadsheet rows.

Rows arrive as JSON objects whose keys are either the canonical column names
or the legacy spreadsheet headers (``billing``, ``tipo``, ``cliente`` …).
A FieldDef maps all of them onto one model attribute.
"""

import math
from dataclasses import dataclass, field
from typing import Any, Callable


@dataclass(frozen=True)
class FieldDef:
    """Definition for a single imported column."""
    column: str
    db_field: str
    required: bool = False
    coerce: Callable[[Any], Any] | None = None
    aliases: tuple[str, ...] = field(default_factory=tuple)

    def read(self, raw_row: dict[str, Any]) -> Any:
        """Return the first populated value among column + aliases."""
        for key in (self.column, *self.aliases):
            value = raw_row.get(key)
            if value is not None and value != "":
                return value
        return None


def coerce_text(val: Any) -> str:
    if val is None:
        return ""
    return str(val).strip()


def coerce_upper(val: Any) -> str:
    return coerce_text(val).upper()


def coerce_price(val: Any) -> float:
    """Numeric parse with a zero fallback: '150' -> 150.0, 'abc' -> 0.0"""
    if isinstance(val, bool) or val is None:
        return 0.0
    try:
        number = float(str(val).strip()) if isinstance(val, str) else float(val)
    except (TypeError, ValueError):
        return 0.0
    if math.isnan(number) or math.isinf(number):
        return 0.0
    return number

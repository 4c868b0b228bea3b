import math
import re
from typing import Callable, Optional, Union

Number = Union[int, float]

_DECIMAL_RE = re.compile(r"[0-9]+(?:\.[0-9]+)?")

ROMAN_VALUES = {"I": 1, "V": 5, "X": 10, "L": 50, "C": 100, "D": 500, "M": 1000}

CHINESE_DIGITS = {
    "零": 0, "〇": 0,
    "一": 1, "二": 2, "两": 2, "三": 3, "四": 4,
    "五": 5, "六": 6, "七": 7, "八": 8, "九": 9,
}
CHINESE_MULTIPLIERS = {"十": 10, "百": 100, "千": 1000}
HALF = "半"


def _as_number(value: float) -> Number:
    return int(value) if value.is_integer() else value


def parse_decimal(token: str) -> Optional[Number]:
    if not _DECIMAL_RE.fullmatch(token):
        return None
    value = float(token)
    # very long digit runs overflow to inf
    if not math.isfinite(value):
        return None
    return _as_number(value)


def parse_roman(token: str) -> Optional[int]:
    """Right-to-left scan; a symbol below the running maximum is subtracted (IV, XC)."""
    s = token.upper()
    if not s:
        return None
    total = 0
    highest = 0
    for ch in reversed(s):
        n = ROMAN_VALUES.get(ch)
        if n is None:
            return None
        if n < highest:
            total -= n
        else:
            total += n
            highest = n
    return total if total > 0 else None


def parse_chinese(token: str) -> Optional[Number]:
    if token == HALF:
        return 0.5
    if not token:
        return None
    total = 0
    current = 0
    for ch in token:
        if ch in CHINESE_DIGITS:
            current = CHINESE_DIGITS[ch]
        elif ch in CHINESE_MULTIPLIERS:
            # leading 十 means 一十
            total += (current or 1) * CHINESE_MULTIPLIERS[ch]
            current = 0
        else:
            return None
    return total + current


_PARSERS: tuple[Callable[[str], Optional[Number]], ...] = (
    parse_decimal,
    parse_roman,
    parse_chinese,
)


def parse_number_token(token: str) -> Optional[Number]:
    """
    Arabic, then Roman, then Chinese numerals; the first parser that yields a
    value wins. Returns None when no system accepts the token (never 0).
    """
    raw = str(token or "").strip()
    if not raw:
        return None
    for parser in _PARSERS:
        value = parser(raw)
        if value is not None:
            return value
    return None

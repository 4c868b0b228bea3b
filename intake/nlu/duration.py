import re
from typing import Iterable, List, Optional

from .normalizer import normalize, normalize_whitespace
from .numerals import parse_number_token
from .schema import DurationCandidate, DurationRange, DurationUnit

# ---- scoring constants (hand-tuned) ----

BASE_SCORE = 60
LOCATION_MAX = 30
RANGE_BONUS = 10
KEYWORD_BOOST = 12
WORSENING_PENALTY = 28
INTERMITTENT_PENALTY = 10
LEFT_WINDOW = 6

DURATION_KEYWORDS = ("持续", "已", "近", "约", "病程", "反复", "余", "多")
_WORSENING_RE = re.compile(r"加重|加剧|恶化|加深|再发")
_INTERMITTENT_RE = re.compile(r"间断|反复")

# ---- span pattern ----

# Each number alternative only starts at the beginning of its run, so a long
# digit string is scanned once instead of once per suffix.
_NUM = (
    r"(?:(?<![0-9])[0-9]+(?:\.[0-9]+)?"
    r"|(?<![IVXLCDM])[IVXLCDM]+"
    r"|(?<![零〇一二三四五六七八九十百千两半])[零〇一二三四五六七八九十百千两半]+)"
)
_RANGE_SEP = r"(?:\s*(?:-|~|～|—|至|到)\s*)"
_UNIT = (
    r"(?:分钟|分|小时|时|天|日|周|星期|月|年"
    r"|min(?![a-zA-Z])|hr(?![a-zA-Z])|h(?![a-zA-Z])|d(?![a-zA-Z])"
    r"|w(?![a-zA-Z])|m(?![a-zA-Z])|y(?![a-zA-Z]))"
)
DURATION_RE = re.compile(
    rf"({_NUM})(?:{_RANGE_SEP}({_NUM}))?\s*(?:个\s*)?({_UNIT})",
    re.I,
)

# Raw unit forms per unit, tried in this order; first unit with a hit wins.
UNIT_RULES = (
    (DurationUnit.MINUTE, (re.compile(r"分钟"), re.compile(r"\bmin\b", re.I), re.compile(r"分"))),
    (DurationUnit.HOUR, (re.compile(r"小时"), re.compile(r"\bhr\b", re.I), re.compile(r"\bh\b", re.I), re.compile(r"时"))),
    (DurationUnit.DAY, (re.compile(r"天"), re.compile(r"日"), re.compile(r"\bd\b", re.I))),
    (DurationUnit.WEEK, (re.compile(r"星期"), re.compile(r"周"), re.compile(r"\bw\b", re.I))),
    (DurationUnit.MONTH, (re.compile(r"月"), re.compile(r"\bm\b", re.I))),
    (DurationUnit.YEAR, (re.compile(r"年"), re.compile(r"\by\b", re.I))),
)

_SPAN_PUNCT_RE = re.compile(r"[，,。.;；:：（）()\[\]【】]")


def resolve_unit(raw_unit: str) -> Optional[DurationUnit]:
    u = (raw_unit or "").strip()
    if not u:
        return None
    for unit, patterns in UNIT_RULES:
        if any(p.search(u) for p in patterns):
            return unit
    return None


def _left_window(text: str, start: int) -> str:
    return text[max(0, start - LEFT_WINDOW):start]


def keyword_boost(text: str, start: int) -> int:
    left = _left_window(text, start)
    return KEYWORD_BOOST if any(k in left for k in DURATION_KEYWORDS) else 0


def noise_penalty(text: str, start: int) -> int:
    left = _left_window(text, start)
    if _WORSENING_RE.search(left):
        return WORSENING_PENALTY
    if _INTERMITTENT_RE.search(left):
        return INTERMITTENT_PENALTY
    return 0


def location_score(text_length: int, end: int) -> int:
    """Spans closer to the end of the sentence score higher."""
    distance = max(0, text_length - end)
    return max(0, LOCATION_MAX - distance // 2)


def score_candidate(text: str, start: int, end: int, is_range: bool) -> int:
    return (
        BASE_SCORE
        + location_score(len(text), end)
        + (RANGE_BONUS if is_range else 0)
        + keyword_boost(text, start)
        - noise_penalty(text, start)
    )


def extract_candidates(text: str) -> List[DurationCandidate]:
    normalized = normalize(text)
    out: List[DurationCandidate] = []
    for m in DURATION_RE.finditer(normalized):
        unit = resolve_unit(m.group(3))
        if unit is None:
            continue
        first = parse_number_token(m.group(1))
        if first is None:
            continue
        second = parse_number_token(m.group(2)) if m.group(2) else None
        value = DurationRange(min=first, max=second) if second is not None else first

        start, end = m.start(), m.end()
        score = score_candidate(normalized, start, end, isinstance(value, DurationRange))
        out.append(DurationCandidate(start=start, end=end, raw=m.group(0), value=value, unit=unit, score=score))
    return out


def choose_best_candidate(candidates: Iterable[DurationCandidate]) -> Optional[DurationCandidate]:
    """Highest score wins; on a tie the later span (larger start) wins."""
    best: Optional[DurationCandidate] = None
    for c in candidates:
        if best is None or c.score > best.score or (c.score == best.score and c.start > best.start):
            best = c
    return best


def remove_duration_span(text: str, start: int, end: int) -> str:
    merged = f"{text[:start]} {text[end:]}"
    return normalize_whitespace(_SPAN_PUNCT_RE.sub(" ", merged))

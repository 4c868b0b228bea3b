"""
Chief-complaint parser.

Pipeline (single pass, pure):
  normalize -> duration candidates -> best candidate -> remove its span
  -> core symptom from the remainder -> confidence -> ParseResult

Never raises for string input; incomplete parses come back with a lower
confidence and one of the FAILURE_* reasons.
"""
import math
from typing import Iterable, Mapping, Optional

from .duration import choose_best_candidate, extract_candidates, remove_duration_span
from .normalizer import normalize, normalize_whitespace
from .schema import DurationCandidate, DurationRange, DurationUnit, DurationValue, ParseResult
from .symptoms import extract_core_symptom

FAILURE_EMPTY_TEXT = "空文本"
FAILURE_NO_DURATION = "未识别到持续时间"
FAILURE_EMPTY_COMPLAINT = "主诉核心描述为空"

# confidence weights
CONF_NO_DURATION_WITH_SYMPTOM = 0.62
CONF_NO_DURATION_NO_SYMPTOM = 0.2
CONF_BASE = 0.55
CONF_SYMPTOM_FOUND = 0.18
CONF_SYMPTOM_MISSING = -0.25
CONF_DURATION_FOUND = 0.22
CONF_RANGE_BONUS = 0.03
CONF_COMMON_UNIT_BONUS = 0.02
COMMON_UNITS = frozenset({DurationUnit.DAY, DurationUnit.HOUR})


def clamp01(v: float) -> float:
    if not math.isfinite(v):
        return 0.0
    return min(1.0, max(0.0, v))


def format_duration(value: DurationValue, unit: DurationUnit) -> str:
    if isinstance(value, DurationRange):
        return f"{value.min}-{value.max}{unit.label}"
    return f"{value}{unit.label}"


def compute_confidence(complaint: str, best: Optional[DurationCandidate]) -> float:
    if best is None:
        return clamp01(CONF_NO_DURATION_WITH_SYMPTOM if complaint else CONF_NO_DURATION_NO_SYMPTOM)
    score = (
        CONF_BASE
        + (CONF_SYMPTOM_FOUND if complaint else CONF_SYMPTOM_MISSING)
        + CONF_DURATION_FOUND
        + (CONF_RANGE_BONUS if best.is_range else 0.0)
        + (CONF_COMMON_UNIT_BONUS if best.unit in COMMON_UNITS else 0.0)
    )
    return clamp01(score)


def parse(
    text: str,
    synonyms: Optional[Mapping[str, str]] = None,
    known_symptoms: Optional[Iterable[str]] = None,
) -> ParseResult:
    raw = normalize(text)
    if not raw:
        return ParseResult(confidence=0.0, failure_reason=FAILURE_EMPTY_TEXT)

    best = choose_best_candidate(extract_candidates(raw))

    if best is None:
        complaint = extract_core_symptom(raw, known_symptoms, synonyms)
        return ParseResult(
            complaint_text=complaint,
            normalized_text=complaint,
            confidence=compute_confidence(complaint, None),
            failure_reason=FAILURE_NO_DURATION,
        )

    remainder = remove_duration_span(raw, best.start, best.end)
    complaint = extract_core_symptom(remainder, known_symptoms, synonyms)
    return ParseResult(
        complaint_text=complaint,
        duration_value=best.value,
        duration_unit=best.unit,
        duration_raw=best.raw,
        normalized_text=normalize_whitespace(f"{complaint} {format_duration(best.value, best.unit)}"),
        confidence=compute_confidence(complaint, best),
        failure_reason=None if complaint else FAILURE_EMPTY_COMPLAINT,
    )

import re
from typing import Mapping, Optional

_WS_RE = re.compile(r"\s+")
_FULLWIDTH_DIGITS = str.maketrans("０１２３４５６７８９", "0123456789")

# "疼" on its own is shorthand for "疼痛"
_BARE_TENG_RE = re.compile(r"疼(?!痛)")
_DISCOMFORT_RE = re.compile(r"不舒服")

_LEADING_MARKER_RE = re.compile(r"^(?:主诉|诉|因|以)[：:\s]*")
_LEADING_ADVERB_RE = re.compile(r"^(?:近|约|已|持续|反复)\s*")


def normalize_whitespace(text: str) -> str:
    return _WS_RE.sub(" ", text).strip()


def normalize(raw: str) -> str:
    """Full-width digits to ASCII, whitespace runs to one space, trimmed."""
    text = "" if raw is None else str(raw)
    return normalize_whitespace(text.translate(_FULLWIDTH_DIGITS))


def apply_synonyms(text: str, synonyms: Optional[Mapping[str, str]]) -> str:
    """
    Replace every synonym key with its canonical value.
    Longer keys go first so "恶心与呕吐" is not split up by a shorter key
    it contains.
    """
    if not synonyms:
        return text
    entries = [(k, v) for k, v in synonyms.items() if k and v]
    entries.sort(key=lambda kv: len(kv[0]), reverse=True)
    for key, value in entries:
        if key in text:
            text = text.replace(key, value)
    return text


def strip_leading_markers(text: str) -> str:
    prev = None
    while prev != text:
        prev = text
        text = _LEADING_MARKER_RE.sub("", text)
        text = _LEADING_ADVERB_RE.sub("", text)
    return text


def normalize_complaint_text(text: str, synonyms: Optional[Mapping[str, str]] = None) -> str:
    t = str(text or "").strip()
    if not t:
        return ""
    t = apply_synonyms(t, synonyms)
    t = _BARE_TENG_RE.sub("疼痛", t)
    t = _DISCOMFORT_RE.sub("不适", t)
    t = strip_leading_markers(normalize_whitespace(t))
    return normalize_whitespace(t)

import re
from dataclasses import dataclass
from typing import Iterable, List, Mapping, Optional

from .normalizer import normalize_complaint_text

# Seed table: a body-location/keyword cluster, at most 3 chars of slack, then
# a descriptor cluster. Order matters only for equal (index, length) hits.
FALLBACK_RULES = (
    (re.compile(r"(胸(口|部|前区)?).{0,3}(疼痛|疼|痛|闷|压榨|刺痛|绞痛|闷痛)"), "胸痛"),
    (re.compile(r"(头|头部).{0,3}(疼痛|疼|痛)"), "头痛"),
    (re.compile(r"(肚子|腹|上腹|下腹|右下腹|左下腹|胃).{0,3}(疼痛|疼|痛|胀痛|绞痛|隐痛|刺痛)"), "腹痛"),
    (re.compile(r"(气促|呼吸困难|憋|喘)"), "呼吸困难"),
    (re.compile(r"(心悸|心慌|心跳快|心跳|悸|慌)"), "心悸"),
    (re.compile(r"(咳嗽|咳痰|痰多|咳)"), "咳嗽"),
    (re.compile(r"(发热|发烧|高热)"), "发热"),
    (re.compile(r"(眩晕|头晕|天旋地转|晕)"), "眩晕"),
    (re.compile(r"(腹泻|泻|稀便|水样便|里急后重)"), "腹泻"),
    (re.compile(r"(恶心呕吐|呕吐|恶心)"), "恶心呕吐"),
)


@dataclass(frozen=True)
class SymptomHit:
    index: int
    length: int
    value: str
    source: str   # "known" | "synonym" | "rule"


def _collect_hits(
    text: str,
    known_symptoms: Iterable[str],
    synonyms: Mapping[str, str],
) -> List[SymptomHit]:
    hits: List[SymptomHit] = []

    for name in known_symptoms:
        if not name:
            continue
        idx = text.find(name)
        if idx >= 0:
            hits.append(SymptomHit(idx, len(name), name, "known"))

    for phrase, canonical in synonyms.items():
        if not phrase or not canonical:
            continue
        idx = text.find(phrase)
        if idx >= 0:
            hits.append(SymptomHit(idx, len(phrase), canonical, "synonym"))

    for pattern, canonical in FALLBACK_RULES:
        m = pattern.search(text)
        if m:
            hits.append(SymptomHit(m.start(), len(m.group(0)), canonical, "rule"))

    return hits


def extract_core_symptom(
    text: str,
    known_symptoms: Optional[Iterable[str]] = None,
    synonyms: Optional[Mapping[str, str]] = None,
) -> str:
    """
    Return the canonical symptom that appears earliest in the text
    (longest match on equal index). With no hit at all, the cleaned text
    itself is returned so the caller still has something to display.
    """
    synonyms = synonyms or {}
    t = normalize_complaint_text(text, synonyms)
    if not t:
        return ""

    # sorted() keeps set iteration order out of the tie-break
    hits = _collect_hits(t, sorted(known_symptoms or ()), synonyms)
    if not hits:
        return t
    hits.sort(key=lambda h: (h.index, -h.length))
    return hits[0].value

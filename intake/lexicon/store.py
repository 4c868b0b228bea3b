# intake/lexicon/store.py
from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, FrozenSet, List, Mapping, Optional

import yaml

from intake.config import LEXICON_PATH


class LexiconError(ValueError):
    """Raised when a lexicon file does not have the expected shape."""


@dataclass(frozen=True)
class SymptomLexicon:
    symptom_keys: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}))
    synonyms: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}))
    source: str = ""

    @property
    def known_symptoms(self) -> FrozenSet[str]:
        return frozenset(self.symptom_keys)

    def key_for(self, name: str) -> Optional[str]:
        return self.symptom_keys.get(name)


def _str_mapping(data: Any, section: str) -> Dict[str, str]:
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise LexiconError(f"'{section}' must be a mapping, got {type(data).__name__}")
    return {str(k).strip(): str(v).strip() for k, v in data.items() if k is not None and v is not None}


def parse_lexicon(data: Any, source: str = "") -> SymptomLexicon:
    """Build a lexicon from the parsed YAML document ({symptoms: {...}, synonyms: {...}})."""
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise LexiconError("lexicon document must be a mapping")
    return SymptomLexicon(
        symptom_keys=MappingProxyType(_str_mapping(data.get("symptoms"), "symptoms")),
        synonyms=MappingProxyType(_str_mapping(data.get("synonyms"), "synonyms")),
        source=source,
    )


def load_lexicon(path: Optional[str] = None) -> SymptomLexicon:
    path = path or LEXICON_PATH
    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f)
    return parse_lexicon(data, source=path)


def validate_lexicon(lexicon: SymptomLexicon) -> List[str]:
    """
    Return human-readable problems; an empty list means the lexicon is consistent.
    """
    problems: List[str] = []
    known = lexicon.known_symptoms
    for name, key in lexicon.symptom_keys.items():
        if not name or not key:
            problems.append(f"symptom entry with empty name or key: {name!r} -> {key!r}")
    for phrase, canonical in lexicon.synonyms.items():
        if not phrase or not canonical:
            problems.append(f"synonym with empty phrase or target: {phrase!r} -> {canonical!r}")
            continue
        if canonical not in known:
            problems.append(f"synonym target is not a known symptom: {phrase} -> {canonical}")
        if phrase in known and phrase != canonical:
            problems.append(f"synonym phrase shadows a canonical symptom: {phrase} -> {canonical}")
        if phrase == canonical:
            problems.append(f"synonym maps to itself: {phrase}")
    return problems


# Process-wide cache: reloaded explicitly, never mutated in place
_lexicon: Optional[SymptomLexicon] = None


def get_lexicon() -> SymptomLexicon:
    global _lexicon
    if _lexicon is None:
        _lexicon = load_lexicon()
    return _lexicon


def reload_lexicon(path: Optional[str] = None) -> SymptomLexicon:
    global _lexicon
    _lexicon = load_lexicon(path)
    return _lexicon

#!/usr/bin/env python3
"""
Offline evaluation runner for the chief-complaint parser:
- Loads YAML cases under eval/cases/*.yaml and (optionally) a synthetic grid
- Parses each case in-process, or against /api/chief-complaint/parse
- Computes accuracy, duration-detection P/R/F1 and latency, writes eval/report.json

Usage:
  python eval/run_eval.py                       # YAML cases + synthetic grid, in-process
  python eval/run_eval.py --no-synthetic
  python eval/run_eval.py --base-url http://localhost:8000
"""

import argparse
import glob
import json
import os
from time import perf_counter
from typing import Any, Dict, List, Optional

import httpx
import yaml

from intake.lexicon.store import get_lexicon
from intake.nlu.chief_complaint import parse

CASES_GLOB = os.path.join(os.path.dirname(__file__), "cases", "*.yaml")
TIMEOUT = 8.0
SYNTHETIC_CAP = 240

# ---- case generation ----

SYMPTOM_VARIANTS = [
    ("胸痛", ["胸痛", "胸口疼", "胸部疼痛", "胸口痛"]),
    ("腹痛", ["腹痛", "肚子疼", "胃痛", "上腹痛", "右下腹痛"]),
    ("头痛", ["头痛", "偏头痛", "神经性头痛", "头疼"]),
    ("眩晕", ["眩晕", "头晕", "天旋地转", "晕"]),
    ("发热", ["发热", "发烧", "高热"]),
    ("咳嗽", ["咳嗽", "咳痰", "痰多", "咳"]),
    ("呼吸困难", ["呼吸困难", "气促", "喘", "憋"]),
    ("心悸", ["心悸", "心慌", "心跳快", "慌"]),
    ("腹泻", ["腹泻", "泻", "稀便", "水样便"]),
    ("恶心呕吐", ["恶心呕吐", "恶心与呕吐", "呕吐伴恶心", "恶心后呕吐", "呕吐"]),
]

# (unit, plain form, keyword-case form, spaced form)
UNIT_FORMS = [
    ("minute", "分钟", "分", "min"),
    ("hour", "小时", "时", "h"),
    ("day", "天", "日", "d"),
    ("week", "周", "星期", "w"),
    ("month", "月", "个月", "m"),
    ("year", "年", "年", "y"),
]

RANGE_SEPS = ["-", "～", "至"]

_ROMAN_TABLE = [
    (1000, "M"), (900, "CM"), (500, "D"), (400, "CD"), (100, "C"), (90, "XC"),
    (50, "L"), (40, "XL"), (10, "X"), (9, "IX"), (5, "V"), (4, "IV"), (1, "I"),
]
_CN_DIGITS = "零一二三四五六七八九"


def roman(n: int) -> str:
    out = ""
    for value, symbol in _ROMAN_TABLE:
        while n >= value:
            out += symbol
            n -= value
    return out


def chinese(n: int) -> str:
    if n < 10:
        return _CN_DIGITS[n]
    if n == 10:
        return "十"
    if n < 20:
        return "十" + _CN_DIGITS[n - 10]
    tens, ones = divmod(n, 10)
    return _CN_DIGITS[tens] + "十" + (_CN_DIGITS[ones] if ones else "")


def _number_forms(n: int) -> List[str]:
    return [str(n), chinese(n), roman(n)]


def make_synthetic_cases(cap: int = SYNTHETIC_CAP) -> List[Dict[str, Any]]:
    values = [1, 2, 3, 7, 10, 12]
    lo, hi = 2, 3
    out: List[Dict[str, Any]] = []

    def add(prefix: str, text: str, canonical: str, value: Any, unit: str) -> None:
        out.append({
            "id": f"{prefix}_{len(out) + 1:04d}",
            "text": text,
            "expected": {"complaint_text": canonical, "duration_value": value, "duration_unit": unit},
        })

    for canonical, phrases in SYMPTOM_VARIANTS:
        for phrase in phrases:
            for unit, plain, kw_form, spaced in UNIT_FORMS:
                for n in values:
                    arabic, cn, rn = _number_forms(n)
                    add("single", f"{phrase}{arabic}{plain}", canonical, n, unit)
                    add("kw", f"近{phrase}{cn}{kw_form}", canonical, n, unit)
                    add("space", f"{phrase} {rn} {spaced}", canonical, n, unit)
                for sep in RANGE_SEPS:
                    rng = {"min": lo, "max": hi}
                    add("range", f"{phrase}{lo}{sep}{hi}{plain}", canonical, rng, unit)
                    add("range_mix", f"{phrase}{chinese(lo)}{sep}{roman(hi)}{spaced}", canonical, rng, unit)
                if len(out) >= cap:
                    return out[:cap]
    return out[:cap]


def load_cases(limit: Optional[int] = None) -> List[Dict[str, Any]]:
    paths = sorted(glob.glob(CASES_GLOB))
    cases: List[Dict[str, Any]] = []
    for p in paths:
        with open(p, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or []
            if isinstance(data, list):
                cases.extend(data)
    if limit is not None:
        cases = cases[:limit]
    return cases

# ---- running ----

def parse_local(text: str) -> Dict[str, Any]:
    lex = get_lexicon()
    result = parse(text, synonyms=dict(lex.synonyms), known_symptoms=set(lex.known_symptoms))
    return result.model_dump(mode="json")


def post_parse(client: httpx.Client, base_url: str, text: str) -> Dict[str, Any]:
    url = f"{base_url}/api/chief-complaint/parse"
    r = client.post(url, json={"text": text}, timeout=TIMEOUT)
    if r.status_code == 400:
        return r.json()
    r.raise_for_status()
    return r.json().get("data") or {}


def equal_duration_value(a: Any, b: Any) -> bool:
    if a is None or b is None:
        return a is None and b is None
    if isinstance(a, dict) and isinstance(b, dict):
        return a.get("min") == b.get("min") and a.get("max") == b.get("max")
    if isinstance(a, dict) or isinstance(b, dict):
        return False
    return float(a) == float(b)


def eval_case(got: Dict[str, Any], case: Dict[str, Any], latency_ms: float) -> Dict[str, Any]:
    expected = case["expected"]
    complaint_ok = (got.get("complaint_text") or "") == (expected.get("complaint_text") or "")
    unit_ok = got.get("duration_unit") == expected.get("duration_unit")
    value_ok = equal_duration_value(got.get("duration_value"), expected.get("duration_value"))
    return {
        "id": case["id"],
        "text": case["text"],
        "expected": expected,
        "got": got,
        "complaint_ok": complaint_ok,
        "unit_ok": unit_ok,
        "value_ok": value_ok,
        "exact_ok": complaint_ok and unit_ok and value_ok,
        "expected_duration": bool(expected.get("duration_unit")) and expected.get("duration_value") is not None,
        "got_duration": bool(got.get("duration_unit")) and got.get("duration_value") is not None,
        "latency_ms": latency_ms,
    }


def percentile(sorted_values: List[float], p: float) -> float:
    if not sorted_values:
        return 0.0
    idx = min(len(sorted_values) - 1, max(0, int((p / 100.0) * len(sorted_values))))
    return sorted_values[idx]


def _acc(correct: int, total: int) -> Dict[str, Any]:
    return {"correct": correct, "accuracy": round(100.0 * correct / max(1, total), 2)}


def summarize(results: List[Dict[str, Any]]) -> Dict[str, Any]:
    n = len(results)
    tp = sum(r["expected_duration"] and r["got_duration"] for r in results)
    fp = sum((not r["expected_duration"]) and r["got_duration"] for r in results)
    fn = sum(r["expected_duration"] and not r["got_duration"] for r in results)
    precision = tp / max(1, tp + fp)
    recall = tp / max(1, tp + fn)
    f1 = (2 * precision * recall) / (precision + recall) if (precision + recall) else 0.0

    lat = sorted(r["latency_ms"] for r in results)
    return {
        "total": n,
        "exact_all": _acc(sum(r["exact_ok"] for r in results), n),
        "complaint_text": _acc(sum(r["complaint_ok"] for r in results), n),
        "duration_unit": _acc(sum(r["unit_ok"] for r in results), n),
        "duration_value": _acc(sum(r["value_ok"] for r in results), n),
        "duration_detection": {
            "precision": round(100.0 * precision, 2),
            "recall": round(100.0 * recall, 2),
            "f1": round(100.0 * f1, 2),
        },
        "latency_ms": {
            "avg": round(sum(lat) / max(1, n), 4),
            "p50": round(percentile(lat, 50), 4),
            "p90": round(percentile(lat, 90), 4),
            "p95": round(percentile(lat, 95), 4),
            "p99": round(percentile(lat, 99), 4),
            "max": round(lat[-1], 4) if lat else 0.0,
        },
    }


def run(cases: List[Dict[str, Any]], base_url: Optional[str] = None) -> List[Dict[str, Any]]:
    results: List[Dict[str, Any]] = []
    client = httpx.Client() if base_url else None
    try:
        for c in cases:
            t0 = perf_counter()
            got = post_parse(client, base_url, c["text"]) if client else parse_local(c["text"])
            results.append(eval_case(got, c, (perf_counter() - t0) * 1000.0))
    finally:
        if client is not None:
            client.close()
    return results


def print_failures(results: List[Dict[str, Any]], limit: int = 20) -> None:
    failed = [r for r in results if not r["exact_ok"]]
    for r in failed[:limit]:
        got = r["got"]
        print(f"✗ {r['id']}  {r['text']}  expected={r['expected']}  "
              f"got=({got.get('complaint_text')!r}, {got.get('duration_value')}, {got.get('duration_unit')})")
    if len(failed) > limit:
        print(f"... {len(failed) - limit} more")


def main():
    ap = argparse.ArgumentParser()
    ap.add_argument("--base-url", default=None, help="Evaluate a running server instead of in-process")
    ap.add_argument("--no-synthetic", action="store_true", help="Only run eval/cases/*.yaml")
    ap.add_argument("--cap", type=int, default=SYNTHETIC_CAP)
    ap.add_argument("--out", default=os.path.join(os.path.dirname(__file__), "report.json"))
    args = ap.parse_args()

    cases = load_cases()
    if not args.no_synthetic:
        cases = make_synthetic_cases(args.cap) + cases
    if not cases:
        print("No cases found under eval/cases/*.yaml")
        return

    results = run(cases, base_url=args.base_url)
    summary = summarize(results)
    failures = [r for r in results if not r["exact_ok"]]

    os.makedirs(os.path.dirname(os.path.abspath(args.out)), exist_ok=True)
    with open(args.out, "w", encoding="utf-8") as f:
        json.dump({"summary": summary, "failures": failures[:50]}, f, ensure_ascii=False, indent=2)

    print(json.dumps(summary, ensure_ascii=False, indent=2))
    print_failures(results)
    if failures:
        raise SystemExit(1)

if __name__ == "__main__":
    main()

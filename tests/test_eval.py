from eval.run_eval import (
    chinese, equal_duration_value, load_cases, make_synthetic_cases, percentile, roman, run, summarize,
)

def test_numeral_renderers():
    assert roman(12) == "XII"
    assert roman(1994) == "MCMXCIV"
    assert chinese(3) == "三"
    assert chinese(10) == "十"
    assert chinese(12) == "十二"
    assert chinese(20) == "二十"
    assert chinese(25) == "二十五"

def test_equal_duration_value():
    assert equal_duration_value(None, None)
    assert not equal_duration_value(3, None)
    assert equal_duration_value(3, 3.0)
    assert equal_duration_value({"min": 2, "max": 3}, {"min": 2, "max": 3})
    assert not equal_duration_value({"min": 2, "max": 3}, 3)

def test_synthetic_grid_is_capped():
    cases = make_synthetic_cases(cap=50)
    assert len(cases) == 50
    assert len({c["id"] for c in cases}) == 50
    assert cases[0]["text"] == "胸痛1分钟"
    assert cases[0]["expected"]["duration_unit"] == "minute"

def test_percentile():
    assert percentile([], 50) == 0.0
    assert percentile([1.0, 2.0, 3.0, 4.0], 50) == 3.0
    assert percentile([1.0, 2.0], 99) == 2.0

def test_edge_cases_pass_in_process():
    cases = load_cases()
    assert cases
    results = run(cases)
    failed = [r["id"] for r in results if not r["exact_ok"]]
    assert failed == []
    summary = summarize(results)
    assert summary["total"] == len(cases)
    assert summary["exact_all"]["accuracy"] == 100.0

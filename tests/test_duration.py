import pytest
from intake.nlu.duration import (
    BASE_SCORE, KEYWORD_BOOST, LOCATION_MAX, INTERMITTENT_PENALTY, WORSENING_PENALTY,
    choose_best_candidate, extract_candidates, noise_penalty, remove_duration_span,
    resolve_unit, score_candidate,
)
from intake.nlu.schema import DurationCandidate, DurationRange, DurationUnit as U


def best(text):
    return choose_best_candidate(extract_candidates(text))


@pytest.mark.parametrize("text,value,unit", [
    ("头痛3天", 3, U.DAY),
    ("头痛三天", 3, U.DAY),
    ("头痛III天", 3, U.DAY),
    ("头痛十二天", 12, U.DAY),
    ("头痛1.5天", 1.5, U.DAY),
    ("头痛3日", 3, U.DAY),
    ("腹痛3d", 3, U.DAY),
    ("发热12小时", 12, U.HOUR),
    ("腹痛3h", 3, U.HOUR),
    ("咳嗽2周", 2, U.WEEK),
    ("咳嗽2星期", 2, U.WEEK),
    ("胸痛30分钟", 30, U.MINUTE),
    ("胸痛5min", 5, U.MINUTE),
    ("头晕2个月", 2, U.MONTH),
    ("腹泻半月", 0.5, U.MONTH),
    ("乏力1年", 1, U.YEAR),
    ("乏力2y", 2, U.YEAR),
    ("咳嗽 XII h", 12, U.HOUR),
])
def test_scalar_durations(text, value, unit):
    b = best(text)
    assert b is not None
    assert b.value == value
    assert b.unit == unit
    assert not b.is_range


@pytest.mark.parametrize("text", [
    "头痛2-3天",
    "头痛二至III天",
    "头痛2～3天",
    "头痛2 到 3 天",
    "头痛3~2天",
])
def test_range_durations(text):
    b = best(text)
    assert isinstance(b.value, DurationRange)
    assert (b.value.min, b.value.max) == (2, 3)
    assert b.unit == U.DAY


def test_range_bounds_swapped_at_construction():
    r = DurationRange(min=5, max=1)
    assert (r.min, r.max) == (1, 5)


def test_unparseable_second_number_degrades_to_scalar():
    # IIIIIIV sums to a negative value and is rejected
    b = best("头痛2-IIIIIIV天")
    assert b.value == 2
    assert b.unit == U.DAY


def test_unparseable_first_number_drops_candidate():
    assert extract_candidates("头痛IIIIIIV天") == []


def test_no_duration():
    assert extract_candidates("胸闷气短") == []
    assert choose_best_candidate([]) is None


def test_raw_span_and_offsets():
    [c] = extract_candidates("头晕2个月")
    assert c.raw == "2个月"
    assert (c.start, c.end) == (2, 5)


def test_fullwidth_digits_are_matched():
    b = best("咳嗽３天")
    assert b.value == 3 and b.unit == U.DAY


def test_worsening_span_is_suppressed():
    b = best("反复头晕头痛3年，加重2天")
    assert b.unit == U.YEAR
    assert b.value == 3
    assert b.raw == "3年"


def test_later_span_wins_on_location():
    b = best("头痛3天 发热2天")
    assert b.value == 2


def test_keyword_boost_in_score():
    text = "持续头痛3天"
    assert score_candidate(text, 4, 6, False) == BASE_SCORE + LOCATION_MAX + KEYWORD_BOOST


def test_range_bonus_in_score():
    assert score_candidate("头痛2-3天", 2, 6, True) - score_candidate("头痛2-3天", 2, 6, False) == 10


def test_location_score_decays_with_distance():
    text = "头痛3天" + "x" * 10
    # end=4, distance 10 -> 30 - 5
    assert score_candidate(text, 2, 4, False) == BASE_SCORE + LOCATION_MAX - 5


def test_noise_penalties():
    assert noise_penalty("反复加重3天", 4) == WORSENING_PENALTY
    assert noise_penalty("间断咳嗽3月", 4) == INTERMITTENT_PENALTY
    assert noise_penalty("咳嗽3月", 2) == 0
    # outside the 6-char window
    assert noise_penalty("加重了很久很久的咳嗽3月", 10) == 0


def test_tie_prefers_later_start():
    a = DurationCandidate(start=0, end=2, raw="3天", value=3, unit=U.DAY, score=80)
    b = DurationCandidate(start=5, end=7, raw="2天", value=2, unit=U.DAY, score=80)
    assert choose_best_candidate([a, b]) is b
    assert choose_best_candidate([b, a]) is b


def test_strictly_higher_score_wins():
    a = DurationCandidate(start=0, end=2, raw="3天", value=3, unit=U.DAY, score=81)
    b = DurationCandidate(start=5, end=7, raw="2天", value=2, unit=U.DAY, score=80)
    assert choose_best_candidate([b, a]) is a


@pytest.mark.parametrize("raw,unit", [
    ("分钟", U.MINUTE), ("MIN", U.MINUTE), ("分", U.MINUTE),
    ("小时", U.HOUR), ("hr", U.HOUR), ("H", U.HOUR), ("时", U.HOUR),
    ("天", U.DAY), ("日", U.DAY), ("d", U.DAY),
    ("星期", U.WEEK), ("周", U.WEEK), ("W", U.WEEK),
    ("月", U.MONTH), ("m", U.MONTH),
    ("年", U.YEAR), ("y", U.YEAR),
])
def test_resolve_unit(raw, unit):
    assert resolve_unit(raw) == unit


def test_resolve_unit_unknown():
    assert resolve_unit("") is None
    assert resolve_unit("秒") is None


def test_remove_duration_span_blanks_punctuation():
    assert remove_duration_span("反复头晕头痛3年，加重2天", 6, 8) == "反复头晕头痛 加重2天"
    assert remove_duration_span("主诉：胸口疼III天", 6, 10) == "主诉 胸口疼"


@pytest.mark.parametrize("text", [
    "1" * 20000,
    "头痛" + "9" * 20000 + "天",
    "头痛" + "一" * 5000,
    "I" * 10000 + "x",
    "1-" * 5000,
])
def test_long_runs_do_not_blow_up(text):
    for c in extract_candidates(text):
        assert c.start < c.end

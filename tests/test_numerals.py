import pytest
from intake.nlu.numerals import parse_chinese, parse_number_token, parse_roman

@pytest.mark.parametrize("token,expected", [
    ("3", 3),
    ("12", 12),
    ("1.5", 1.5),
    ("2.0", 2),
    ("III", 3),
    ("iv", 4),
    ("IX", 9),
    ("XII", 12),
    ("MCMXC", 1990),
    ("三", 3),
    ("十", 10),
    ("十二", 12),
    ("二十", 20),
    ("二十五", 25),
    ("一百零五", 105),
    ("两", 2),
    ("半", 0.5),
    ("零", 0),
    ("〇", 0),
])
def test_parse_number_token(token, expected):
    assert parse_number_token(token) == expected

@pytest.mark.parametrize("token", ["", "   ", "abc", "三a", "1.2.3", "ⅲ", "一半"])
def test_unparseable_tokens_return_none(token):
    assert parse_number_token(token) is None

def test_zero_is_distinguishable_from_absence():
    assert parse_number_token("0") == 0
    assert parse_number_token("0") is not None

def test_integral_values_are_ints():
    assert isinstance(parse_number_token("7"), int)
    assert isinstance(parse_number_token("7.0"), int)
    assert isinstance(parse_number_token("七"), int)

def test_roman_rejects_foreign_symbols():
    assert parse_roman("XIZ") is None
    assert parse_roman("") is None

def test_chinese_rejects_mixed_scripts():
    assert parse_chinese("三3") is None
    assert parse_chinese("") is None

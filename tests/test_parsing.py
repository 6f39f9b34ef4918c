from __future__ import annotations

import pytest

from cosirob.protocol.parsing import extract_triple, format_coord, numeric_tokens, round_coord


@pytest.mark.unit
def test_first_three_numbers_win():
    assert extract_triple("OK x=1.5 y=-2 z=0.125 extra=9") == (1.5, -2.0, 0.125)


@pytest.mark.unit
def test_reply_with_fixed_point_text():
    assert extract_triple("pos 10.000 20.000 30.000") == (10.0, 20.0, 30.0)


@pytest.mark.unit
@pytest.mark.parametrize("text", ["no numbers here", "x=1 y=2", "", "ERR"])
def test_too_few_numbers_is_no_match(text):
    assert extract_triple(text) is None


@pytest.mark.unit
def test_extracted_values_are_rounded():
    assert extract_triple("1.23456 -0.0004 7.") == (1.235, 0.0, 7.0)


@pytest.mark.unit
def test_numeric_token_grammar():
    # '+' and exponents are not part of a token
    assert numeric_tokens("a+5 b1e3 -.5") == [5.0, 1.0, 3.0, 5.0]


@pytest.mark.unit
def test_rounding_and_formatting():
    assert round_coord(5.12345) == 5.123
    assert format_coord(10.0) == "10"
    assert format_coord(5.12345) == "5.123"
    assert format_coord(-2.5) == "-2.5"
    assert format_coord(-0.0001) == "0"

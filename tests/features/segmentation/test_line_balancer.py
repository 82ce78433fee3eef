import pytest

from subcast.features.segmentation.service.line_balancer import balance_lines, format_subtitle_text

SAMPLES = [
    "Short line",
    "text that exceeds forty two characters easily",
    "We went to the market, and then we bought some apples",
    "This sentence is long enough that it has to be broken into two lines somewhere",
    "already\nbroken   across   lines with   odd spacing that is quite long indeed",
    "x" * 50,
    "  padded text that goes on and on past the limit of one line  ",
    "",
]


def test_short_text_is_single_line():
    assert balance_lines("  Hello there  ") == "Hello there"


def test_breaks_near_the_middle():
    assert balance_lines("text that exceeds forty two characters easily") == \
        "text that exceeds forty\ntwo characters easily"


def test_prefers_breaking_after_punctuation():
    assert balance_lines("We went to the market, and then we bought some apples") == \
        "We went to the market,\nand then we bought some apples"


def test_unbreakable_text_is_left_alone():
    assert balance_lines("x" * 50) == "x" * 50


def test_rejects_breaks_that_overflow_a_line():
    # Only one space, far from the middle: breaking there would leave a 60-char line
    text = "tiny " + "y" * 60
    assert format_subtitle_text(text) == text


@pytest.mark.parametrize("text", SAMPLES)
def test_balance_is_idempotent(text):
    once = balance_lines(text)
    assert balance_lines(once) == once


@pytest.mark.parametrize("text", SAMPLES)
def test_output_lines_fit_when_broken(text):
    result = balance_lines(text)
    lines = result.split("\n")

    assert len(lines) <= 2
    if len(lines) == 2:
        assert all(len(line) <= 42 for line in lines)


def test_custom_line_length():
    result = balance_lines("one two three four five six", max_chars_per_line=15)
    assert result == "one two three\nfour five six"

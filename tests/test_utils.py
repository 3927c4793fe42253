import math
from datetime import date

import pytest

from plastic_audit.core.utils import is_blank, parse_count, today_iso


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("12", 12),
        ("  7 ", 7),
        ("12 bottles", 12),
        ("3.7", 3),
        ("", 0),
        ("abc", 0),
        ("-4", 0),
        (None, 0),
        (5, 5),
        (-2, 0),
        (5.9, 5),
        (math.nan, 0),
        (math.inf, 0),
        (True, 0),
    ],
)
def test_parse_count(raw, expected):
    assert parse_count(raw) == expected


def test_zero_string_is_not_blank():
    assert is_blank(None)
    assert is_blank("")
    assert not is_blank("0")
    assert not is_blank(0)
    assert not is_blank(False)


def test_today_iso_formats_the_given_date():
    assert today_iso(date(2026, 2, 5)) == "2026-02-05"

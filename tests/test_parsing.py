from datetime import date

import pytest

from family_budget.parsing import (
    pad_amounts,
    pad_flags,
    parse_amount,
    parse_date,
    parse_optional_amount,
    week_index_for_date,
    week_index_for_day,
)


@pytest.mark.parametrize(
    'value, expected',
    [
        ('$1,250.50', 1250.5),
        (' 42 ', 42.0),
        (300, 300.0),
        (None, 0.0),
        ('', 0.0),
        ('abc', 0.0),
        (float('nan'), 0.0),
        (float('inf'), 0.0),
        (True, 0.0),
        ([1, 2], 0.0),
    ],
)
def test_parse_amount(value, expected):
    assert parse_amount(value) == expected


def test_parse_optional_amount_keeps_blank_distinct_from_zero():
    assert parse_optional_amount(None) is None
    assert parse_optional_amount('   ') is None
    assert parse_optional_amount(float('nan')) is None
    assert parse_optional_amount(0) == 0.0
    assert parse_optional_amount('12.5') == 12.5


def test_parse_date_tolerates_bad_input():
    assert parse_date('2025-06-03') == date(2025, 6, 3)
    assert parse_date('2025-06-03T10:00:00Z') == date(2025, 6, 3)
    assert parse_date(date(2025, 1, 2)) == date(2025, 1, 2)
    assert parse_date('06/03/2025') is None
    assert parse_date('2025-02-30') is None
    assert parse_date('') is None
    assert parse_date(20250603) is None


@pytest.mark.parametrize(
    'day, week',
    [(1, 0), (7, 0), (8, 1), (14, 1), (15, 2), (21, 2), (22, 3), (28, 3), (29, 4), (31, 4)],
)
def test_week_banding(day, week):
    assert week_index_for_day(day) == week


def test_week_banding_ignores_month_length():
    assert week_index_for_date('2024-02-29') == 4
    assert week_index_for_date('2025-02-28') == 3
    assert week_index_for_date('2025-09-07') == 0
    assert week_index_for_date('not-a-date') is None


def test_padding_helpers():
    assert pad_amounts([1, '2']) == [1.0, 2.0, 0.0, 0.0, 0.0]
    assert pad_amounts([1, 2, 3, 4, 5, 6]) == [1.0, 2.0, 3.0, 4.0, 5.0]
    assert pad_amounts(None) == [0.0] * 5
    assert pad_flags([1, 0]) == [True, False, False, False, False]
    assert pad_flags('yes') == [False] * 5

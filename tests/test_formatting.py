from family_budget.formatting import (
    escape_dollar_for_markdown,
    format_balance,
    format_currency,
    format_remaining,
)


def test_format_currency():
    assert format_currency(1234.56) == '$1,234.56'
    assert format_currency(-20) == '-$20.00'
    assert format_currency(-0.001) == '$0.00'
    assert format_currency(1234.5, include_sign=False) == '1,234.50'


def test_escape_dollar_for_markdown():
    assert escape_dollar_for_markdown(12) == '\\$12.00'


def test_format_balance_colours():
    assert format_balance(250) == ('$250.00', 'green')
    assert format_balance(-75.5) == ('-$75.50', 'red')
    assert format_balance(-0.0001) == ('$0.00', 'green')


def test_format_remaining():
    assert format_remaining(500) == '-$500.00'
    assert format_remaining(-25) == '+$25.00'
    assert format_remaining(0.0001) == '$0.00'

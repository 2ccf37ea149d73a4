"""Unit tests for parse_duration in durations.py.

Test coverage includes:

1. Valid durations
   - Single and composite tokens, case-insensitive units.
   - Repeated units accumulate instead of overwriting.

2. Additivity
   - Parsing concatenated texts equals the sum of parsing each text.

3. Malformed tokens
   - Missing units, unknown units and non-numeric magnitudes are reported as
     warnings and skipped without aborting the parse.

4. Edge cases
   - Empty input, zero and signed magnitudes.
   - Magnitudes beyond what a timedelta holds saturate instead of overflowing.
"""

import logging
from datetime import timedelta

import pytest

from linkshortener.utils import parse_duration


# -------------------------------
# 1. Valid durations
# -------------------------------


@pytest.mark.parametrize(
    'text, expected',
    [
        ('30m', timedelta(minutes=30)),
        ('2h', timedelta(hours=2)),
        ('1d', timedelta(days=1)),
        ('1d 2h 30m', timedelta(days=1, hours=2, minutes=30)),
        ('  1H\t30M ', timedelta(hours=1, minutes=30)),
        ('1d 1d', timedelta(days=2)),
        ('10m 5m 1h', timedelta(hours=1, minutes=15)),
    ],
)
def test_parse_valid_durations(text, expected):
    """1.1. Valid tokens are summed."""
    parsed = parse_duration(text)

    assert parsed.total == expected
    assert parsed.parsed == len(text.split())
    assert parsed.warnings == ()


# -------------------------------
# 2. Additivity
# -------------------------------


@pytest.mark.parametrize(
    'first, second',
    [
        ('1d', '2h'),
        ('1h 30m', '45m'),
        ('3d', '3d'),
        ('2h', 'bogus'),
    ],
)
def test_parse_is_additive(first, second):
    """2.1. parse(a + ' ' + b) == parse(a) + parse(b)."""
    combined = parse_duration(f'{first} {second}')

    assert combined.total == parse_duration(first).total + parse_duration(second).total


# -------------------------------
# 3. Malformed tokens
# -------------------------------


@pytest.mark.parametrize(
    'text, warning',
    [
        ('15', "Missing unit in duration token '15'."),
        ('5x', "Unknown unit 'x' in duration token '5x'."),
        ('abch', "Non-numeric magnitude 'abc' in duration token 'abch'."),
        ('h', "Non-numeric magnitude '' in duration token 'h'."),
        ('1.5h', "Non-numeric magnitude '1.5' in duration token '1.5h'."),
        ('٣h', "Non-numeric magnitude '٣' in duration token '٣h'."),
    ],
)
def test_parse_reports_malformed_tokens(text, warning):
    """3.1. Each malformed token yields one warning and contributes nothing."""
    parsed = parse_duration(text)

    assert parsed.total == timedelta(0)
    assert parsed.parsed == 0
    assert parsed.warnings == (warning,)


def test_parse_keeps_valid_tokens_next_to_malformed_ones(caplog):
    """3.2. Malformed tokens are skipped and logged, valid ones still count."""
    with caplog.at_level(logging.WARNING, logger='linkshortener.utils.durations'):
        parsed = parse_duration('1h 5x 30m')

    assert parsed.total == timedelta(hours=1, minutes=30)
    assert parsed.parsed == 2
    assert len(parsed.warnings) == 1
    assert "Unknown unit 'x'" in caplog.text


# -------------------------------
# 4. Edge cases
# -------------------------------


@pytest.mark.parametrize('text', ['', '   '])
def test_parse_empty_text(text):
    """4.1. Empty text parses to a zero duration without warnings."""
    parsed = parse_duration(text)

    assert parsed.total == timedelta(0)
    assert parsed.parsed == 0
    assert parsed.warnings == ()


@pytest.mark.parametrize(
    'text, expected',
    [
        ('0m', timedelta(0)),
        ('-30m', timedelta(minutes=-30)),
        ('+2h -30m', timedelta(hours=1, minutes=30)),
    ],
)
def test_parse_zero_and_signed_magnitudes(text, expected):
    """4.2. Zero and signed magnitudes parse; rejecting them is up to the caller."""
    parsed = parse_duration(text)

    assert parsed.total == expected
    assert parsed.warnings == ()


@pytest.mark.parametrize(
    'text, expected',
    [
        ('1000000000d', timedelta.max.days),
        ('999999999d 999999999d', timedelta.max.days),
        ('-1000000000d', timedelta.min.days),
    ],
)
def test_parse_saturates_huge_magnitudes(text, expected):
    """4.3. Huge magnitudes saturate at the timedelta range instead of overflowing."""
    parsed = parse_duration(text)

    assert parsed.total.days == expected
    assert parsed.parsed == len(text.split())
    assert parsed.warnings == ()

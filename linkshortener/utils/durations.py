"""Human-readable duration parsing

Durations are written as whitespace-separated `<integer><unit>` tokens, where
the unit is one of `d` (days), `h` (hours) or `m` (minutes):

    "1d 2h 30m"  -> 1 day, 2 hours, 30 minutes
    "1d 1d"      -> 2 days (repeated units accumulate)

Malformed tokens never abort parsing. Each one is reported as a warning and
skipped, and the result is the sum of every token that did parse. Deciding
whether the total is acceptable (e.g. rejecting zero) is left to the caller.

Example:
    >>> parsed = parse_duration('1h 30m 5x')
    >>> parsed.total
    datetime.timedelta(seconds=5400)
    >>> parsed.warnings
    ("Unknown unit 'x' in duration token '5x'.",)
"""

import logging
import re
from dataclasses import dataclass
from datetime import timedelta

from beartype import beartype


logger = logging.getLogger(__name__)

UNIT_SECONDS = {
    'd': 86_400,  # 60 * 60 * 24
    'h': 3_600,  # 60 * 60
    'm': 60,
}

_MAGNITUDE = re.compile(r'[+-]?\d+', re.ASCII)

# Largest magnitude a timedelta can hold. Sums beyond it saturate.
_MAX_SECONDS = timedelta.max // timedelta(seconds=1)


@dataclass(frozen=True)
class ParsedDuration:
    total: timedelta
    parsed: int = 0  # number of tokens which contributed to `total`
    warnings: tuple[str, ...] = ()


@beartype
def parse_duration(text: str) -> ParsedDuration:
    """Parse a composite duration such as "1d 2h 30m".

    Args:
        text (str):
            Whitespace-separated duration tokens.

    Returns:
        ParsedDuration:
            Sum of all valid tokens, the count of valid tokens and one warning
            per rejected token.
    """
    seconds = 0
    parsed = 0
    warnings = []

    for token in text.split():
        unit = token[-1].lower()
        magnitude = token[:-1]

        if not token[-1].isalpha():
            warnings.append(f"Missing unit in duration token '{token}'.")
        elif unit not in UNIT_SECONDS:
            warnings.append(f"Unknown unit '{token[-1]}' in duration token '{token}'.")
        elif not _MAGNITUDE.fullmatch(magnitude):
            warnings.append(f"Non-numeric magnitude '{magnitude}' in duration token '{token}'.")
        else:
            seconds += int(magnitude) * UNIT_SECONDS[unit]
            parsed += 1

    for warning in warnings:
        logger.warning(warning, extra={'duration_text': text})

    seconds = max(-_MAX_SECONDS, min(seconds, _MAX_SECONDS))
    return ParsedDuration(total=timedelta(seconds=seconds), parsed=parsed, warnings=tuple(warnings))

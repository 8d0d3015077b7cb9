"""
Reading and writing citation counts in a record's ``extra`` field.

Counts are stored one per source as ``<count> citations (<source>) [<date>]``
lines at the top of ``extra``; all other lines are left untouched.
"""

import re
from datetime import date

# Lines the count column reads back, in either the current or legacy format
_STORED_COUNT_PATTERN = re.compile(r'^Citations:|^\d+ citations', re.IGNORECASE)
_LEADING_DIGITS = re.compile(r'^\d+')

NO_COUNT = '-'


def format_count_line(source: str, count: int, today: date | None = None) -> str:
    stamp = (today or date.today()).isoformat()
    return f'{count} citations ({source}) [{stamp}]'


def _source_line_pattern(source: str) -> re.Pattern[str]:
    escaped = re.escape(source)
    return re.compile(
        rf'^Citations \({escaped}\):|^\d+ citations \({escaped}\)', re.IGNORECASE
    )


def set_citation_count(
    extra: str, source: str, count: int, today: date | None = None
) -> str:
    """
    Merge a new count for ``source`` into ``extra``.

    Any earlier line for the same source is removed, in the current
    ``N citations (source)`` format or the older ``Citations (source):`` one,
    and the new line is prepended. Lines for other sources and free text stay
    in their original order.

    Args:
        extra: Current contents of the extra field (may be empty)
        source: Source label, e.g. ``'Crossref/DOI'``
        count: Non-negative citation count
        today: Date stamp to write, defaults to the current date

    Returns:
        str: The new extra field contents
    """
    pattern = _source_line_pattern(source)
    kept = [line for line in extra.split('\n') if not pattern.search(line)] if extra else []
    return '\n'.join([format_count_line(source, count, today), *kept])


def get_citation_count(extra: str) -> str:
    """Return the stored count shown for a record, or ``'-'`` if none."""
    for line in (extra or '').split('\n'):
        if _STORED_COUNT_PATTERN.match(line):
            match = _LEADING_DIGITS.match(line)
            return match.group(0) if match else NO_COUNT
    return NO_COUNT

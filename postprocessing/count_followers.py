"""
Follower frequency table.

Term-keyed label tables are curated by hand from a frequency list of follower
phrases: each line is `count<TAB>term`, and the curator appends a label
column. This module produces that list from a follower output file.
"""

from collections import Counter
from typing import Iterable, List, Tuple

from kwicextract import rows


def count_followers(
    lines: Iterable[str],
    separator: str = "\t",
    term_column: int = rows.FOLLOWER_TERM_COLUMN,
    has_header: bool = True,
) -> List[Tuple[int, str]]:
    """
    Count follower phrases, most frequent first and ties broken by term.

    Rows with an empty phrase are not counted.
    """
    counts: Counter = Counter()
    for line_number, line in enumerate(lines, start=1):
        if has_header and line_number == 1:
            continue
        fields = rows.split_row(line, separator)
        if len(fields) <= term_column:
            continue
        term = fields[term_column].strip()
        if term:
            counts[term] += 1
    return sorted(((n, term) for term, n in counts.items()), key=lambda item: (-item[0], item[1]))


def format_counts(counts: Iterable[Tuple[int, str]], separator: str = "\t") -> Iterable[str]:
    """Render (count, term) pairs as label-table lines without a header."""
    for n, term in counts:
        yield rows.format_row([n, term], separator)

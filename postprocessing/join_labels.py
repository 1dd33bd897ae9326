"""
Classification join of label tables onto extracted rows.

Two key schemes are supported:

- term-keyed: label lines are `count, term, label` without header and the
  key is one column of the primary file (normally the follower phrase);
- composite-keyed: label lines are the follower row plus a label column,
  with a header, and the key is the (record id, case match counter) pair.

The label table is built once, in one pass, and duplicate keys simply
overwrite earlier ones. The primary file is then streamed exactly once, so
memory use depends on the label table only.
"""

import logging
from typing import Callable, Dict, Hashable, Iterable, Iterator, List, Optional, Sequence

from kwicextract import data
from kwicextract import rows

logger = logging.getLogger(__name__)

KeyFunction = Callable[[Sequence[str]], Optional[Hashable]]

TERM_COLUMNS = ("label",)
COMPOSITE_COLUMNS = ("label", "original_follower")

# Column layout of a composite label table (follower row + label).
_COMPOSITE_ID = rows.FOLLOWER_HEADER.index("id")
_COMPOSITE_CASE_MATCH = rows.FOLLOWER_HEADER.index("case_match")
_COMPOSITE_FOLLOWER = rows.FOLLOWER_HEADER.index("follower")
_COMPOSITE_LABEL = len(rows.FOLLOWER_HEADER)


def load_term_labels(
    sources: Iterable[Iterable[str]],
    separator: str = "\t",
    table: Optional[data.LabelTable] = None,
) -> data.LabelTable:
    """
    Build a term -> label table from `count, term, label` lines.

    Args:
        sources: One iterable of lines per label file, applied in order
        separator: Field separator
        table: Existing table to extend; a new one is created if omitted

    Returns:
        The label table; later lines win on duplicate terms
    """
    table = table if table is not None else data.LabelTable()
    for source in sources:
        for line_number, line in enumerate(source, start=1):
            fields = rows.split_row(line, separator)
            if len(fields) < 3:
                if line.strip():
                    logger.warning("Label line %d has %d fields, skipped", line_number, len(fields))
                continue
            table.add(fields[1], data.LabelEntry(label=fields[2]))
    _log_table(table, "term")
    return table


def load_composite_labels(
    sources: Iterable[Iterable[str]],
    separator: str = "\t",
    table: Optional[data.LabelTable] = None,
) -> data.LabelTable:
    """
    Build a (record id, case match) -> (label, follower) table.

    Each source starts with a header line, which is skipped.

    Args:
        sources: One iterable of lines per label file, applied in order
        separator: Field separator
        table: Existing table to extend; a new one is created if omitted

    Returns:
        The label table; later lines win on duplicate keys
    """
    table = table if table is not None else data.LabelTable()
    for source in sources:
        for line_number, line in enumerate(source, start=1):
            if line_number == 1:
                continue
            fields = rows.split_row(line, separator)
            if len(fields) <= _COMPOSITE_LABEL:
                if line.strip():
                    logger.warning("Label line %d has %d fields, skipped", line_number, len(fields))
                continue
            key = (fields[_COMPOSITE_ID].strip(), fields[_COMPOSITE_CASE_MATCH].strip())
            table.add(
                key,
                data.LabelEntry(label=fields[_COMPOSITE_LABEL], secondary=fields[_COMPOSITE_FOLLOWER]),
            )
    _log_table(table, "composite")
    return table


def _log_table(table: data.LabelTable, scheme: str) -> None:
    logger.info("Loaded %d %s labels (%d overwritten)", len(table), scheme, table.overwrites)


def term_key(column: int) -> KeyFunction:
    """Key function reading the literal value of one column."""
    def key(fields: Sequence[str]) -> Optional[Hashable]:
        return fields[column] if len(fields) > column else None
    return key


def composite_key(
    id_column: int = rows.PRIMARY_ID_COLUMN,
    match_column: int = rows.PRIMARY_CASE_MATCH_COLUMN,
) -> KeyFunction:
    """Key function reading the (record id, case match) pair."""
    def key(fields: Sequence[str]) -> Optional[Hashable]:
        if len(fields) <= max(id_column, match_column):
            return None
        return (fields[id_column].strip(), fields[match_column].strip())
    return key


def _entry_values(entry: Optional[data.LabelEntry], width: int) -> List[str]:
    if entry is None:
        return [""] * width
    values = [entry.label, entry.secondary or ""]
    return values[:width]


def join_labels(
    lines: Iterable[str],
    table: data.LabelTable,
    key_fn: KeyFunction,
    new_columns: Sequence[str] = TERM_COLUMNS,
    separator: str = "\t",
    has_header: bool = True,
    stats: Optional[Dict[str, int]] = None,
) -> Iterator[str]:
    """
    Append looked-up labels to every line of a primary file.

    Args:
        lines: Lines of the primary file
        table: Label table from load_term_labels or load_composite_labels
        key_fn: Builds the join key from a split line, None when unavailable
        new_columns: Names of the appended columns
        separator: Field separator
        has_header: Whether the first line is a header
        stats: Optional dict receiving "matched" and "unmatched" counts

    Yields:
        Output lines; the header gets the column names, unresolved keys get
        empty values
    """
    stats = stats if stats is not None else {}
    stats.setdefault("matched", 0)
    stats.setdefault("unmatched", 0)
    for line_number, line in enumerate(lines, start=1):
        body = line.rstrip("\r\n")
        if has_header and line_number == 1:
            yield separator.join([body, *new_columns]) + "\n"
            continue
        key = key_fn(body.split(separator))
        entry = table.lookup(key) if key is not None else None
        stats["matched" if entry is not None else "unmatched"] += 1
        yield separator.join([body, *_entry_values(entry, len(new_columns))]) + "\n"

"""
Follower phrase extraction for kwicextract.

The follower phrase of a match is the short stretch of words right after it,
up to and including the first noun, e.g. "commerce clause" in
"... the interstate commerce/NN clause/NN of the ...". It is read from the
tagged "after" field of the primary output rows.
"""

import logging
import re
from typing import Iterable, Iterator, List, Optional

from kwicextract import data
from kwicextract import exceptions
from kwicextract import rows
from kwicextract.realign import split_tagged_token

logger = logging.getLogger(__name__)

_DISALLOWED_CHARS = re.compile(r"[^A-Za-z0-9\s-]")

# Primary row columns copied into the follower row, in output order.
_KEY_COLUMNS = tuple(
    rows.PRIMARY_HEADER.index(name)
    for name in ("id", "opinion_type", "opinion_number", "case_match", "opinion_match")
)


def extract_follower(tagged_after: str, noun_prefix: str = "NN") -> str:
    """
    Collect words from a tagged "after" field up to the first noun, inclusive.

    Args:
        tagged_after: Space separated `word/TAG` tokens
        noun_prefix: Tag prefix identifying nouns (NN matches NN, NNS, NNP, ...)

    Returns:
        The follower phrase with every character other than letters, digits,
        whitespace and hyphens removed. Without any noun the whole field is
        used; an empty field gives an empty phrase.
    """
    words: List[str] = []
    for token in tagged_after.split():
        word, tag = split_tagged_token(token)
        words.append(word)
        if tag.startswith(noun_prefix):
            break
    return _DISALLOWED_CHARS.sub("", " ".join(words)).strip()


def iter_follower_records(
    lines: Iterable[str],
    separator: str = "\t",
    noun_prefix: str = "NN",
    has_header: bool = True,
    on_error: Optional[exceptions.ErrorChannel] = None,
) -> Iterator[data.FollowerRecord]:
    """
    Turn primary output rows into follower records.

    Args:
        lines: Lines of a primary output file
        separator: Field separator
        noun_prefix: Tag prefix identifying nouns
        has_header: Whether the first line is a header to skip
        on_error: Error channel for rows too short to carry the key columns

    Yields:
        One FollowerRecord per data row, in input order
    """
    needed = max(_KEY_COLUMNS) + 1
    for line_number, line in enumerate(lines, start=1):
        if has_header and line_number == 1:
            continue
        fields = rows.split_row(line, separator)
        if len(fields) < needed:
            error = exceptions.MissingFieldError(line_number, "case_match")
            if on_error is not None:
                on_error(error)
            else:
                logger.warning("%s", error)
            continue
        after = fields[rows.PRIMARY_AFTER_COLUMN] if len(fields) > rows.PRIMARY_AFTER_COLUMN else ""
        record_id, doc_type, ordinal, record_match, subdoc_match = (
            fields[i] for i in _KEY_COLUMNS
        )
        yield data.FollowerRecord(
            record_id=record_id,
            doc_type=doc_type,
            ordinal=ordinal,
            record_match=record_match,
            subdoc_match=subdoc_match,
            follower=extract_follower(after, noun_prefix),
        )

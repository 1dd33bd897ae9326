# Copyright 2025 Google LLC.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""Keyword-in-context window extraction.

A sub-document's lower-cased text is cut by the search pattern into an
alternating sequence of segments:

  non-match, match, non-match, match, ..., non-match

Every match is paired with the last `width` words of the segment in front of
it and the first `width` words of the segment behind it. Near the start or
end of the text fewer words are used; windows are never padded.

  >>> pattern = compile_pattern("fox")
  >>> counters = data.MatchCounters()
  >>> doc = data.SubDocument(1, None, "the quick brown fox jumps over")
  >>> [w.before for w in extract_windows(doc, pattern, counters, "a", width=2)]
  ['quick brown']

Word boundaries: the pattern is wrapped in `\\b...\\b`. `realign` builds its
re-split pattern with the same anchoring, so both stages agree on where a
match starts and ends.
"""

from __future__ import annotations

from collections.abc import Iterator

from absl import logging
import regex

from kwicextract import data
from kwicextract import exceptions

DEFAULT_CONTEXT_WIDTH = 5

_REGEX_FLAGS = regex.VERSION0 | regex.IGNORECASE


def compile_pattern(term: str, is_regex: bool = False) -> regex.Pattern:
  """Compiles a literal word or a user regular expression, word-bounded.

  Args:
    term: The literal search term, or a regular expression if `is_regex`.
    is_regex: Whether `term` is a regular expression.

  Returns:
    A compiled case-insensitive pattern anchored on word boundaries.

  Raises:
    PatternError: If the term is empty or is not a valid expression.
  """
  if not term or not term.strip():
    raise exceptions.PatternError("Search pattern must not be empty")
  if is_regex:
    body = term
  else:
    # Words of a literal may be separated by any run of whitespace.
    body = r"\s+".join(regex.escape(word) for word in term.lower().split())
  try:
    return regex.compile(rf"\b(?:{body})\b", _REGEX_FLAGS)
  except regex.error as e:
    raise exceptions.PatternError(f"Invalid search pattern {term!r}: {e}") from e


def split_on_matches(text: str, pattern: regex.Pattern) -> list[str]:
  """Splits text into [non-match, match, non-match, ..., non-match].

  The result always has odd length; element 2k+1 is the k-th match. Empty
  matches are ignored.
  """
  parts = []
  last_end = 0
  for found in pattern.finditer(text):
    if found.start() == found.end():
      continue
    parts.append(text[last_end : found.start()])
    parts.append(found.group())
    last_end = found.end()
  parts.append(text[last_end:])
  return parts


def extract_windows(
    subdocument: data.SubDocument,
    pattern: regex.Pattern,
    counters: data.MatchCounters,
    record_id: str,
    width: int = DEFAULT_CONTEXT_WIDTH,
) -> list[data.Window]:
  """Extracts every KWIC window of one sub-document.

  `counters` belongs to the caller and is shared by all sub-documents of one
  record: the sub-document counter is reset here, the record counter keeps
  growing across calls.

  Args:
    subdocument: The sub-document to scan.
    pattern: Pattern from `compile_pattern`.
    counters: The record's counters, updated in place.
    record_id: Id of the record owning `subdocument`.
    width: Number of context words on each side.

  Returns:
    The windows in text order.
  """
  counters.start_subdocument()
  parts = split_on_matches(subdocument.text.lower(), pattern)
  if len(parts) == 1:
    return []

  windows = []
  before = parts[0].split()[-width:] if width else []
  for i in range(1, len(parts), 2):
    following = parts[i + 1].split()
    record_match, subdoc_match = counters.count_match()
    windows.append(
        data.Window(
            record_id=record_id,
            doc_type=subdocument.doc_type,
            ordinal=subdocument.ordinal,
            record_match=record_match,
            subdoc_match=subdoc_match,
            before=" ".join(before),
            match=" ".join(parts[i].split()),
            after=" ".join(following[:width]),
        )
    )
    before = following[-width:] if width else []
  return windows


def extract_record_windows(
    record: data.Record,
    pattern: regex.Pattern,
    width: int = DEFAULT_CONTEXT_WIDTH,
    on_error: exceptions.ErrorChannel | None = None,
) -> Iterator[data.Window]:
  """Yields the windows of every sub-document of a record, in order.

  Sub-documents without text are reported as `MissingFieldError` (keyed by
  record id and ordinal) and skipped; they do not touch the record counter.
  """
  counters = data.MatchCounters()
  for subdocument in record.subdocuments:
    if not subdocument.text.strip():
      if on_error is not None:
        on_error(
            exceptions.MissingFieldError(
                subdocument.ordinal, "text", record_id=record.record_id
            )
        )
      continue
    yield from extract_windows(
        subdocument, pattern, counters, record.record_id, width=width
    )
  if counters.record_matches:
    logging.debug(
        "Record %s: %d matches", record.record_id, counters.record_matches
    )

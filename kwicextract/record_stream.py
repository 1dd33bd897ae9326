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

"""Incremental parsing of a stream of concatenated JSON records.

The corpus is a sequence of JSON objects written one after another with no
wrapping array, either one dense object per line or pretty-printed over many
lines. It is far too large to load at once, so `RecordStreamParser` is fed
chunks (normally lines) and hands back each object as soon as its outermost
closing brace balances. Only the currently open object is buffered.

Example:
  >>> parser = RecordStreamParser()
  >>> parser.feed('{"id": "a"} {"id": ')
  [{'id': 'a'}]
  >>> parser.feed('"b"}')
  [{'id': 'b'}]
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
import json
import re
from typing import Any

from absl import logging

from kwicextract import data
from kwicextract import exceptions
from preprocessing import normalize_text

# Characters that change the scanner state outside / inside a JSON string.
_STRUCTURAL_PATTERN = re.compile(r'[{}"]')
_STRING_SPECIAL_PATTERN = re.compile(r'["\\]')

# Tolerated between records: whitespace, separators of an array-ish dump.
_BETWEEN_RECORDS = frozenset(",[]")


def log_error(error: exceptions.KwicExtractError) -> None:
  """Default error channel: report and carry on."""
  logging.warning("%s", error)


class RecordStreamParser:
  """Accumulates chunks and emits every JSON object that completes.

  The scanner keeps three pieces of state across chunks: the brace depth,
  whether it is inside a string literal and whether the previous character
  was a backslash inside a string. Braces inside strings never count.
  """

  def __init__(self, on_error: exceptions.ErrorChannel | None = None):
    self._on_error = on_error or log_error
    self._pieces: list[str] = []
    self._depth = 0
    self._in_string = False
    self._escape = False
    self._position = 0
    self._start_position = 0

  @property
  def pending(self) -> bool:
    """True while a partially read object is buffered."""
    return self._depth > 0

  def feed(self, chunk: str, position: int | None = None) -> list[dict[str, Any]]:
    """Consumes one chunk and returns the objects it completed.

    Args:
      chunk: The next piece of the stream.
      position: 1-based position of the chunk used in error reports. Defaults
        to a running count of fed chunks.

    Returns:
      The decoded objects whose closing brace was found in this chunk, in
      stream order.
    """
    self._position = position if position is not None else self._position + 1
    completed = []
    obj_start = 0 if self._depth > 0 else None
    i = 0
    n = len(chunk)

    while i < n:
      if self._depth == 0:
        ch = chunk[i]
        if ch.isspace() or ch in _BETWEEN_RECORDS:
          i += 1
          continue
        if ch == "{":
          self._depth = 1
          self._start_position = self._position
          obj_start = i
          i += 1
          continue
        self._on_error(
            exceptions.RecordParseError(
                self._position,
                f"unexpected {ch!r} outside of a record, rest of chunk"
                " skipped",
            )
        )
        return completed

      if self._in_string:
        if self._escape:
          self._escape = False
          i += 1
          continue
        found = _STRING_SPECIAL_PATTERN.search(chunk, i)
        if found is None:
          i = n
          continue
        i = found.end()
        if found.group() == "\\":
          self._escape = True
        else:
          self._in_string = False
        continue

      found = _STRUCTURAL_PATTERN.search(chunk, i)
      if found is None:
        i = n
        continue
      i = found.end()
      ch = found.group()
      if ch == '"':
        self._in_string = True
      elif ch == "{":
        self._depth += 1
      else:
        self._depth -= 1
        if self._depth == 0:
          self._pieces.append(chunk[obj_start:i])
          obj_start = None
          decoded = self._decode_pending()
          if decoded is not None:
            completed.append(decoded)

    if self._depth > 0 and obj_start is not None:
      self._pieces.append(chunk[obj_start:])
    return completed

  def close(self) -> None:
    """Signals end of stream, reporting an unterminated object if any."""
    if self._depth > 0:
      self._on_error(
          exceptions.RecordParseError(
              self._start_position,
              "stream ended inside an unterminated record",
          )
      )
    self._reset()

  def _decode_pending(self) -> dict[str, Any] | None:
    text = "".join(self._pieces)
    self._pieces.clear()
    try:
      return json.loads(text)
    except json.JSONDecodeError as e:
      self._on_error(
          exceptions.RecordParseError(
              self._start_position, f"invalid record: {e.msg}"
          )
      )
      return None

  def _reset(self) -> None:
    self._pieces.clear()
    self._depth = 0
    self._in_string = False
    self._escape = False


def iter_raw_objects(
    lines: Iterable[str],
    on_error: exceptions.ErrorChannel | None = None,
) -> Iterator[dict[str, Any]]:
  """Yields every decoded object of a line stream, in order."""
  parser = RecordStreamParser(on_error=on_error)
  for position, line in enumerate(lines, start=1):
    yield from parser.feed(line, position)
  parser.close()


def _first_citation(citations: Any) -> str:
  if not isinstance(citations, list) or not citations:
    return ""
  first = citations[0]
  if isinstance(first, Mapping):
    return str(first.get("cite") or "")
  return str(first)


def _find_opinions(obj: Mapping[str, Any]) -> list[Any]:
  casebody = obj.get("casebody")
  if isinstance(casebody, Mapping):
    body = casebody.get("data")
    if isinstance(body, Mapping) and isinstance(body.get("opinions"), list):
      return body["opinions"]
    if isinstance(casebody.get("opinions"), list):
      return casebody["opinions"]
  opinions = obj.get("opinions")
  return opinions if isinstance(opinions, list) else []


def _text(value: Any) -> str:
  if value is None:
    return ""
  return normalize_text.normalize_text(str(value))


def record_from_json(obj: Mapping[str, Any]) -> data.Record:
  """Builds a normalized `Record` from one decoded corpus object.

  Args:
    obj: A case object with `id`, `name_abbreviation`, `name`,
      `decision_date`, `citations`, `court` and `casebody.data.opinions`.

  Returns:
    The record with every text field normalized. Sub-document ordinals are
    assigned in the order the opinions appear.
  """
  court = obj.get("court")
  if not isinstance(court, Mapping):
    court = {}

  subdocuments = []
  for opinion in _find_opinions(obj):
    if not isinstance(opinion, Mapping):
      continue
    doc_type = opinion.get("type")
    subdocuments.append(
        data.SubDocument(
            ordinal=len(subdocuments) + 1,
            doc_type=_text(doc_type) if doc_type is not None else None,
            text=_text(opinion.get("text")),
        )
    )

  return data.Record(
      record_id=str(obj.get("id", "")),
      short_title=_text(obj.get("name_abbreviation")),
      long_title=_text(obj.get("name")),
      citation=_text(_first_citation(obj.get("citations"))),
      date=_text(obj.get("decision_date")),
      court_name=_text(court.get("name_abbreviation") or court.get("name")),
      court_slug=_text(court.get("slug")),
      subdocuments=tuple(subdocuments),
  )


def iter_records(
    lines: Iterable[str],
    on_error: exceptions.ErrorChannel | None = None,
) -> Iterator[data.Record]:
  """Parses a line stream of JSON case objects into records."""
  for obj in iter_raw_objects(lines, on_error=on_error):
    yield record_from_json(obj)


def iter_tabular_records(
    lines: Iterable[str],
    text_column: int,
    id_column: int = 0,
    separator: str = "\t",
    has_header: bool = True,
    on_error: exceptions.ErrorChannel | None = None,
) -> Iterator[data.Record]:
  """Reads a delimited file whose `text_column` holds the text to scan.

  Every line becomes a record with a single untyped sub-document. Lines whose
  text field is empty or missing are reported as `MissingFieldError` and
  skipped.

  Args:
    lines: The delimited input lines.
    text_column: 0-based index of the column to scan.
    id_column: 0-based index of the record id column. Lines that are too short
      to carry an id use their line number.
    separator: Field separator.
    has_header: Whether the first line is a header to skip.
    on_error: Error channel for skipped rows.

  Yields:
    One record per usable line.
  """
  on_error = on_error or log_error
  for line_number, line in enumerate(lines, start=1):
    if has_header and line_number == 1:
      continue
    fields = line.rstrip("\r\n").split(separator)
    text = fields[text_column] if len(fields) > text_column else ""
    if not text.strip():
      on_error(exceptions.MissingFieldError(line_number, text_column))
      continue
    record_id = fields[id_column] if len(fields) > id_column else str(line_number)
    yield data.Record(
        record_id=record_id,
        subdocuments=(
            data.SubDocument(ordinal=1, doc_type=None, text=_text(text)),
        ),
    )

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

"""Delimited output rows of the extraction and follower stages."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Final

from kwicextract import data

PRIMARY_HEADER: Final[tuple[str, ...]] = (
    "id",
    "title",
    "citation",
    "date",
    "court",
    "court_slug",
    "opinion_count",
    "opinion_type",
    "opinion_number",
    "case_match",
    "opinion_match",
    "before",
    "match",
    "after",
)

FOLLOWER_HEADER: Final[tuple[str, ...]] = (
    "id",
    "opinion_type",
    "opinion_number",
    "case_match",
    "opinion_match",
    "follower",
)

# 0-based columns of the primary row read by the downstream stages.
PRIMARY_ID_COLUMN: Final[int] = PRIMARY_HEADER.index("id")
PRIMARY_CASE_MATCH_COLUMN: Final[int] = PRIMARY_HEADER.index("case_match")
PRIMARY_AFTER_COLUMN: Final[int] = PRIMARY_HEADER.index("after")
FOLLOWER_TERM_COLUMN: Final[int] = FOLLOWER_HEADER.index("follower")


def clean_field(value: object, separator: str = "\t") -> str:
  """Renders a value as one field: separators and line breaks become spaces."""
  if value is None:
    return ""
  text = str(value)
  for ch in (separator, "\r", "\n"):
    text = text.replace(ch, " ")
  return text


def format_row(values: Sequence[object], separator: str = "\t") -> str:
  """Joins values into one newline-terminated line."""
  return separator.join(clean_field(v, separator) for v in values) + "\n"


def primary_row(
    record: data.Record,
    tagged: data.TaggedWindow,
    long_titles: bool = False,
    long_dates: bool = False,
) -> list[object]:
  """Builds the values of one primary output row."""
  window = tagged.window
  return [
      record.record_id,
      record.title(long_titles),
      record.citation,
      record.date_text(long_dates),
      record.court_name,
      record.court_slug,
      record.subdocument_count,
      window.doc_type,
      window.ordinal,
      window.record_match,
      window.subdoc_match,
      tagged.tagged_before,
      tagged.tagged_match,
      tagged.tagged_after,
  ]


def split_row(line: str, separator: str = "\t") -> list[str]:
  """Splits one delimited line, dropping its line terminator."""
  return line.rstrip("\r\n").split(separator)

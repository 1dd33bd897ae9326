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

"""Classes used to represent records, KWIC windows and label tables."""

from __future__ import annotations

from collections.abc import Hashable, Iterator
import dataclasses

_YEAR_LENGTH = 4


@dataclasses.dataclass(frozen=True)
class SubDocument:
  """One text body within a record, e.g. one opinion of a case.

  Attributes:
    ordinal: 1-based position in the order the sub-documents were read.
    doc_type: Type label such as "majority" or "dissent", may be None.
    text: The (normalized) text body.
  """

  ordinal: int
  doc_type: str | None
  text: str


@dataclasses.dataclass(frozen=True)
class Record:
  """One top-level unit of the corpus, e.g. one case.

  Attributes:
    record_id: Unique identifier of the record.
    short_title: Abbreviated title.
    long_title: Full title.
    citation: Citation string of the first citation.
    date: Decision date, full or already truncated to a year.
    court_name: Short name of the court.
    court_slug: Identifier slug of the court.
    subdocuments: Ordered sub-documents owned by this record.
  """

  record_id: str
  short_title: str = ""
  long_title: str = ""
  citation: str = ""
  date: str = ""
  court_name: str = ""
  court_slug: str = ""
  subdocuments: tuple[SubDocument, ...] = ()

  @property
  def subdocument_count(self) -> int:
    return len(self.subdocuments)

  def title(self, long_titles: bool = False) -> str:
    if long_titles:
      return self.long_title or self.short_title
    return self.short_title or self.long_title

  def date_text(self, long_dates: bool = False) -> str:
    """Returns the full date, or only its leading year when `long_dates` is off."""
    if long_dates:
      return self.date
    return self.date[:_YEAR_LENGTH]


@dataclasses.dataclass
class MatchCounters:
  """Per-record match counters threaded through sequential extraction calls.

  A fresh instance is created for every record. `record_matches` only ever
  grows while the record is processed; `subdoc_matches` is reset at the start
  of every sub-document.
  """

  record_matches: int = 0
  subdoc_matches: int = 0

  def start_subdocument(self) -> None:
    self.subdoc_matches = 0

  def count_match(self) -> tuple[int, int]:
    """Registers one match and returns the (record, sub-document) counters."""
    self.record_matches += 1
    self.subdoc_matches += 1
    return self.record_matches, self.subdoc_matches


@dataclasses.dataclass(frozen=True)
class Window:
  """One keyword-in-context match instance.

  Attributes:
    record_id: Id of the owning record.
    doc_type: Type label of the sub-document the match was found in.
    ordinal: Ordinal of that sub-document.
    record_match: Record-scoped match counter (1-based).
    subdoc_match: Sub-document-scoped match counter (1-based).
    before: Up to N words preceding the match.
    match: The matched text.
    after: Up to N words following the match.
  """

  record_id: str
  doc_type: str | None
  ordinal: int
  record_match: int
  subdoc_match: int
  before: str
  match: str
  after: str

  def context(self) -> str:
    """Joins before, match and after into the string handed to the tagger."""
    return " ".join(part for part in (self.before, self.match, self.after) if part)


@dataclasses.dataclass(frozen=True)
class TaggedWindow:
  """A window whose before/match/after fields carry `word/TAG` annotations."""

  window: Window
  tagged_before: str
  tagged_match: str
  tagged_after: str


@dataclasses.dataclass(frozen=True)
class FollowerRecord:
  """The noun-terminated phrase following one match."""

  record_id: str
  doc_type: str
  ordinal: str
  record_match: str
  subdoc_match: str
  follower: str

  def as_row(self) -> list[str]:
    return [
        self.record_id,
        self.doc_type,
        self.ordinal,
        self.record_match,
        self.subdoc_match,
        self.follower,
    ]


@dataclasses.dataclass(frozen=True)
class LabelEntry:
  """Value side of a label table.

  Attributes:
    label: The classification label.
    secondary: Optional auxiliary column, e.g. the original follower text.
  """

  label: str
  secondary: str | None = None


class LabelTable:
  """Read-mostly mapping from a join key to a `LabelEntry`.

  Keys are either a bare term or a (record id, record match counter) tuple.
  Adding an existing key overwrites it; the number of overwrites is kept for
  reporting only.
  """

  def __init__(self):
    self._entries: dict[Hashable, LabelEntry] = {}
    self.overwrites = 0

  def add(self, key: Hashable, entry: LabelEntry) -> None:
    if key in self._entries:
      self.overwrites += 1
    self._entries[key] = entry

  def lookup(self, key: Hashable) -> LabelEntry | None:
    return self._entries.get(key)

  def __contains__(self, key: Hashable) -> bool:
    return key in self._entries

  def __len__(self) -> int:
    return len(self._entries)

  def __iter__(self) -> Iterator[Hashable]:
    return iter(self._entries)

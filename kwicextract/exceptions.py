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

"""Public exceptions API for kwicextract.

Per-chunk and per-row problems (`RecordParseError`, `MissingFieldError`) are
not raised out of the pipeline. They are handed to an error channel, a plain
callable, so that a run over a large corpus keeps going. The remaining errors
describe setup problems and are raised before any input is read.
"""

from __future__ import annotations

from collections.abc import Callable

from absl import logging

__all__ = [
    "KwicExtractError",
    "RecordParseError",
    "MissingFieldError",
    "PatternError",
    "ConfigError",
    "TaggerError",
    "ErrorChannel",
    "ErrorTally",
]


class KwicExtractError(Exception):
  """Base class for all kwicextract errors."""


class RecordParseError(KwicExtractError):
  """A chunk of the record stream could not be incorporated into a record.

  Attributes:
    position: 1-based index of the offending chunk (usually a line number).
    message: Description of the problem.
  """

  def __init__(self, position: int, message: str):
    super().__init__(f"chunk {position}: {message}")
    self.position = position
    self.message = message


class MissingFieldError(KwicExtractError):
  """The text field a row or sub-document should be scanned for is empty.

  Attributes:
    line_number: 1-based line (or sub-document ordinal) of the skipped row.
    field: Name or index of the empty field.
    record_id: Id of the record the sub-document belongs to, if known.
  """

  def __init__(
      self, line_number: int, field: str | int, record_id: str | None = None
  ):
    location = f"line {line_number}"
    if record_id is not None:
      location = f"record {record_id!r}, sub-document {line_number}"
    super().__init__(f"{location}: empty field {field!r}")
    self.line_number = line_number
    self.field = field
    self.record_id = record_id


class PatternError(KwicExtractError):
  """The search pattern is empty or is not a valid regular expression."""


class ConfigError(KwicExtractError):
  """The run configuration is incomplete or inconsistent."""


class TaggerError(KwicExtractError):
  """The part-of-speech tagger backend could not be initialized."""


ErrorChannel = Callable[[KwicExtractError], None]


class ErrorTally:
  """Error channel that logs every error and counts them by type."""

  def __init__(self):
    self.counts: dict[str, int] = {}

  def __call__(self, error: KwicExtractError) -> None:
    logging.warning("%s", error)
    name = type(error).__name__
    self.counts[name] = self.counts.get(name, 0) + 1

  @property
  def total(self) -> int:
    return sum(self.counts.values())

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

"""Re-alignment of tagger output with KWIC windows.

The tagger sees a window as one string, "before match after", and may retokenize
it. To get the three fields back the tagged string is split again on the
tagged form of the match term: every word of the term followed by a `/TAG`
marker, anchored on a word boundary like the extraction pattern.
"""

from __future__ import annotations

import functools

from absl import logging
import regex

from kwicextract import data
from kwicextract import tagging

_REGEX_FLAGS = regex.VERSION0 | regex.IGNORECASE


@functools.lru_cache(maxsize=256)
def _tagged_term_pattern(match_term: str) -> regex.Pattern:
  words = [regex.escape(word) + r"/\S+" for word in match_term.split()]
  return regex.compile(r"\b(" + r"\s+".join(words) + ")", _REGEX_FLAGS)


def realign(tagged_text: str, match_term: str) -> tuple[str, str, str]:
  """Splits tagged text into (tagged_before, tagged_match, tagged_after).

  Args:
    tagged_text: Tagger output for "before match after".
    match_term: The untagged matched text of the window.

  Returns:
    The three tagged fields, whitespace-trimmed. Missing segments come back as
    empty strings; when the tagged term cannot be found at all the whole text
    is returned as the before field.
  """
  if not match_term.strip():
    return tagged_text.strip(), "", ""
  parts = _tagged_term_pattern(match_term).split(tagged_text, maxsplit=1)
  if len(parts) < 3:
    logging.debug("Tagged term %r not found in %r", match_term, tagged_text)
    parts = parts + [""] * (3 - len(parts))
  before, match, after = parts[:3]
  return before.strip(), (match or "").strip(), (after or "").strip()


def tag_window(window: data.Window, tagger: tagging.Tagger) -> data.TaggedWindow:
  """Runs the tagger over a window and re-aligns the result."""
  tagged_before, tagged_match, tagged_after = realign(
      tagger(window.context()), window.match
  )
  return data.TaggedWindow(
      window=window,
      tagged_before=tagged_before,
      tagged_match=tagged_match,
      tagged_after=tagged_after,
  )


def split_tagged_token(token: str) -> tuple[str, str]:
  """Splits `word/TAG` on its last separator; untagged tokens get an empty tag."""
  word, separator, tag = token.rpartition(tagging.TAG_SEPARATOR)
  if not separator or not word:
    return token, ""
  return word, tag


def strip_tags(tagged_text: str) -> str:
  """Removes the `/TAG` suffix of every token."""
  return " ".join(split_tagged_token(token)[0] for token in tagged_text.split())

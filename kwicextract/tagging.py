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

"""Part-of-speech tagger adapters.

A tagger is any callable mapping text to text in which every whitespace
delimited token is rewritten as `word/TAG`. Taggers are treated as pure
functions; the same input must always produce the same output.
"""

from __future__ import annotations

from typing import Any, Protocol

from absl import logging

from kwicextract import exceptions

TAG_SEPARATOR = "/"


class Tagger(Protocol):

  def __call__(self, text: str) -> str:
    ...


class PassthroughTagger:
  """Tags every token with one fixed tag, e.g. `court/XX`."""

  def __init__(self, tag: str = "XX"):
    self._tag = tag

  def __call__(self, text: str) -> str:
    return " ".join(f"{token}{TAG_SEPARATOR}{self._tag}" for token in text.split())


class SpacyTagger:
  """Tags text with a spaCy pipeline using Penn Treebank tags.

  Only the tagger related components are kept so loading and tagging stay
  cheap. Nouns come out as `NN`, `NNS`, `NNP` and `NNPS`.
  """

  _DISABLED = ("parser", "ner", "lemmatizer", "textcat")

  def __init__(self, model: str = "en_core_web_sm"):
    try:
      import spacy  # pylint: disable=import-outside-toplevel
    except ImportError as e:
      raise exceptions.TaggerError(
          "spaCy is not installed; install the 'tagger' extra"
      ) from e
    try:
      self._nlp: Any = spacy.load(model, exclude=list(self._DISABLED))
    except OSError as e:
      raise exceptions.TaggerError(
          f"spaCy model {model!r} is not available: {e}"
      ) from e
    logging.info(
        "Loaded spaCy model %s with pipes %s", model, self._nlp.pipe_names
    )

  def __call__(self, text: str) -> str:
    doc = self._nlp(text)
    return " ".join(
        f"{token.text}{TAG_SEPARATOR}{token.tag_}"
        for token in doc
        if not token.is_space
    )


def create_tagger(name: str, spacy_model: str = "en_core_web_sm") -> Tagger:
  """Returns the tagger configured by name ("passthrough" or "spacy")."""
  if name == "passthrough":
    return PassthroughTagger()
  if name == "spacy":
    return SpacyTagger(spacy_model)
  raise exceptions.ConfigError(f"Unknown tagger {name!r}")

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

"""Run configuration for the extraction pipeline.

Values are layered, later sources winning:

  1. dataclass defaults,
  2. a YAML file,
  3. `KWIC_*` environment variables (a `.env` file is loaded by the scripts),
  4. explicit overrides, normally the command line flags.
"""

from __future__ import annotations

from collections.abc import Mapping
import dataclasses
import os
from pathlib import Path
from typing import Any, Final

from absl import logging
import yaml

from kwicextract import exceptions
from kwicextract import kwic

ENV_PREFIX: Final[str] = "KWIC_"

_TRUE_VALUES = frozenset({"1", "true", "yes", "on"})
_ESCAPED_SEPARATORS = {"\\t": "\t", "tab": "\t", "\\n": "\n"}


@dataclasses.dataclass
class ExtractionConfig:
  """Settings shared by the pipeline stages.

  Attributes:
    pattern: Search term or regular expression (required for extraction).
    is_regex: Treat `pattern` as a regular expression.
    context_width: Number of words kept on each side of a match.
    separator: Field separator of all delimited files.
    write_header: Write a header row first.
    long_titles: Output the full title instead of the abbreviated one.
    long_dates: Output the full date instead of the year.
    noun_prefix: Tag prefix that ends a follower phrase.
    tagger: Tagger backend name, "passthrough" or "spacy".
    spacy_model: spaCy model loaded by the "spacy" tagger.
  """

  pattern: str = ""
  is_regex: bool = False
  context_width: int = kwic.DEFAULT_CONTEXT_WIDTH
  separator: str = "\t"
  write_header: bool = True
  long_titles: bool = False
  long_dates: bool = False
  noun_prefix: str = "NN"
  tagger: str = "passthrough"
  spacy_model: str = "en_core_web_sm"

  def validate(self, require_pattern: bool = True) -> "ExtractionConfig":
    """Checks the settings and returns self.

    Raises:
      ConfigError: If a required value is missing or out of range.
    """
    if require_pattern and not self.pattern.strip():
      raise exceptions.ConfigError("A search pattern is required")
    if self.context_width < 1:
      raise exceptions.ConfigError(
          f"context_width must be positive, got {self.context_width}"
      )
    if not self.separator:
      raise exceptions.ConfigError("separator must not be empty")
    return self


def _field_types() -> dict[str, Any]:
  return {f.name: f.type for f in dataclasses.fields(ExtractionConfig)}


def _coerce(name: str, value: Any) -> Any:
  field_type = _field_types()[name]
  if field_type in ("bool", bool):
    if isinstance(value, bool):
      return value
    return str(value).strip().lower() in _TRUE_VALUES
  if field_type in ("int", int):
    try:
      return int(value)
    except (TypeError, ValueError) as e:
      raise exceptions.ConfigError(f"{name} must be an integer, got {value!r}") from e
  value = str(value)
  if name == "separator":
    return _ESCAPED_SEPARATORS.get(value, value)
  return value


def apply_mapping(
    config: ExtractionConfig, values: Mapping[str, Any], source: str
) -> ExtractionConfig:
  """Returns a copy of `config` updated with the known keys of `values`."""
  known = _field_types()
  updates = {}
  for key, value in values.items():
    if key not in known:
      logging.warning("Ignoring unknown setting %r from %s", key, source)
      continue
    if value is None:
      continue
    updates[key] = _coerce(key, value)
  return dataclasses.replace(config, **updates)


def load_yaml(path: str | Path) -> dict[str, Any]:
  """Reads a YAML mapping of settings."""
  try:
    with open(path, "r", encoding="utf-8") as f:
      loaded = yaml.safe_load(f) or {}
  except OSError as e:
    raise exceptions.ConfigError(f"Cannot read config file {path}: {e}") from e
  except yaml.YAMLError as e:
    raise exceptions.ConfigError(f"Invalid YAML in {path}: {e}") from e
  if not isinstance(loaded, dict):
    raise exceptions.ConfigError(f"Config file {path} must hold a mapping")
  return loaded


def env_settings(environ: Mapping[str, str] | None = None) -> dict[str, str]:
  """Collects `KWIC_<FIELD>` variables, keyed by field name."""
  environ = os.environ if environ is None else environ
  settings = {}
  for name in _field_types():
    value = environ.get(ENV_PREFIX + name.upper())
    if value is not None:
      settings[name] = value
  return settings


def load_config(
    config_file: str | Path | None = None,
    overrides: Mapping[str, Any] | None = None,
    environ: Mapping[str, str] | None = None,
) -> ExtractionConfig:
  """Builds the effective configuration from all sources.

  Args:
    config_file: Optional YAML file.
    overrides: Highest priority values; None entries are ignored so unset
      command line flags do not mask other sources.
    environ: Environment to read; defaults to `os.environ`.

  Returns:
    The merged, unvalidated configuration.
  """
  config = ExtractionConfig()
  if config_file:
    config = apply_mapping(config, load_yaml(config_file), str(config_file))
  config = apply_mapping(config, env_settings(environ), "environment")
  if overrides:
    config = apply_mapping(config, overrides, "command line")
  return config

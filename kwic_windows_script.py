#!/usr/bin/env python3
"""
Extract tagged keyword-in-context windows from a corpus of case records.

This script streams a file of concatenated JSON case objects (one per line or
pretty-printed) and writes one tab separated row per match:
1. Parses records incrementally and normalizes their text
2. Cuts a window of N words around every match of the search pattern
3. Tags each window and re-aligns the tagged before/match/after fields

Usage:
    python kwic_windows_script.py <cases.jsonl> <windows.tsv> --pattern commerce

Settings may also come from a YAML file (--config) or KWIC_* environment
variables, e.g. KWIC_CONTEXT_WIDTH=8; a .env file is read if present.
"""

import argparse
import logging
from pathlib import Path
import sys
from typing import Any, Dict, Optional, Sequence

from dotenv import load_dotenv

from kwicextract import config as config_lib
from kwicextract import exceptions
from kwicextract import kwic
from kwicextract import realign
from kwicextract import record_stream
from kwicextract import rows
from kwicextract import tagging


def setup_logging(verbose: bool = False) -> None:
  """Setup logging configuration."""
  level = logging.DEBUG if verbose else logging.INFO
  logging.basicConfig(
      level=level,
      format="%(asctime)s - %(levelname)s - %(message)s",
      handlers=[logging.StreamHandler(sys.stderr)],
  )


def build_parser() -> argparse.ArgumentParser:
  parser = argparse.ArgumentParser(
      description="Extract tagged KWIC windows from case records",
      formatter_class=argparse.RawDescriptionHelpFormatter,
      epilog="""
Examples:
  %(prog)s cases.jsonl windows.tsv --pattern commerce
  %(prog)s cases.jsonl windows.tsv --pattern "commerce|trade" --regex --width 8
  %(prog)s rows.tsv windows.tsv --pattern commerce --input-format tsv --text-column 3
        """,
  )
  parser.add_argument("input_file", type=Path, help="Corpus file to scan")
  parser.add_argument("output_file", type=Path, help="Where to write window rows")
  parser.add_argument("--config", type=Path, help="YAML file with settings")
  parser.add_argument("--pattern", help="Search term (or expression with --regex)")
  parser.add_argument(
      "--regex", dest="is_regex", action="store_true", default=None,
      help="Treat the pattern as a regular expression",
  )
  parser.add_argument(
      "--width", dest="context_width", type=int,
      help="Context words on each side (default: 5)",
  )
  parser.add_argument("--separator", help="Output field separator (default: tab)")
  parser.add_argument(
      "--no-header", dest="write_header", action="store_false", default=None,
      help="Do not write a header row",
  )
  parser.add_argument(
      "--long-titles", action="store_true", default=None,
      help="Write full case names instead of abbreviations",
  )
  parser.add_argument(
      "--long-dates", action="store_true", default=None,
      help="Write full decision dates instead of years",
  )
  parser.add_argument(
      "--tagger", choices=("passthrough", "spacy"),
      help="Part-of-speech tagger backend (default: passthrough)",
  )
  parser.add_argument("--spacy-model", help="spaCy model for --tagger spacy")
  parser.add_argument(
      "--input-format", choices=("json", "tsv"), default="json",
      help="json: concatenated case objects; tsv: one text column per line",
  )
  parser.add_argument(
      "--text-column", type=int, default=1,
      help="0-based text column for --input-format tsv (default: 1)",
  )
  parser.add_argument(
      "--id-column", type=int, default=0,
      help="0-based id column for --input-format tsv (default: 0)",
  )
  parser.add_argument(
      "--verbose", "-v", action="store_true", help="Enable verbose logging"
  )
  return parser


def _overrides(args: argparse.Namespace) -> Dict[str, Any]:
  names = (
      "pattern", "is_regex", "context_width", "separator", "write_header",
      "long_titles", "long_dates", "tagger", "spacy_model",
  )
  return {name: getattr(args, name) for name in names}


def run(
    args: argparse.Namespace, config: config_lib.ExtractionConfig
) -> Dict[str, int]:
  """Runs the extraction stage and returns its statistics."""
  pattern = kwic.compile_pattern(config.pattern, config.is_regex)
  tagger = tagging.create_tagger(config.tagger, config.spacy_model)
  errors = exceptions.ErrorTally()
  stats = {"records": 0, "windows": 0}

  # Undecodable bytes become U+FFFD, which the normalizer drops.
  with open(
      args.input_file, "r", encoding="utf-8", errors="replace"
  ) as src, open(args.output_file, "w", encoding="utf-8") as out:
    if args.input_format == "tsv":
      records = record_stream.iter_tabular_records(
          src,
          text_column=args.text_column,
          id_column=args.id_column,
          separator=config.separator,
          on_error=errors,
      )
    else:
      records = record_stream.iter_records(src, on_error=errors)

    if config.write_header:
      out.write(rows.format_row(rows.PRIMARY_HEADER, config.separator))
    for record in records:
      stats["records"] += 1
      for window in kwic.extract_record_windows(
          record, pattern, width=config.context_width, on_error=errors
      ):
        tagged = realign.tag_window(window, tagger)
        out.write(
            rows.format_row(
                rows.primary_row(
                    record, tagged, config.long_titles, config.long_dates
                ),
                config.separator,
            )
        )
        stats["windows"] += 1

  stats["errors"] = errors.total
  return stats


def main(argv: Optional[Sequence[str]] = None) -> int:
  """Main function to extract KWIC windows."""
  args = build_parser().parse_args(argv)
  setup_logging(args.verbose)
  load_dotenv()

  if not args.input_file.exists():
    logging.error(f"Input file does not exist: {args.input_file}")
    return 1

  try:
    config = config_lib.load_config(args.config, _overrides(args)).validate()
    stats = run(args, config)
  except (exceptions.ConfigError, exceptions.PatternError, exceptions.TaggerError) as e:
    logging.error(f"Cannot start extraction: {e}")
    return 2

  logging.info(
      f"Processed {stats['records']} records, wrote {stats['windows']} windows"
      f" to {args.output_file} ({stats['errors']} errors reported)"
  )
  return 0


if __name__ == "__main__":
  sys.exit(main())

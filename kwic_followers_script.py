#!/usr/bin/env python3
"""
Extract follower phrases from tagged KWIC window rows.

Reads the output of kwic_windows_script.py and writes, per window, the words
following the match up to and including the first noun. Optionally also
writes the follower frequency table that term labels are curated from.

Usage:
    python kwic_followers_script.py <windows.tsv> <followers.tsv> [--counts-output counts.tsv]
"""

import argparse
import logging
from pathlib import Path
import sys
from typing import Optional, Sequence

from dotenv import load_dotenv

from kwicextract import config as config_lib
from kwicextract import exceptions
from kwicextract import rows
from postprocessing import count_followers
from postprocessing import extract_followers


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
      description="Extract noun-terminated follower phrases from KWIC rows",
      formatter_class=argparse.RawDescriptionHelpFormatter,
  )
  parser.add_argument("input_file", type=Path, help="Window rows to read")
  parser.add_argument("output_file", type=Path, help="Where to write follower rows")
  parser.add_argument("--config", type=Path, help="YAML file with settings")
  parser.add_argument("--noun-prefix", help="Tag prefix marking nouns (default: NN)")
  parser.add_argument("--separator", help="Field separator (default: tab)")
  parser.add_argument(
      "--no-header", dest="write_header", action="store_false", default=None,
      help="Input has no header row and none is written",
  )
  parser.add_argument(
      "--counts-output", type=Path,
      help="Also write a follower frequency table (count, term) here",
  )
  parser.add_argument(
      "--verbose", "-v", action="store_true", help="Enable verbose logging"
  )
  return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
  """Main function to extract follower phrases."""
  args = build_parser().parse_args(argv)
  setup_logging(args.verbose)
  load_dotenv()

  if not args.input_file.exists():
    logging.error(f"Input file does not exist: {args.input_file}")
    return 1

  try:
    config = config_lib.load_config(
        args.config,
        {
            "noun_prefix": args.noun_prefix,
            "separator": args.separator,
            "write_header": args.write_header,
        },
    ).validate(require_pattern=False)
  except exceptions.ConfigError as e:
    logging.error(f"Invalid configuration: {e}")
    return 2

  errors = exceptions.ErrorTally()
  written = 0
  with open(
      args.input_file, "r", encoding="utf-8", errors="replace"
  ) as src, open(args.output_file, "w", encoding="utf-8") as out:
    if config.write_header:
      out.write(rows.format_row(rows.FOLLOWER_HEADER, config.separator))
    for follower in extract_followers.iter_follower_records(
        src,
        separator=config.separator,
        noun_prefix=config.noun_prefix,
        has_header=config.write_header,
        on_error=errors,
    ):
      out.write(rows.format_row(follower.as_row(), config.separator))
      written += 1
  logging.info(f"Wrote {written} follower rows to {args.output_file} ({errors.total} rows skipped)")

  if args.counts_output:
    with open(
        args.output_file, "r", encoding="utf-8", errors="replace"
    ) as src, open(args.counts_output, "w", encoding="utf-8") as out:
      counts = count_followers.count_followers(
          src, separator=config.separator, has_header=config.write_header
      )
      out.writelines(count_followers.format_counts(counts, config.separator))
    logging.info(f"Wrote {len(counts)} distinct followers to {args.counts_output}")

  return 0


if __name__ == "__main__":
  sys.exit(main())

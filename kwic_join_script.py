#!/usr/bin/env python3
"""
Join classification label tables onto KWIC or follower rows.

Two schemes:
  term       label files hold `count, term, label` (no header); the key is one
             column of the primary file, by default the follower phrase.
  composite  label files hold follower rows plus a label column (with header);
             the key is (record id, case match counter) and two columns,
             label and original_follower, are appended.

Duplicate keys across or within label files: the last one wins.

Usage:
    python kwic_join_script.py <primary.tsv> <joined.tsv> --scheme term --labels terms.tsv
"""

import argparse
import contextlib
import logging
from pathlib import Path
import sys
from typing import Optional, Sequence

from dotenv import load_dotenv

from kwicextract import config as config_lib
from kwicextract import exceptions
from kwicextract import rows
from postprocessing import join_labels


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
      description="Append classification labels to extracted rows",
      formatter_class=argparse.RawDescriptionHelpFormatter,
      epilog="""
Examples:
  %(prog)s followers.tsv labeled.tsv --scheme term --labels terms.tsv
  %(prog)s windows.tsv labeled.tsv --scheme composite --labels a.tsv b.tsv
        """,
  )
  parser.add_argument("primary_file", type=Path, help="Rows to label")
  parser.add_argument("output_file", type=Path, help="Where to write labeled rows")
  parser.add_argument(
      "--scheme", choices=("term", "composite"), required=True,
      help="Key scheme of the label tables",
  )
  parser.add_argument(
      "--labels", type=Path, nargs="+", required=True,
      help="Label table file(s), applied in order",
  )
  parser.add_argument(
      "--key-column", type=int, default=rows.FOLLOWER_TERM_COLUMN,
      help="term scheme: 0-based key column (default: follower column)",
  )
  parser.add_argument(
      "--id-column", type=int, default=rows.PRIMARY_ID_COLUMN,
      help="composite scheme: 0-based record id column",
  )
  parser.add_argument(
      "--match-column", type=int, default=rows.PRIMARY_CASE_MATCH_COLUMN,
      help="composite scheme: 0-based case match counter column",
  )
  parser.add_argument("--config", type=Path, help="YAML file with settings")
  parser.add_argument("--separator", help="Field separator (default: tab)")
  parser.add_argument(
      "--no-header", dest="write_header", action="store_false", default=None,
      help="Primary file has no header row",
  )
  parser.add_argument(
      "--verbose", "-v", action="store_true", help="Enable verbose logging"
  )
  return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
  """Main function to join label tables."""
  args = build_parser().parse_args(argv)
  setup_logging(args.verbose)
  load_dotenv()

  for path in [args.primary_file, *args.labels]:
    if not path.exists():
      logging.error(f"Input file does not exist: {path}")
      return 1

  try:
    config = config_lib.load_config(
        args.config,
        {"separator": args.separator, "write_header": args.write_header},
    ).validate(require_pattern=False)
  except exceptions.ConfigError as e:
    logging.error(f"Invalid configuration: {e}")
    return 2

  with contextlib.ExitStack() as stack:
    sources = [
        stack.enter_context(
            open(path, "r", encoding="utf-8", errors="replace")
        )
        for path in args.labels
    ]
    if args.scheme == "term":
      table = join_labels.load_term_labels(sources, config.separator)
      key_fn = join_labels.term_key(args.key_column)
      columns = join_labels.TERM_COLUMNS
    else:
      table = join_labels.load_composite_labels(sources, config.separator)
      key_fn = join_labels.composite_key(args.id_column, args.match_column)
      columns = join_labels.COMPOSITE_COLUMNS

  stats = {}
  with open(
      args.primary_file, "r", encoding="utf-8", errors="replace"
  ) as src, open(args.output_file, "w", encoding="utf-8") as out:
    out.writelines(
        join_labels.join_labels(
            src,
            table,
            key_fn,
            new_columns=columns,
            separator=config.separator,
            has_header=config.write_header,
            stats=stats,
        )
    )

  logging.info(
      f"Labeled {stats['matched']} rows, {stats['unmatched']} without a label,"
      f" output written to {args.output_file}"
  )
  return 0


if __name__ == "__main__":
  sys.exit(main())

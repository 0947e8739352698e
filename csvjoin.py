"""
CSV Join - command line entry point.

Joins two or more CSV files on every column their headers share and
writes the combined CSV to standard output (or a file).

    csvjoin f1.csv f2.csv [f3.csv ...]
"""

import argparse
import sys
from typing import List, Optional

from config_manager import refresh_config
from core.config import Config
from core.exceptions import CSVJoinError, OutputWriteError, UsageError
from core.logging_config import VALID_LEVELS, get_logger, set_log_level, setup_logging
from data_handling.pipeline import prepare_join, write_join
from file_handling.csv_utils import read_csv_sources

logger = get_logger('csvjoin')

MIN_SOURCES = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='csvjoin',
        description='Join CSV files on the columns common to all of them',
    )
    parser.add_argument('files', nargs='*', metavar='FILE',
                        help='CSV files to join (at least two)')
    parser.add_argument('-o', '--output', metavar='PATH',
                        help='Write the joined CSV to PATH instead of standard output')
    parser.add_argument('-c', '--config', metavar='PATH',
                        help='TOML configuration file')
    parser.add_argument('--log-level', choices=VALID_LEVELS, type=str.upper,
                        help='Override the configured logging level')
    parser.add_argument('--save-config', metavar='PATH',
                        help='Write the effective configuration to PATH and exit')
    return parser


def check_usage(files: List[str]) -> None:
    if len(files) < MIN_SOURCES:
        raise UsageError(f"at least {MIN_SOURCES} CSV files are required, got {len(files)}")


def join_files(files: List[str], output: Optional[str], config: Config) -> None:
    sources = read_csv_sources(files, config.csv)
    prepared = prepare_join(sources, config)

    if output is None:
        write_join(prepared, sys.stdout, config)
        return

    try:
        sink = open(output, 'w', encoding=config.csv.encoding, newline='')
    except OSError as e:
        raise OutputWriteError(f"cannot open output file {output}: {e}", destination=output)
    with sink:
        write_join(prepared, sink, config, destination=output)


def main(argv: Optional[List[str]] = None) -> int:
    """Run the command line tool and return the process exit status."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.save_config:
        try:
            check_usage(args.files)
        except UsageError as e:
            parser.print_usage(sys.stderr)
            sys.stderr.write(f"{parser.prog}: error: {e}\n")
            return 1

    try:
        config = refresh_config(args.config)
        setup_logging(config.log.level, log_file=config.log.log_file, log_dir=config.log.log_dir)
        if args.log_level:
            config.log.level = args.log_level
            set_log_level(args.log_level)

        if args.save_config:
            config.save_config(args.save_config)
            return 0

        join_files(args.files, args.output, config)
    except CSVJoinError as e:
        logger.error(str(e))
        return 1

    return 0


def run() -> None:
    sys.exit(main())


if __name__ == '__main__':
    run()

import argparse
import glob
import json
import os
import sys

from sqompare.comparator import Comparator
from sqompare.constants import DEFAULT_SOURCE_LABEL, DEFAULT_TARGET_LABEL
from sqompare.exceptions import SourceError
from sqompare.logging_config import get_logger, setup_logging
from sqompare.parsers.mysql import MySQLParser
from sqompare.report import format_plan, generate_report, join_queries

logger = get_logger("cli")


def read_sql_source(path: str) -> str:
    """
    Reads SQL content from a file or recursively from a directory.
    """
    if os.path.isfile(path):
        return _read_text(path)

    elif os.path.isdir(path):
        # Sort to ensure deterministic order
        sql_files = sorted(glob.glob(os.path.join(path, '**/*.sql'), recursive=True))

        if not sql_files:
            raise SourceError(path, "No .sql files found in directory")

        return "\n".join(_read_text(sql_file) for sql_file in sql_files)

    else:
        raise SourceError(path, "Path not found")


def _read_text(path: str) -> str:
    logger.debug("Reading SQL source", extra={'file_path': path, 'operation': 'read'})
    try:
        with open(path, 'r', encoding='utf-8-sig') as f:
            return f.read()
    except UnicodeDecodeError:
        raise SourceError(path, "File is not valid text")


def _read_version() -> str:
    version_path = os.path.join(os.path.dirname(os.path.abspath(__file__)), 'VERSION')
    if os.path.exists(version_path):
        with open(version_path, 'r') as f:
            return f.read().strip()
    return 'Unknown'


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description='SQompare - compare the structure of two SQL dumps')
    parser.add_argument('command', choices=['compare', 'compare-livedb'], help='Command to execute')

    parser.add_argument('--source', required=True, help='Path to first SQL dump file or directory (or DB URL for compare-livedb)')
    parser.add_argument('--target', required=True, help='Path to second SQL dump file or directory')
    parser.add_argument('--source-label', default=DEFAULT_SOURCE_LABEL, help='Label for the first input')
    parser.add_argument('--target-label', default=DEFAULT_TARGET_LABEL, help='Label for the second input')

    parser.add_argument('--no-collation', action='store_true', help='Leave CHARACTER SET and COLLATE clauses out of generated SQL')

    # Independent output flags
    parser.add_argument('--plan', action='store_true', help='Print human-readable differences to stdout')
    parser.add_argument('--json-out', help='Path to save the comparison as JSON')
    parser.add_argument('--sql-out', help='Path to save the generated SQL statements')
    parser.add_argument('--report-out', help='Path to save the full comparison report')

    parser.add_argument('--no-color', action='store_true', help='Disable colored output')
    parser.add_argument('--verbose', '-v', action='count', default=0, help='Increase log verbosity (-v info, -vv debug)')
    parser.add_argument('--log-format', choices=['text', 'json'], default='text', help='Log output format')
    parser.add_argument('--version', action='version', version=f'SQompare v{_read_version()}')
    return parser


def main(argv=None):
    args = build_arg_parser().parse_args(argv)
    setup_logging(verbose=args.verbose, log_format=args.log_format, no_color=args.no_color)

    logger.debug(f"Command={args.command}, Source={args.source}, Target={args.target}")

    try:
        parser_instance = MySQLParser()

        if args.command == 'compare':
            source_schema = parser_instance.parse(read_sql_source(args.source), args.source_label)
            source_name = os.path.basename(os.path.normpath(args.source))
        else:
            # Imported lazily so file comparisons do not need a database driver
            from sqompare.introspector import DBIntrospector
            introspector = DBIntrospector(args.source)
            source_schema = introspector.introspect(args.source_label)
            source_name = introspector.engine.url.render_as_string(hide_password=True)

        target_schema = parser_instance.parse(read_sql_source(args.target), args.target_label)

        comparator = Comparator(include_collation=not args.no_collation)
        result = comparator.compare(source_schema, target_schema)

        _handle_output(args, result, source_name)

    except Exception as e:
        logger.debug("Comparison failed", exc_info=True)
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


def _handle_output(args, result, source_name):
    # 1. Human readable plan
    if args.plan:
        print(format_plan(result, use_color=not args.no_color))

    # 2. JSON output
    if args.json_out:
        with open(args.json_out, 'w', encoding='utf-8') as f:
            json.dump(result.to_dict(), f, indent=2)
        print(f"JSON comparison saved to {args.json_out}")

    # 3. SQL output
    if args.sql_out:
        with open(args.sql_out, 'w', encoding='utf-8') as f:
            f.write(f"-- Statements reconciling {result.source_label} and {result.target_label}\n")
            f.write(join_queries(result.all_queries) + "\n")
        print(f"Migration SQL saved to {args.sql_out}")

    # 4. Full report
    if args.report_out:
        report = generate_report(
            result,
            source_name=source_name,
            target_name=os.path.basename(os.path.normpath(args.target))
        )
        with open(args.report_out, 'w', encoding='utf-8') as f:
            f.write(report)
        print(f"Report saved to {args.report_out}")

    if not (args.plan or args.json_out or args.sql_out or args.report_out):
        print("No output action specified. Use --plan, --json-out, --sql-out or --report-out.")


if __name__ == '__main__':
    main()

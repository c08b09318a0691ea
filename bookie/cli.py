"""
Command line interface for bookie.

Usage: bookie [OPTION]... [FILE]

Read a ledger and report on it. With no FILE, or when FILE is -, read
standard input.
"""

import argparse
import logging
import sys

from bookie import __version__
from bookie.entries import EntryFilter, load_entries
from bookie.reports import generate_report, save_entries
from bookie.utils import open_input, setup_logging

logger = logging.getLogger(__name__)

VERSION_TEXT = f"""bookie {__version__}

This is free software; see the source for copying conditions.
There is NO warranty; not even for MERCHANTABILITY or FITNESS
FOR A PARTICULAR PURPOSE."""

class ExactDateAction(argparse.Action):
    """--date DATE sets both the from and the to date."""

    def __call__(self, parser, namespace, values, option_string=None):
        namespace.from_date = values
        namespace.to_date = values

def build_parser():
    parser = argparse.ArgumentParser(
        prog='bookie',
        description='Read a list and retrieve some data out of it.',
        epilog='With no FILE, or when FILE is -, read standard input.'
    )
    parser.add_argument('file', nargs='?', default='-', metavar='FILE',
                        help='Ledger to read')

    selection = parser.add_argument_group('selection')
    selection.add_argument('-a', '--account', default='',
                           help='only read entries for ACCOUNT')
    selection.add_argument('-f', '--from-date', default='', metavar='DATE',
                           help='only read entries with dates >= DATE')
    selection.add_argument('-t', '--to-date', default='', metavar='DATE',
                           help='only read entries with dates <= DATE')
    selection.add_argument('-d', '--date', action=ExactDateAction, metavar='DATE',
                           help='only read entries with dates matching DATE')

    transformation = parser.add_argument_group('transformation')
    transformation.add_argument('-i', '--invert-amounts', action='store_true',
                                help='invert the sign of all amounts')

    output = parser.add_argument_group('output control')
    output.add_argument('-A', '--list-by-account', action='store_true',
                        help='list the results grouped by account')
    output.add_argument('-D', '--list-by-date', action='store_true',
                        help='list the results grouped by date')
    output.add_argument('-T', '--list-total', action='store_true',
                        help='list the total amount')
    output.add_argument('--list-details', action='store_true',
                        help='list all the details (default)')
    output.add_argument('--export', metavar='PATH',
                        help='also write the selected entries to a CSV file')

    misc = parser.add_argument_group('miscellaneous')
    misc.add_argument('-V', '--version', action='version', version=VERSION_TEXT,
                      help='print version information and exit')
    misc.add_argument('--debug', action='store_true',
                      help='Enable debug logging')
    misc.add_argument('--log-level', default=None,
                      help='Log level (default: warning, or BOOKIE_LOG_LEVEL)')
    return parser

def main(argv=None):
    """Main execution function.

    Returns:
        int: 0 on success, 1 when the input could not be opened
    """
    args = build_parser().parse_args(argv)

    setup_logging(debug=args.debug, log_level=args.log_level)

    try:
        entry_filter = EntryFilter(
            account=args.account,
            from_date=args.from_date,
            to_date=args.to_date
        )
        logger.debug(f"Filter: {entry_filter}, invert amounts: {args.invert_amounts}")

        stream = open_input(args.file)
        try:
            store = load_entries(stream, entry_filter, invert_amounts=args.invert_amounts)
        finally:
            if stream is not None and stream is not sys.stdin:
                stream.close()

        lines = generate_report(
            store,
            details=args.list_details,
            by_account=args.list_by_account,
            by_date=args.list_by_date,
            total=args.list_total
        )
        for line in lines:
            sys.stdout.write(f"{line}\n")

        if args.export:
            save_entries(store, args.export)

    except Exception as e:
        logger.error(f"Error while reporting: {str(e)}")
        raise

    return 0 if stream is not None else 1

if __name__ == '__main__':
    sys.exit(main())

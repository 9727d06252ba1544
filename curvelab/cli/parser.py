"""
Argument parsing for the CurveLab CLI.
"""

import argparse
from typing import Optional, Sequence

from ..config import DEFAULT_DEGREE, DEFAULT_LOG_BASE, DEFAULT_MODEL, LOG_BASES, MODEL_NAMES
from ..version import get_version_string


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='curvelab',
        description=f'Curve fitting for tabular (X, Y) data ({get_version_string()})',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  curvelab data.csv                          Linear fit (Y vs X, or Y vs X1, X2, ...)
  curvelab data.csv --model polynomial -d 3  Cubic polynomial
  curvelab data.csv --model logarithmic --log-base ln
  curvelab data.csv --model powerlaw --json  Machine-readable result
        """
    )

    parser.add_argument('--version', action='version',
                        version=f'%(prog)s {get_version_string()}')

    io_group = parser.add_argument_group('Input/Output')
    io_group.add_argument('input',
                          help='Delimited text table (comma, semicolon or tab). '
                               'The first line holds the column keys.')
    io_group.add_argument('--json', action='store_true',
                          help='Print the result as JSON instead of a text report')
    io_group.add_argument('--latex', action='store_true',
                          help='Also print the fitted equation as LaTeX')
    io_group.add_argument('--save-report', type=str, default=None, metavar='PATH',
                          help='Write the text report to PATH')
    io_group.add_argument('--verbose', '-v', action='count', default=0,
                          help='Show debug messages on stderr')
    io_group.add_argument('--quiet', '-q', action='store_true',
                          help='Quiet mode - hide INFO messages, show only warnings and errors')

    model_group = parser.add_argument_group('Model')
    model_group.add_argument('--model', '-m', type=str.lower, default=DEFAULT_MODEL,
                             choices=MODEL_NAMES,
                             help=f'Regression model (default: {DEFAULT_MODEL})')
    model_group.add_argument('--degree', '-d', type=int, default=DEFAULT_DEGREE,
                             help=f'Polynomial degree (default: {DEFAULT_DEGREE})')
    model_group.add_argument('--log-base', type=str, default=DEFAULT_LOG_BASE,
                             choices=LOG_BASES,
                             help=f'Logarithm base for the logarithmic model (default: {DEFAULT_LOG_BASE})')

    return parser


def parse_arguments(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    """
    Parse command line arguments.

    Parameters
    ----------
    argv : sequence of str, optional
        Arguments without the program name; ``sys.argv[1:]`` when None.
    """
    return build_parser().parse_args(argv)

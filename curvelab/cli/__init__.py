"""
Command-line interface for CurveLab.

- logging: log formatters and setup
- parser: argument parsing
- data_handling: delimited-table loading
"""

import json
from logging import getLogger
from typing import Optional, Sequence

from ..config import FitConfig
from ..extraction import Failure
from ..fitting import run_model
from ..latex_gen import LaTeXGenerator
from ..numeric import format_number
from ..report import build_report
from .data_handling import CurveLabError, load_table
from .logging import setup_logging
from .parser import parse_arguments

logger = getLogger(__name__)


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Run the CLI; returns the process exit status."""
    args = parse_arguments(argv)
    if args.json:
        # stdout carries the JSON document only; diagnostics are inside it
        args.quiet = True
    setup_logging(args)

    try:
        rows, columns = load_table(args.input)
    except CurveLabError as e:
        logger.error(str(e))
        return 1

    try:
        config = FitConfig(model=args.model, degree=args.degree, log_base=args.log_base)
    except ValueError as e:
        logger.error(str(e))
        return 1

    result = run_model(rows, columns, config)

    if not args.json:
        for message in result.warnings:
            logger.warning(message)

    if isinstance(result, Failure):
        if args.json:
            print(json.dumps(result.to_dict(), indent=2, ensure_ascii=False))
        logger.error(f"Fit failed: {result.error}")
        return 1

    if not args.json:
        for message in result.domain_warnings:
            logger.warning(message)

    if result.stats is not None:
        logger.info(f"{result.model}: R² = {format_number(result.stats.r2)}, "
                    f"RMSE = {format_number(result.stats.rmse)}, n = {result.stats.n}")

    report = build_report(result)
    if args.json:
        print(json.dumps(result.to_dict(), indent=2, ensure_ascii=False))
    else:
        print(report)

    if args.latex:
        print(LaTeXGenerator().generate(result))

    if args.save_report:
        try:
            with open(args.save_report, 'w', encoding='utf-8') as f:
                f.write(report)
        except OSError as e:
            logger.error(f"Cannot write report {args.save_report}: {e}")
            return 1
        logger.info(f"Report saved to {args.save_report}")

    return 0


__all__ = [
    'main',
    'setup_logging',
    'parse_arguments',
    'load_table',
    'CurveLabError',
]

"""CLI — годовой отчёт по выгрузке сделок.

    tax-report transactions.csv --year 2021 --carry-years 5
    tax-report transactions.csv --year 2021 --json
"""

import argparse
import json
import logging
import sys
from typing import List, Optional

import jsonschema

from src.core.contracts import validate_tax_report
from src.core.errors import MissingYearData, TaxReportError
from src.core.settings import TaxReportSettings, get_settings
from src.ingest import ReaderConfig, read_transactions, read_transactions_forward
from src.ledger import Portfolio, Report

logger = logging.getLogger(__name__)


def create_parser(settings: TaxReportSettings) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="tax-report",
        description="Annual realized profit with average cost basis and carried losses.",
    )
    parser.add_argument("path", help="broker transactions export (CSV)")
    parser.add_argument("--year", type=int, required=True, help="target tax year")
    parser.add_argument(
        "--carry-years",
        type=int,
        default=settings.carry_window_years,
        help="loss carry-forward window in years (default: %(default)s)",
    )
    parser.add_argument(
        "--forward",
        action="store_true",
        help="file is already sorted oldest first (default: newest first)",
    )
    parser.add_argument("--json", action="store_true", help="print the report as JSON")
    parser.add_argument("-v", "--verbose", action="store_true", help="enable debug logging")
    return parser


def setup_logging(level: str) -> None:
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


def render_text(report: Report) -> str:
    lines = []
    try:
        lines.append(f"profit {report.target_year}: {report.profit()}")
    except MissingYearData:
        lines.append(f"profit {report.target_year}: no realized sales")
    resolution = report.carry_resolution()
    lines.append(
        f"adjusted profit {report.target_year} "
        f"(carry window {report.carry_window_years}y): {resolution.adjusted_profit}"
    )
    if resolution.carry_applied:
        lines.append(f"carried loss applied: {resolution.carried_loss}")
    return "\n".join(lines)


def run(args: argparse.Namespace, settings: TaxReportSettings) -> Report:
    config = ReaderConfig(
        date_format=settings.csv_date_format,
        time_format=settings.csv_time_format,
        chunk_size=settings.read_chunk_size,
    )
    if args.forward:
        transactions = read_transactions_forward(args.path, config)
    else:
        transactions = read_transactions(args.path, config)

    portfolio = Portfolio(transactions, carry_window_years=args.carry_years)
    return portfolio.report(args.year)


def main(argv: Optional[List[str]] = None) -> int:
    settings = get_settings()
    parser = create_parser(settings)
    args = parser.parse_args(argv)

    setup_logging("DEBUG" if args.verbose else settings.log_level)

    if args.carry_years < 0:
        parser.error("--carry-years must be non-negative")

    try:
        report = run(args, settings)
        if args.json:
            data = report.to_dict()
            validate_tax_report(data)
            output = json.dumps(data, indent=2)
        else:
            output = render_text(report)
    except TaxReportError as e:
        logger.error("report failed: %s", e)
        print(f"error: {e}", file=sys.stderr)
        return 1
    except jsonschema.ValidationError as e:
        logger.error("report violates tax_report contract: %s", e.message)
        print(f"error: report violates tax_report contract: {e.message}", file=sys.stderr)
        return 1

    print(output)
    return 0


if __name__ == "__main__":
    sys.exit(main())

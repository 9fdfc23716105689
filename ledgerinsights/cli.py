from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

from ledgerinsights.application.services.insights_service import InsightsService
from ledgerinsights.domain.enums import Interval
from ledgerinsights.domain.errors import DomainError
from ledgerinsights.infrastructure.hledger.gateway import HledgerGateway, gateway_config_from_settings
from ledgerinsights.logger import setup_logging
from ledgerinsights.settings import load_settings


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ledgerinsights",
        description="Financial insights from an hledger journal.",
    )
    parser.add_argument("--root", type=Path, default=Path.cwd(), help="project root, used to locate data/*.journal")
    parser.add_argument("-f", "--file", dest="ledger_file", default=None, help="journal file, overrides settings")
    sub = parser.add_subparsers(dest="command", required=True)

    breakdown = sub.add_parser("breakdown", help="spending by category")
    breakdown.add_argument("-p", "--period", required=True)
    breakdown.add_argument("--depth", type=int, default=2)
    breakdown.add_argument("--category", dest="category_filter", default=None)

    trends = sub.add_parser("trends", help="income vs expenses per period")
    trends.add_argument("-p", "--period", required=True)
    trends.add_argument("--interval", choices=[i.value for i in Interval], default=Interval.MONTHLY.value)

    summary = sub.add_parser("summary", help="net worth, cashflow and savings rate")
    summary.add_argument("-p", "--period", default=None)

    forecast = sub.add_parser("forecast", help="net worth projection")
    forecast.add_argument("-p", "--period", default="last 12 months")
    forecast.add_argument("--months", type=int, default=9)

    sub.add_parser("serve", help="run the HTTP API")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    settings = load_settings()
    setup_logging(settings)
    root = args.root.resolve()

    if args.command == "serve":
        from ledgerinsights.api.app import serve

        serve(root, host=settings.host, port=settings.port)
        return 0

    config = gateway_config_from_settings(root, settings)
    if args.ledger_file:
        config = config.with_journal(Path(args.ledger_file).expanduser().resolve())
    service = InsightsService(HledgerGateway(config))

    try:
        if args.command == "breakdown":
            result = service.spending_breakdown(args.period, args.depth, args.category_filter)
        elif args.command == "trends":
            result = service.financial_trends(args.period, args.interval)
        elif args.command == "summary":
            result = service.financial_summary(args.period)
        else:
            result = service.net_worth_forecast(args.period, months=args.months)
    except DomainError as exc:
        print(json.dumps({"error": {"code": exc.code, "message": exc.message, "details": exc.details}}, ensure_ascii=False), file=sys.stderr)
        return 1

    print(json.dumps(result.to_dict(), ensure_ascii=False, indent=2))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())

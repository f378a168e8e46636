"""Command-line utilities for web_carbon."""

from __future__ import annotations

import argparse
import json
import logging
import sys

from .analyzer import WebCarbonAnalyzer, run_analysis
from .errors import AnalysisError
from .estimation.allocation import score_rating
from .history import AnalysisHistory
from .logging_pipeline import configure_structured_logging, shutdown_listeners
from .schemas import AnalysisReport
from .settings import get_settings


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="web-carbon",
        description="Estimate the carbon footprint of a web page visit.",
    )
    subcommands = parser.add_subparsers(dest="command", required=True)

    analyze_cmd = subcommands.add_parser("analyze", help="Analyse a page URL.")
    analyze_cmd.add_argument("url", help="Page URL; https:// is assumed if omitted.")
    analyze_cmd.add_argument(
        "--visits",
        "-v",
        type=int,
        default=None,
        help="Monthly visits used for yearly figures (default: 10000).",
    )
    analyze_cmd.add_argument(
        "--region",
        "-r",
        default=None,
        help="Grid region code, e.g. global, eu, uk, us, asia, africa.",
    )
    analyze_cmd.add_argument(
        "--json",
        action="store_true",
        help="Print the full report as JSON instead of a summary.",
    )
    analyze_cmd.add_argument(
        "--log-json",
        action="store_true",
        help="Emit structured JSON logs on stderr.",
    )
    analyze_cmd.add_argument(
        "--history",
        metavar="PATH",
        help="Append the analysis to this NDJSON history file.",
    )

    history_cmd = subcommands.add_parser("history", help="List stored analyses.")
    history_cmd.add_argument(
        "--path", help="History file; defaults to WEB_CARBON_HISTORY_PATH."
    )
    history_cmd.add_argument("--limit", type=int, default=20)
    history_cmd.add_argument("--offset", type=int, default=0)
    history_cmd.add_argument("--domain", help="Only list analyses of this domain.")
    return parser


def _summary(report: AnalysisReport) -> str:
    hosting = "green" if report.green_hosting else "not verified green"
    lines = [
        f"URL:            {report.url}",
        f"Region:         {report.region}",
        f"Page size:      {report.page_size_mb:.2f} MB ({report.total_requests} requests)",
        f"Hosting:        {hosting}",
        f"CO2 per visit:  {report.co2_per_visit:.2f} g",
        f"CO2 per year:   {report.yearly_co2:.2f} g ({report.monthly_visits} visits/month)",
        f"Green score:    {report.green_score}/100 ({score_rating(report.green_score)})",
        f"vs average:     {report.average_website.cleaner_than_average:+d}%",
    ]
    return "\n".join(lines)


def _run_analyze(args: argparse.Namespace) -> int:
    settings = get_settings()
    sink = AnalysisHistory(args.history) if args.history else None
    analyzer = WebCarbonAnalyzer(settings=settings, sink=sink)
    report = run_analysis(args.url, args.visits, args.region, analyzer=analyzer)
    if args.json:
        print(json.dumps(report.to_public_dict(), indent=2))
    else:
        print(_summary(report))
    return 0


def _run_history(args: argparse.Namespace) -> int:
    path = args.path or get_settings().history_path
    if not path:
        raise ValueError("No history file. Use --path or set WEB_CARBON_HISTORY_PATH.")
    page = AnalysisHistory(path).recent(args.limit, args.offset, args.domain)
    print(page.model_dump_json(indent=2))
    return 0


def main(argv: list[str] | None = None) -> int:
    """Run the web-carbon command line."""

    parser = _build_parser()
    try:
        args = parser.parse_args(argv)
    except SystemExit as exc:  # pragma: no cover - controlled via tests
        exit_code = int(exc.code) if isinstance(exc.code, int) else 1
        return 0 if exit_code == 0 else 2

    listeners = []
    if getattr(args, "log_json", False):
        listeners.append(configure_structured_logging(level=logging.INFO))
    try:
        if args.command == "analyze":
            return _run_analyze(args)
        return _run_history(args)
    except AnalysisError as exc:
        print(json.dumps(exc.to_dict()), file=sys.stderr)
        return 1
    except (ValueError, OSError) as exc:
        print(str(exc), file=sys.stderr)
        return 1
    finally:
        shutdown_listeners(listeners)


if __name__ == "__main__":
    raise SystemExit(main())

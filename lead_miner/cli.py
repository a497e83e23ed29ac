"""CLI entry point for Lead Miner."""

from __future__ import annotations

import argparse
import json
import sys
from typing import List, Optional

from .aggregator import AggregationEvent, LeadAggregator
from .config import ConfigError, get_settings
from .exporter import export_filename, export_to_csv, export_to_excel
from .models import Location
from .sources.gemini import GeminiSearchClient
from .utils import logger


def _log_event(event: AggregationEvent) -> None:
    if event.kind == "progress":
        logger.info(event.message)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Lead Miner - Extract business leads with a grounded Gemini search"
    )
    parser.add_argument("query", help="Search query (e.g., 'dentists downtown')")
    parser.add_argument("--lat", type=float, default=None, help="Latitude used to bias results")
    parser.add_argument("--lng", type=float, default=None, help="Longitude used to bias results")
    parser.add_argument("-o", "--output", default=None, help="Output file (default derived from the query)")
    parser.add_argument("--csv", action="store_true", help="Write CSV instead of Excel")
    parser.add_argument("--json", action="store_true", help="Print results as JSON to stdout")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    settings = get_settings()

    try:
        client = GeminiSearchClient(
            api_key=settings.require_api_key(),
            model=settings.gemini_model,
            max_output_tokens=settings.max_output_tokens,
            thinking_budget=settings.thinking_budget,
        )
    except ConfigError as e:
        logger.error(str(e))
        return 2

    aggregator = LeadAggregator(client, page_delay=settings.page_delay)
    location = Location.from_values(args.lat, args.lng)

    logger.info(f"Starting lead search for: {args.query}")
    outcome = aggregator.run_search(args.query, location=location, listener=_log_event)

    if not outcome.ok or not outcome.result.contacts:
        logger.warning(outcome.message or "No results found")
        return 1
    if outcome.is_partial:
        logger.warning(outcome.message)

    contacts = outcome.result.contacts
    logger.info(f"Total unique leads extracted: {len(contacts)}")

    if args.json:
        payload = {
            "contacts": [c.to_row() for c in contacts],
            "sources": [s.to_dict() for s in outcome.result.sources],
        }
        print(json.dumps(payload, indent=2, ensure_ascii=False))
        return 0

    extension = "csv" if args.csv else "xlsx"
    output = args.output or export_filename(args.query, extension)
    if args.csv:
        export_to_csv(contacts, output)
    else:
        export_to_excel(contacts, output)
    logger.info(f"Data saved to {output}")
    return 0


if __name__ == "__main__":
    sys.exit(main())

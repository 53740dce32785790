import sys
import asyncio
import argparse
import json
from pathlib import Path
from typing import Any, Dict, List, Optional

from clubstats.logging.setup import setup_logging
from clubstats.config.settings import settings

setup_logging()

from loguru import logger

from clubstats.analysis.completeness import has_half_time_stats
from clubstats.analysis.computed import with_computed_stats
from clubstats.charts.aggregator import ChartRequestError, aggregate, parse_chart_request
from clubstats.classification.layout import organize_fields, split_by_side
from clubstats.normalization.deduplicator import (
    RawRecord,
    deduplicate_columns,
    deduplicate_records,
)
from clubstats.storage.supabase_client import (
    StorageError,
    fetch_match_records,
    initialize_supabase,
)

from rich import print
from rich.panel import Panel
from rich.table import Table


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Canonicalize match stats and build chart series."
    )
    source = parser.add_mutually_exclusive_group(required=True)
    source.add_argument("--records", type=Path, help="JSON file holding a list of raw match records.")
    source.add_argument("--supabase", action="store_true", help="Read match rows from Supabase.")
    parser.add_argument("--team-id", type=int, action="append", dest="team_ids", help="Restrict Supabase rows to a team (repeatable).")
    parser.add_argument("--chart", type=Path, help="JSON chart render request to aggregate.")
    return parser.parse_args(argv)


def load_json(path: Path) -> Any:
    with open(path, "r", encoding="utf-8") as f:
        return json.load(f)


async def load_records(args: argparse.Namespace) -> List[RawRecord]:
    if args.records:
        records = load_json(args.records)
        if not isinstance(records, list):
            raise ValueError(f"{args.records} must contain a JSON list of records.")
        logger.info(f"Loaded {len(records)} raw records from {args.records}")
        return records

    client = await initialize_supabase()
    if not client:
        logger.critical("Failed to initialize Supabase client. Exiting.")
        return []
    return await fetch_match_records(client, team_ids=args.team_ids)


def print_field_layout(columns: List[str]) -> None:
    table = Table(title="Editable fields by category")
    table.add_column("Category", style="cyan")
    table.add_column("Team")
    table.add_column("Opponent")
    for category, fields in organize_fields(columns).items():
        team, opponent = split_by_side(fields)
        table.add_row(category.value, "\n".join(team), "\n".join(opponent))
    print(table)


async def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the application."""
    args = parse_args(argv)
    logger.debug(f"Merge tie policy: {settings.merge_tie_policy}")

    chart_request = None
    if args.chart:
        try:
            chart_request = parse_chart_request(load_json(args.chart))
        except ChartRequestError as e:
            logger.error(str(e))
            return 2

    try:
        raw_records = await load_records(args)
    except (OSError, ValueError, StorageError) as e:
        logger.error(f"Could not load records: {e}")
        return 1

    records = [with_computed_stats(record) for record in deduplicate_records(raw_records)]
    columns = deduplicate_columns(raw_records)
    with_halves = sum(1 for record in records if has_half_time_stats(record))
    logger.success(
        f"Deduplicated {len(records)} records into {len(columns)} canonical columns "
        f"({with_halves} with half-time stats)."
    )
    print_field_layout(columns)

    if chart_request is not None:
        collection = aggregate(records, chart_request)
        payload: Dict[str, Any] = collection.to_payload()
        print(Panel(json.dumps(payload, indent=2, default=str), title=f"Chart: {payload['xLabel']}"))

    return 0


if __name__ == "__main__":
    try:
        sys.exit(asyncio.run(main()))
    except KeyboardInterrupt:
        logger.info("Execution interrupted by user (KeyboardInterrupt).")
        sys.exit(0)
    except Exception as e:
        logger.exception(f"Unhandled exception in main execution: {e}")
        sys.exit(1)

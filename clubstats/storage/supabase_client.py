# clubstats/storage/supabase_client.py
from typing import Any, Dict, List, Optional

from loguru import logger
from postgrest import APIResponse
from postgrest.exceptions import APIError
from supabase import AsyncClient, create_async_client

from clubstats.config.settings import settings
from clubstats.normalization.deduplicator import RawRecord

# Module-level storage for the async client instance
_async_supabase_client: Optional[AsyncClient] = None


class StorageError(Exception):
    """Raised when match rows cannot be read from storage."""

    pass


async def initialize_supabase() -> Optional[AsyncClient]:
    """Initializes the global ASYNC Supabase client and returns it."""
    global _async_supabase_client
    if _async_supabase_client:
        logger.debug("Async Supabase client already initialized.")
        return _async_supabase_client

    if not settings.supabase_url or not settings.supabase_key:
        logger.critical("Supabase URL or Key not configured in settings.")
        raise SystemExit("Supabase configuration missing.")

    logger.debug(f"Initializing Async Supabase client with URL: {settings.supabase_url}")

    try:
        client: AsyncClient = await create_async_client(
            settings.supabase_url, settings.supabase_key
        )
        _async_supabase_client = client
        logger.success("Async Supabase client initialized successfully.")
        return client
    except Exception as e:
        logger.exception(f"Failed to initialize Async Supabase client: {e}")
        return None


def match_row_to_record(row: Dict[str, Any]) -> RawRecord:
    """Flatten a `matches` row into a raw record.

    Match metadata lands under its display name; `stats_json` keys are copied
    as-is so the deduplicator can fold their many spellings later.
    """
    is_home = row.get("is_home")
    record: RawRecord = {
        "Match ID": row.get("id"),
        "Opponent": row.get("opponent_name"),
        "Date": row.get("match_date"),
        "Competition Type": row.get("competition_type") or "",
        "Result": row.get("result") or "",
        "Home/Away": "Home" if is_home is True else "Away" if is_home is False else "",
        "Venue": row.get("venue") or "",
        "Referee": row.get("referee") or "",
        "Notes": row.get("notes") or "",
    }

    stats = row.get("stats_json") or {}
    if not isinstance(stats, dict):
        logger.warning(
            f"Match {row.get('id')}: stats_json is {type(stats).__name__}, not an object. Ignoring stats."
        )
        stats = {}
    for key, value in stats.items():
        record[key] = value
        # A Match ID typed into the form overrides the database id
        if key.lower() in ("match id", "matchid"):
            record["Match ID"] = value

    if row.get("team_id"):
        record["Team ID"] = row["team_id"]

    return record


async def fetch_match_records(
    supabase_client: AsyncClient,
    team_ids: Optional[List[int]] = None,
    start_date: Optional[str] = None,
    end_date: Optional[str] = None,
) -> List[RawRecord]:
    """Fetch match rows and convert them to raw records.

    Raises:
        StorageError: if the Supabase API call fails.
    """
    query = supabase_client.table(settings.matches_table).select("*")
    if team_ids:
        query = query.in_("team_id", team_ids)
    if start_date:
        query = query.gte("match_date", start_date)
    if end_date:
        query = query.lte("match_date", end_date)

    try:
        response: APIResponse = await query.order("match_date").execute()
    except APIError as e:
        logger.error(f"Supabase API error fetching matches: {e.message}")
        logger.debug(f"Full APIError details: {e}")
        raise StorageError(f"Failed to fetch matches: {e.message}") from e

    rows = response.data or []
    logger.info(f"Fetched {len(rows)} match rows from '{settings.matches_table}'.")
    return [match_row_to_record(row) for row in rows]

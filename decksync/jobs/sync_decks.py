"""
Sync decks from Airtable into the site's JSON files.

Fetches every row of the decks table, normalizes rows concurrently
(downloading attachment deck lists where needed), drops rows without a
usable name, and writes data/index.json plus data/decks/<slug>.json.

Run as a one-shot job:
    python -m decksync.jobs.sync_decks --output-dir data
"""

import argparse
import asyncio
import logging
from collections import Counter
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path

import httpx
from pydantic import ValidationError

from decksync.clients.airtable import AirtableClient
from decksync.config import SyncConfig, build_sync_config
from decksync.models.deck import DeckRecord
from decksync.models.failure import (
    DeckSyncError,
    NormalizationFailedError,
    Normalized,
    NormalizeOutcome,
    Skipped,
    SkipReason,
)
from decksync.models.source import SourceRow
from decksync.services.attachments import resolve_decklist_text
from decksync.services.normalizer import FIELD_LIST, dedupe_slugs, normalize_record
from decksync.services.writer import WriteResult, write_outputs

logger = logging.getLogger(__name__)


@dataclass
class SyncReport:
    """
    Outcome of a sync run.

    Attributes:
        fetched: Rows returned by Airtable
        decks: Decks that passed validation, in index order
        skipped: Count of dropped rows per reason
        write_result: Files written, or None on a dry run
    """

    fetched: int
    decks: list[DeckRecord] = field(default_factory=list)
    skipped: dict[SkipReason, int] = field(default_factory=dict)
    write_result: WriteResult | None = None

    @property
    def written(self) -> int:
        return len(self.decks)


async def normalize_row(
    row: SourceRow,
    airtable: AirtableClient,
    semaphore: asyncio.Semaphore,
    now: datetime,
) -> NormalizeOutcome:
    """Resolve a row's deck list and normalize it."""
    async with semaphore:
        text = await resolve_decklist_text(row.get(FIELD_LIST), airtable.fetch_attachment_text)
    return normalize_record(row, text, now)


async def normalize_rows(
    rows: list[SourceRow],
    airtable: AirtableClient,
    config: SyncConfig,
    now: datetime,
) -> list[NormalizeOutcome]:
    """
    Normalize all rows concurrently and wait for every one to settle.

    Failures are isolated per row. Once all rows have finished, failed rows
    either abort the run (default) or become ATTACHMENT_FAILED skips when
    config.allow_partial is set.

    Raises:
        NormalizationFailedError: If any row failed and partial output is not allowed
    """
    semaphore = asyncio.Semaphore(config.max_concurrency)
    results = await asyncio.gather(
        *(normalize_row(row, airtable, semaphore, now) for row in rows),
        return_exceptions=True,
    )

    outcomes: list[NormalizeOutcome] = []
    failures: dict[str, Exception] = {}

    for row, result in zip(rows, results, strict=True):
        if isinstance(result, (DeckSyncError, httpx.HTTPError)):
            logger.error("Failed to normalize record %s: %s", row.id, result)
            failures[row.id] = result
            outcomes.append(
                Skipped(record_id=row.id, reason=SkipReason.ATTACHMENT_FAILED, detail=str(result))
            )
        elif isinstance(result, BaseException):
            raise result
        else:
            outcomes.append(result)

    if failures and not config.allow_partial:
        raise NormalizationFailedError(failures)

    return outcomes


async def run_sync(
    config: SyncConfig,
    *,
    http_client: httpx.AsyncClient | None = None,
    now: datetime | None = None,
    dry_run: bool = False,
) -> SyncReport:
    """
    Run one full fetch -> normalize -> write cycle.

    Args:
        config: Resolved configuration
        http_client: Optional client to reuse (tests, connection pooling)
        now: Sync timestamp. Defaults to current UTC time.
        dry_run: Fetch and normalize but write nothing

    Returns:
        SyncReport describing what was fetched, kept, skipped and written

    Raises:
        SourceFetchError: If listing the table fails; nothing is written
        NormalizationFailedError: If any row failed and partial output is not allowed
    """
    if now is None:
        now = datetime.now(timezone.utc)

    async with AirtableClient(config, client=http_client) as airtable:
        logger.info("Fetching Airtable records from %s...", config.table_name)
        rows = await airtable.fetch_all_rows()
        logger.info("Fetched %d rows", len(rows))

        outcomes = await normalize_rows(rows, airtable, config, now)

    outcomes = dedupe_slugs(outcomes)
    decks = [outcome.deck for outcome in outcomes if isinstance(outcome, Normalized)]
    skipped = Counter(outcome.reason for outcome in outcomes if isinstance(outcome, Skipped))

    report = SyncReport(fetched=len(rows), decks=decks, skipped=dict(skipped))

    if skipped:
        logger.info(
            "Skipped %d rows: %s",
            sum(skipped.values()),
            ", ".join(f"{reason.value}={count}" for reason, count in sorted(skipped.items())),
        )
    if not decks:
        logger.warning("No valid decks found")

    if dry_run:
        logger.info("Dry run: %d decks would be written to %s", len(decks), config.output_dir)
        return report

    report.write_result = write_outputs(decks, config.output_dir, now)
    logger.info(
        "Wrote %s and %d files in %s",
        report.write_result.index_path,
        len(decks),
        config.output_dir / "decks",
    )
    return report


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Sync decks from Airtable to JSON files")
    parser.add_argument(
        "--output-dir",
        type=Path,
        default=None,
        help="Directory for index.json and decks/ (default: DECKSYNC_OUTPUT_DIR or data)",
    )
    parser.add_argument(
        "--allow-partial",
        action="store_true",
        default=None,
        help="Skip decks whose attachment download fails instead of aborting",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Fetch and normalize without writing files",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    """CLI entry point. Returns the process exit code."""
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    try:
        config = build_sync_config(output_dir=args.output_dir, allow_partial=args.allow_partial)
        asyncio.run(run_sync(config, dry_run=args.dry_run))
    except ValidationError as e:
        logger.error("Invalid configuration: %s", e)
        return 1
    except DeckSyncError as e:
        logger.error("Deck sync failed: %s", e)
        return 1
    except httpx.HTTPError as e:
        logger.error("HTTP error during deck sync: %s", e)
        return 1

    return 0


if __name__ == "__main__":
    raise SystemExit(main())

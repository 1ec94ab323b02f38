"""
Output writer.

Writes index.json plus one decks/<slug>.json per deck. Files are
overwritten in place; files for decks that no longer exist upstream are
reported but never deleted.
"""

import json
import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from decksync.models.deck import DeckIndex, DeckRecord, IndexEntry
from decksync.services.normalizer import format_timestamp

logger = logging.getLogger(__name__)

INDEX_FILENAME = "index.json"
DECKS_DIRNAME = "decks"


@dataclass
class WriteResult:
    """Paths written by a sync run."""

    index_path: Path
    deck_paths: list[Path] = field(default_factory=list)
    stale_slugs: list[str] = field(default_factory=list)


def build_index(decks: list[DeckRecord], now: datetime | None = None) -> DeckIndex:
    """Project decks into the index, keeping their order."""
    if now is None:
        now = datetime.now(timezone.utc)
    return DeckIndex(
        updated_at=format_timestamp(now),
        decks=[IndexEntry.from_deck(deck) for deck in decks],
    )


def _write_json(path: Path, data: Any) -> None:
    path.write_text(json.dumps(data, ensure_ascii=False, indent=2) + "\n", encoding="utf-8")


def find_stale_slugs(decks_dir: Path, current: set[str]) -> list[str]:
    """Slugs with a JSON file in decks_dir that this run did not produce."""
    if not decks_dir.is_dir():
        return []
    return sorted(
        path.stem
        for path in decks_dir.iterdir()
        if path.is_file() and path.suffix.lower() == ".json" and path.stem not in current
    )


def write_outputs(
    decks: list[DeckRecord],
    output_dir: Path,
    now: datetime | None = None,
) -> WriteResult:
    """
    Write the index and per-deck files.

    Args:
        decks: Decks to publish, in index order
        output_dir: Root directory; decks/ is created beneath it
        now: Timestamp for the index's updatedAt. Defaults to current UTC time.

    Returns:
        WriteResult with written paths and stale slugs left on disk
    """
    decks_dir = output_dir / DECKS_DIRNAME
    decks_dir.mkdir(parents=True, exist_ok=True)

    index_path = output_dir / INDEX_FILENAME
    _write_json(index_path, build_index(decks, now).to_json_dict())

    deck_paths: list[Path] = []
    for deck in decks:
        path = decks_dir / f"{deck.slug}.json"
        _write_json(path, deck.to_json_dict())
        deck_paths.append(path)

    stale = find_stale_slugs(decks_dir, {deck.slug for deck in decks})
    if stale:
        logger.warning(
            "%d deck file(s) in %s have no matching record and were left in place: %s",
            len(stale),
            decks_dir,
            ", ".join(stale),
        )

    return WriteResult(index_path=index_path, deck_paths=deck_paths, stale_slugs=stale)

"""
Turns Airtable rows into DeckRecords.

All knowledge of what each Airtable column means lives here. Normalization
is pure given the resolved deck list text and the sync timestamp, so rows
can be processed in any order or concurrently.
"""

import logging
import re
from collections.abc import Iterable
from datetime import datetime, timezone

from decksync.models.deck import DeckList, DeckRecord
from decksync.models.failure import Normalized, NormalizeOutcome, Skipped, SkipReason
from decksync.models.source import (
    AttachmentsValue,
    FieldValue,
    ListValue,
    ScalarValue,
    SourceRow,
    TextValue,
)
from decksync.parsers.decklist import split_main_side

logger = logging.getLogger(__name__)

# Airtable column labels
FIELD_NAME = "Deck Name"
FIELD_LIST = "Deck List"
FIELD_COVER_CARD = "Cover Card"
FIELD_ARCHETYPE = "Archetype"
FIELD_CHARACTERISTICS = "Characteristics"
FIELD_DATE_UPDATED = "Date Updated"
FIELD_COLORS = "Color(s)"
FIELD_AUTHOR = "Author"
FIELD_FORMAT = "Format"
FIELD_BANNED = "Contains Banned Cards?"

TRUTHY_STRINGS = frozenset({"true", "yes", "y", "1"})

_QUOTES = re.compile(r"['\"]")
_NON_ALNUM_RUN = re.compile(r"[^a-z0-9]+")


def slugify(name: str | None) -> str:
    """
    Derive a URL-safe slug from a deck name.

    Lowercases, drops quote characters, collapses every run of other
    non-alphanumeric characters into one hyphen, and trims hyphens.

    Example:
        slugify("Mono Red Aggro!") -> "mono-red-aggro"
        slugify("Urza's Tron") -> "urzas-tron"
    """
    text = (name or "").strip().lower()
    text = _QUOTES.sub("", text)
    text = _NON_ALNUM_RUN.sub("-", text)
    return text.strip("-")


def format_timestamp(moment: datetime) -> str:
    """Format as ISO-8601 UTC with millisecond precision and a Z suffix."""
    utc = moment.astimezone(timezone.utc) if moment.tzinfo else moment.replace(tzinfo=timezone.utc)
    return utc.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def to_text(value: FieldValue | None) -> str:
    """Coerce a field to a single string; absent -> ""."""
    if value is None:
        return ""
    if isinstance(value, TextValue):
        return value.text
    if isinstance(value, ListValue):
        return ", ".join(value.items)
    if isinstance(value, ScalarValue):
        return "" if value.raw is None else str(value.raw)
    # Attachments carry no inline text
    return ""


def to_string_list(value: FieldValue | None) -> list[str]:
    """
    Coerce a field to a list of strings.

    Absent -> [], a single value -> [value], a list -> the list unchanged.
    """
    if value is None:
        return []
    if isinstance(value, ListValue):
        return list(value.items)
    if isinstance(value, AttachmentsValue):
        return [ref.filename or ref.url for ref in value.refs]
    return [to_text(value)]


def normalize_bool(value: object) -> bool:
    """
    Coerce Airtable's assorted truthy representations.

    Booleans pass through, strings match {"true", "yes", "y", "1"}
    case-insensitively, numbers are true when non-zero. Anything else is False.
    """
    if isinstance(value, (TextValue, ScalarValue)):
        value = value.text if isinstance(value, TextValue) else value.raw
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        return value.strip().lower() in TRUTHY_STRINGS
    if isinstance(value, (int, float)):
        return value != 0
    return False


def parse_updated_at(value: FieldValue | None, now: datetime) -> str:
    """
    Resolve the deck's last-updated timestamp.

    Accepts ISO-8601 dates ("2024-05-01") and datetimes (with "Z" or an
    offset; naive values are taken as UTC). Falls back to `now` when the
    value is missing or unparseable.
    """
    text = to_text(value).strip()
    if not text:
        return format_timestamp(now)

    try:
        return format_timestamp(datetime.fromisoformat(text))
    except (ValueError, OverflowError):
        # OverflowError: parses, but falls outside datetime's range once shifted to UTC
        logger.debug("Unparseable %s value %r, using sync time", FIELD_DATE_UPDATED, text)
        return format_timestamp(now)


def normalize_record(row: SourceRow, decklist_text: str, now: datetime) -> NormalizeOutcome:
    """
    Build a DeckRecord from a row.

    Args:
        row: Airtable row
        decklist_text: The row's deck list, already resolved from inline
            text or an attachment
        now: Sync timestamp, used when the row has no usable update date

    Returns:
        Normalized(deck), or Skipped when the row has no name or the name
        yields an empty slug
    """
    name = to_text(row.get(FIELD_NAME)).strip()
    if not name:
        return Skipped(record_id=row.id, reason=SkipReason.MISSING_NAME)

    slug = slugify(name)
    if not slug:
        return Skipped(record_id=row.id, reason=SkipReason.EMPTY_SLUG, detail=name)

    split = split_main_side(decklist_text)

    deck = DeckRecord(
        id=row.id,
        slug=slug,
        name=name,
        author=to_text(row.get(FIELD_AUTHOR)),
        format=to_text(row.get(FIELD_FORMAT)),
        archetype=to_text(row.get(FIELD_ARCHETYPE)),
        characteristics=to_string_list(row.get(FIELD_CHARACTERISTICS)),
        colors=to_string_list(row.get(FIELD_COLORS)),
        updated_at=parse_updated_at(row.get(FIELD_DATE_UPDATED), now),
        contains_banned_cards=normalize_bool(row.get(FIELD_BANNED)),
        cover_card=to_text(row.get(FIELD_COVER_CARD)).strip(),
        decklist=DeckList(
            raw=decklist_text,
            main_text=split.main_text,
            side_text=split.side_text,
        ),
    )
    return Normalized(deck)


def dedupe_slugs(outcomes: Iterable[NormalizeOutcome]) -> list[NormalizeOutcome]:
    """
    Keep only the first deck claiming each slug.

    Outcomes arrive in fetch order (most recently updated first), so the
    newest row wins. Later rows with the same slug become DUPLICATE_SLUG skips.
    """
    claimed: dict[str, str] = {}
    result: list[NormalizeOutcome] = []

    for outcome in outcomes:
        if isinstance(outcome, Normalized):
            slug = outcome.deck.slug
            if slug in claimed:
                logger.warning(
                    "Record %s has slug %r already used by %s; skipping",
                    outcome.deck.id,
                    slug,
                    claimed[slug],
                )
                outcome = Skipped(
                    record_id=outcome.deck.id,
                    reason=SkipReason.DUPLICATE_SLUG,
                    detail=slug,
                )
            else:
                claimed[slug] = outcome.deck.id
        result.append(outcome)

    return result

"""
Failure taxonomy for the deck sync job.

Fatal conditions are exceptions deriving from DeckSyncError. Records that
are dropped for validation reasons are not errors: normalization returns a
Skipped outcome carrying a SkipReason so the job can count and report them.
"""

from dataclasses import dataclass
from enum import Enum

from decksync.models.deck import DeckRecord


class DeckSyncError(Exception):
    """Base class for all sync failures."""


class ConfigError(DeckSyncError):
    """Raised when required environment variables are missing."""

    def __init__(self, missing: list[str]) -> None:
        self.missing = list(missing)
        super().__init__(f"Missing required environment variable(s): {', '.join(self.missing)}")


class SourceFetchError(DeckSyncError):
    """Raised when the Airtable listing endpoint returns a non-success status."""

    def __init__(self, status_code: int, body: str) -> None:
        self.status_code = status_code
        self.body = body
        super().__init__(f"Airtable {status_code}: {body}")


class AttachmentFetchError(DeckSyncError):
    """Raised when a deck list attachment cannot be downloaded."""

    def __init__(self, url: str, status_code: int) -> None:
        self.url = url
        self.status_code = status_code
        super().__init__(f"Failed to fetch deck list attachment {url}: HTTP {status_code}")


class NormalizationFailedError(DeckSyncError):
    """
    Raised after all records settle when one or more failed to normalize.

    Attributes:
        failures: Record id -> exception raised while normalizing it
    """

    def __init__(self, failures: dict[str, Exception]) -> None:
        self.failures = dict(failures)
        details = "; ".join(f"{record_id}: {exc}" for record_id, exc in self.failures.items())
        super().__init__(f"{len(self.failures)} record(s) failed to normalize: {details}")


class SkipReason(str, Enum):
    """Why a source row produced no output."""

    MISSING_NAME = "missing_name"
    EMPTY_SLUG = "empty_slug"
    DUPLICATE_SLUG = "duplicate_slug"
    ATTACHMENT_FAILED = "attachment_failed"


@dataclass(frozen=True)
class Normalized:
    """A source row that became a publishable deck."""

    deck: DeckRecord


@dataclass(frozen=True)
class Skipped:
    """A source row that was dropped, with the reason."""

    record_id: str
    reason: SkipReason
    detail: str | None = None


NormalizeOutcome = Normalized | Skipped

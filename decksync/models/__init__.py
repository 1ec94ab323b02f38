from decksync.models.deck import DeckIndex, DeckList, DeckRecord, IndexEntry
from decksync.models.failure import (
    AttachmentFetchError,
    ConfigError,
    DeckSyncError,
    NormalizationFailedError,
    NormalizeOutcome,
    Normalized,
    Skipped,
    SkipReason,
    SourceFetchError,
)
from decksync.models.source import (
    AttachmentRef,
    AttachmentsValue,
    FieldValue,
    ListValue,
    ScalarValue,
    SourceRow,
    TextValue,
    classify_field_value,
)

__all__ = [
    "AttachmentFetchError",
    "AttachmentRef",
    "AttachmentsValue",
    "ConfigError",
    "DeckIndex",
    "DeckList",
    "DeckRecord",
    "DeckSyncError",
    "FieldValue",
    "IndexEntry",
    "ListValue",
    "NormalizationFailedError",
    "NormalizeOutcome",
    "Normalized",
    "ScalarValue",
    "SkipReason",
    "Skipped",
    "SourceFetchError",
    "SourceRow",
    "TextValue",
    "classify_field_value",
]

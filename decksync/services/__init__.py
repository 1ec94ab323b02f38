from decksync.services.attachments import resolve_decklist_text, select_attachment
from decksync.services.normalizer import (
    dedupe_slugs,
    normalize_bool,
    normalize_record,
    slugify,
    to_string_list,
)
from decksync.services.writer import WriteResult, build_index, write_outputs

__all__ = [
    "WriteResult",
    "build_index",
    "dedupe_slugs",
    "normalize_bool",
    "normalize_record",
    "resolve_decklist_text",
    "select_attachment",
    "slugify",
    "to_string_list",
    "write_outputs",
]
